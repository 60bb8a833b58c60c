"""All shared types, enums, and type aliases. Everything imports from here."""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


# ── Enums ──────────────────────────────────────────────────────────────

class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"

class RiskLevel(str, Enum):
    LOW = "low"         # read-only operations
    MEDIUM = "medium"   # writes, reversible by another edit
    HIGH = "high"       # deletes or moves whole subtrees

class PreviewState(str, Enum):
    WELCOME = "welcome"     # no files yet, first observation
    EMPTY = "empty"         # no files after having had some
    NO_ENTRY = "no_entry"   # files exist but no component to mount
    READY = "ready"         # document assembled (possibly with diagnostics)

class GraphErrorKind(str, Enum):
    UNRESOLVED_IMPORT = "unresolved_import"
    TRANSFORM_FAILURE = "transform_failure"


# ── Virtual file system ────────────────────────────────────────────────

class FileNode(BaseModel):
    """A single file or directory in the virtual file system."""
    path: str                           # absolute, normalized, unique key
    name: str                           # last path segment ("" for root)
    type: NodeType
    content: str = ""                   # files only
    children: list[str] = Field(default_factory=list)  # directories only, sorted child paths

    @property
    def is_directory(self) -> bool:
        return self.type == NodeType.DIRECTORY

class SerializedNode(BaseModel):
    """Persistence shape of one node: {"type": ..., "content": ...}."""
    type: NodeType
    content: str = ""


# ── Tools ──────────────────────────────────────────────────────────────

class ToolDefinition(BaseModel):
    """Registration record for a tool the agent can use."""
    name: str                           # unique identifier
    description: str                    # what it does (used by LLM for selection)
    parameters: dict[str, Any]          # JSON Schema for params
    risk_level: RiskLevel = RiskLevel.LOW
    mutates: bool = True                # whether any command can change the VFS

class ToolResult(BaseModel):
    """Structured result of a file manager command."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        """Wire shape: only the keys that are set."""
        return self.model_dump(exclude_none=True)


# ── Preview ────────────────────────────────────────────────────────────

class GraphError(BaseModel):
    """Non-fatal diagnostic carried alongside a (partial) module graph."""
    kind: GraphErrorKind
    path: str                           # importing file, or the file that failed to transform
    specifier: Optional[str] = None     # import text as written, for unresolved imports
    message: str

    def describe(self) -> str:
        return f"{self.path}: {self.message}"

class PreviewResult(BaseModel):
    """Outcome of one preview build, renderable in every state."""
    state: PreviewState
    html: Optional[str] = None
    entry_point: Optional[str] = None
    message: Optional[str] = None       # human-readable text for non-READY states
    diagnostics: list[str] = Field(default_factory=list)
    errors: list[GraphError] = Field(default_factory=list)
    generation: int = 0
