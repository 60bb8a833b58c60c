"""Pydantic models for API request/response. Mirrors types.py for API I/O."""

from pydantic import BaseModel, Field
from typing import Any, Optional


# ── Requests ──

class CreateSessionRequest(BaseModel):
    nodes: Optional[dict[str, dict[str, Any]]] = None   # serialized node map to start from


class ReplaceFilesRequest(BaseModel):
    nodes: dict[str, dict[str, Any]] = Field(default_factory=dict)


# ── Responses ──

class HealthResponse(BaseModel):
    status: str                         # "ok"
    version: str
    sessions: int = 0

class ToolResponse(BaseModel):
    name: str
    description: str
    risk_level: str
    mutates: bool
    parameters: dict[str, Any]

class SessionResponse(BaseModel):
    session_id: str
    refresh_counter: int

class FilesResponse(BaseModel):
    session_id: str
    refresh_counter: int
    nodes: dict[str, dict[str, str]]    # {path: {"type", "content"}}

class ToolCallResponse(BaseModel):
    result: Any = None                  # str for the text editor, {success, message|error} for the file manager
    error: Optional[str] = None         # set only when the tool could not run
    refresh_counter: int
