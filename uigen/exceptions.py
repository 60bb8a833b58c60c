"""Typed exception hierarchy. Every error UIGen can raise."""


class UIGenError(Exception):
    """Base exception for all UIGen errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


# ── Virtual file system ─────────────────────────────────────────────────────


class FileSystemError(UIGenError):
    """Base exception for virtual file system failures."""
    def __init__(self, message: str, path: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class NotFound(FileSystemError):
    """Operation target does not exist."""
    pass


class AlreadyExists(FileSystemError):
    """Create or rename target collides with an existing node."""
    pass


class InvalidPath(FileSystemError):
    """Path cannot be used for this operation (root, directory-as-file, self-nesting)."""
    pass


# ── Tools ───────────────────────────────────────────────────────────────────


class ToolError(UIGenError):
    """Tool lookup or execution failed."""
    def __init__(self, message: str, tool_name: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.tool_name = tool_name


class InvalidCommand(ToolError):
    """Tool received a command outside its vocabulary."""
    def __init__(self, message: str, command: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.command = command


# ── Preview pipeline ────────────────────────────────────────────────────────


class PreviewError(UIGenError):
    """Base exception for preview compilation problems."""
    pass


class TransformFailure(PreviewError):
    """A single file's source could not be lowered to executable script."""
    def __init__(self, message: str, path: str = "", line: int = 0, column: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.line = line
        self.column = column


class UnresolvedImport(PreviewError):
    """An import specifier did not resolve to any file.

    Collected as a GraphError during resolution; never raised across the pipeline.
    """
    def __init__(self, message: str, path: str = "", specifier: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.specifier = specifier


class NoEntryPoint(PreviewError):
    """Files exist but none can be mounted as the preview entry."""
    pass


class EmptyProject(PreviewError):
    """The project has no files at all."""
    pass
