"""Custom exception classes for the Dusk MCP server.

This module defines a hierarchy of exceptions for consistent error handling
across tool handlers, the dispatcher and the resource catalog. All exceptions
inherit from DuskMCPError to allow catch-all handling when needed.

Exception Hierarchy:
    DuskMCPError (base)
    ├── ValidationError (rendered as tool text)
    │   ├── InvalidProjectError (path is not a Laravel project)
    │   ├── MissingArgumentError (required tool argument absent)
    │   └── InvalidArgumentError (tool argument has wrong type/value)
    ├── ExecutionError (rendered as tool text)
    │   ├── CommandExecutionError (runner exited non-zero or failed to start)
    │   └── ArtifactError (screenshot/log file operation failures)
    ├── UnknownToolError (propagates to the protocol layer)
    └── ResourceError
        ├── UnknownResourceError (propagates to the protocol layer)
        └── ResourceReadError (propagates to the protocol layer)
"""

from typing import Any


class DuskMCPError(Exception):
    """Base exception for all dusk-mcp errors.

    Attributes:
        message: Human-readable error description.
        detail: Technical details for debugging (optional).
    """

    def __init__(self, message: str, detail: str | None = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for JSON output."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(DuskMCPError):
    """Base exception for rejected input (project paths, tool arguments)."""


class InvalidProjectError(ValidationError):
    """Raised when a directory is not a valid Laravel project."""

    def __init__(self, path: str, message: str | None = None) -> None:
        msg = message or f"Not a valid Laravel project: {path}"
        super().__init__(msg, detail=f"path: {path}")
        self.path = path


class MissingArgumentError(ValidationError):
    """Raised when a required tool argument is not supplied."""

    def __init__(self, tool: str, field: str) -> None:
        super().__init__(
            f"Missing required argument '{field}' for tool '{tool}'",
            detail=f"field: {field}",
        )
        self.tool = tool
        self.field = field


class InvalidArgumentError(ValidationError):
    """Raised when a tool argument is present but has an invalid value."""

    def __init__(self, tool: str, field: str, reason: str) -> None:
        super().__init__(
            f"Invalid argument '{field}' for tool '{tool}': {reason}",
            detail=f"field: {field}",
        )
        self.tool = tool
        self.field = field
        self.reason = reason


class ExecutionError(DuskMCPError):
    """Base exception for failures while carrying out a tool's work."""


class CommandExecutionError(ExecutionError):
    """Raised when an external command fails.

    This includes non-zero exit codes and failures to start the shell.
    The captured output is kept so callers can still inspect it.
    """

    def __init__(
        self,
        command: str,
        stdout: str = "",
        stderr: str = "",
        return_code: int | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"Command failed: {command}"
            if stderr.strip():
                message += f"\n{stderr.strip()}"

        detail_parts = [f"command: {command}"]
        if return_code is not None:
            detail_parts.append(f"exit_code: {return_code}")

        super().__init__(message, detail="; ".join(detail_parts))
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.return_code = return_code


class ArtifactError(ExecutionError):
    """Raised when a screenshot or log file operation fails."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, detail=f"path: {path}" if path else None)
        self.path = path


class UnknownToolError(DuskMCPError):
    """Raised when a tool name is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ResourceError(DuskMCPError):
    """Base exception for resource access errors."""

    def __init__(self, message: str, uri: str, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)
        self.uri = uri

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["uri"] = self.uri
        return result


class UnknownResourceError(ResourceError):
    """Raised when a resource URI uses an unsupported scheme."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Unknown resource type: {uri}", uri=uri)


class ResourceReadError(ResourceError):
    """Raised when a resource file is missing or cannot be read."""

    def __init__(self, uri: str, path: str | None = None, reason: str | None = None) -> None:
        msg = f"Failed to read resource {uri}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, uri=uri, detail=f"file: {path}" if path else None)
        self.path = path
