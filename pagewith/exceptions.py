"""Custom exception classes for pagewith."""

from dataclasses import asdict, dataclass
from typing import Optional


class PageWithException(Exception):
    """Base exception for all preview server errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code for API responses.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code for API responses.
        """
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize the error for a JSON response body."""
        return {"error": type(self).__name__, "message": self.message}


class EntryNotFoundError(PageWithException):
    """Raised when a requested entry module does not exist on disk."""

    def __init__(self, entry_path: str) -> None:
        """Initialize the exception.

        Args:
            entry_path: Absolute path of the missing entry module.
        """
        super().__init__(
            message=f'Failed to load an entry module at "{entry_path}": given file does not exist.',
            status_code=404,
        )
        self.entry_path = entry_path


class CompilerInvocationError(PageWithException):
    """Raised when the bundling engine could not run at all."""

    def __init__(self, entry_path: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            entry_path: Entry module the compilation was started for.
            reason: Underlying engine error.
        """
        super().__init__(
            message=f'Failed to invoke the bundler for "{entry_path}": {reason}',
            status_code=500,
        )
        self.entry_path = entry_path
        self.reason = reason


@dataclass(frozen=True)
class Diagnostic:
    """A single compiler diagnostic.

    Attributes:
        message: Diagnostic text as reported by the engine.
        file: Source file the diagnostic points at, if known.
        line: 1-based line number, if known.
        column: 0-based column, if known.
    """

    message: str
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.file is None:
            return self.message
        return f"{self.file}:{self.line}:{self.column}: {self.message}"


class CompilationError(PageWithException):
    """Raised when the module graph has real diagnostics."""

    def __init__(self, entry_path: str, diagnostics: list[Diagnostic]) -> None:
        """Initialize the exception.

        Args:
            entry_path: Entry module that failed to compile.
            diagnostics: Structured diagnostics reported by the engine.
        """
        summary = "; ".join(str(d) for d in diagnostics) or "unknown error"
        super().__init__(
            message=f'Failed to compile "{entry_path}": {summary}',
            status_code=500,
        )
        self.entry_path = entry_path
        self.diagnostics = list(diagnostics)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["diagnostics"] = [asdict(d) for d in self.diagnostics]
        return data


class AssetNotFoundError(PageWithException):
    """Raised when an asset path is absent from the asset store."""

    def __init__(self, path: str) -> None:
        super().__init__(message=f'Asset "{path}" not found', status_code=404)
        self.path = path


class AssetStreamError(PageWithException):
    """Raised when an asset could not be read from the asset store."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            message=f'Failed to read asset "{path}": {reason}',
            status_code=500,
        )
        self.path = path


class PageNotFoundError(PageWithException):
    """Raised when a preview page id is not registered."""

    def __init__(self, page_id: str) -> None:
        super().__init__(message=f"Page '{page_id}' not found", status_code=404)
        self.page_id = page_id


class BindError(PageWithException):
    """Raised when the HTTP listener fails to bind."""

    def __init__(self, host: str, port: int, reason: str) -> None:
        """Initialize the exception.

        Args:
            host: Requested host.
            port: Requested port.
            reason: Underlying socket error.
        """
        super().__init__(
            message=f"Failed to listen on {host}:{port}: {reason}",
            status_code=500,
        )
        self.host = host
        self.port = port


class NotRunningError(PageWithException):
    """Raised when closing a server that is not running."""

    def __init__(self, message: str = "Failed to close a server: server is not running.") -> None:
        super().__init__(message=message, status_code=500)
