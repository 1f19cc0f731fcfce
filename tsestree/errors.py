"""
Exception hierarchy for tsestree.

Every failure of a parse call is raised as a subclass of TSESTreeError. None of
them are retried; a file that no project covers is not an error.
"""

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .compiler import Diagnostic


class TSESTreeError(Exception):
    """Base class for all tsestree errors."""


class InvalidOptions(TSESTreeError):
    """Raised when parse options have a bad shape or an out-of-range value."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class MissingFilePath(TSESTreeError):
    """Raised when project resolution is requested for an anonymous file."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or '"parserOptions.project" has been set but no "filePath" was provided'
        )


class ProjectNotFound(TSESTreeError):
    """Raised when a project descriptor does not exist on disk."""

    def __init__(self, descriptor: str):
        super().__init__(f"Cannot read project file: {descriptor}")
        self.descriptor = descriptor


class ProjectLoadError(TSESTreeError):
    """Raised when a project descriptor exists but cannot be loaded."""

    def __init__(self, descriptor: str, reason: str):
        super().__init__(f"Failed to load project {descriptor}: {reason}")
        self.descriptor = descriptor
        self.reason = reason


class UnknownNodeType(TSESTreeError):
    """Raised for a native node kind with no converter when strict mode is on."""

    def __init__(self, kind: str, file_path: str, offset: int):
        super().__init__(f"Unknown AST_NODE_TYPE: \"{kind}\" in {file_path} at offset {offset}")
        self.kind = kind
        self.file_path = file_path
        self.offset = offset


class TypeScriptDiagnosticError(TSESTreeError):
    """A compiler diagnostic surfaced as a fatal error."""

    def __init__(self, diagnostic: "Diagnostic"):
        super().__init__(diagnostic.format())
        self.diagnostic = diagnostic

    @property
    def file_name(self) -> str:
        return self.diagnostic.file_name

    @property
    def index(self) -> int:
        return self.diagnostic.start

    @property
    def line_number(self) -> int:
        return self.diagnostic.line

    @property
    def column(self) -> int:
        return self.diagnostic.column


class ParseError(TypeScriptDiagnosticError):
    """Raised when the native tree contains syntax errors."""
