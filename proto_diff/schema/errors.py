"""
Schema loading errors and compiler diagnostics.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Diagnostic:
    """
    A single message reported while loading a schema.

    Attributes:
        file: Schema file the message refers to (may be empty)
        line: 1-based line number, 0 when unknown
        column: 1-based column number, 0 when unknown
        message: Compiler message text
        is_warning: True for warnings, False for errors
    """
    file: str
    line: int
    column: int
    message: str
    is_warning: bool = False

    def __str__(self) -> str:
        severity = "Warning" if self.is_warning else "Error"
        return f"{severity}: {self.file}@{self.line},{self.column}: {self.message}"


class SchemaLoadError(ValueError):
    """Raised when a schema cannot be compiled, decoded or resolved."""

    def __init__(self, message: str, diagnostics: Optional[List[Diagnostic]] = None):
        super().__init__(message)
        self.diagnostics: List[Diagnostic] = list(diagnostics or [])

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_warning]
