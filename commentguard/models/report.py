"""Diagnostic and report models handed back to callers."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Severity level of a diagnostic."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """Rendered violation with location, message and a preview of the line."""

    file_path: str = Field(..., description="Path to the file")
    line: Optional[int] = Field(None, description="Start line (1-indexed)")
    column: Optional[int] = Field(None, description="Start column (0-indexed)")
    end_line: Optional[int] = Field(None, description="End line (1-indexed)")
    end_column: Optional[int] = Field(None, description="End column (0-indexed)")
    severity: Severity = Field(Severity.ERROR, description="Severity level")
    rule_key: str = Field(..., description="Violation kind including section")
    message_key: str = Field(..., description="Message catalog key")
    message: str = Field(..., description="Rendered message")
    preview: str = Field("", description="Trimmed source line the diagnostic points at")
    data: Dict[str, Any] = Field(default_factory=dict, description="Message interpolation values")


class FileReport(BaseModel):
    """Result of analyzing a single file."""

    file_path: str
    language: Optional[str] = None
    diagnostics: List[Diagnostic] = []

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)
