# Pydantic data models for vulnerability findings: Finding, Location, Severity.

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """How serious a finding is. ERROR and INFO are reserved for engine outcomes."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"
    ERROR = "error"


class Location(BaseModel):
    """Where in the source a finding was reported (line, column, optional file)."""

    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(1, ge=1, description="1-based column number")
    path: Optional[Path] = None
    snippet: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Finding(BaseModel):
    """A single issue reported by a rule or by the function analyzer."""

    rule_id: str = Field(..., alias="ruleId")
    severity: Severity
    message: str
    location: Location
    description: str = ""
    recommendation: str = ""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    @property
    def line(self) -> int:
        return self.location.line

    def to_dict(self) -> dict[str, Any]:
        """Flat wire form: {severity, message, line, column, ruleId, ...}."""
        data: dict[str, Any] = {
            "severity": self.severity.value,
            "message": self.message,
            "line": self.location.line,
            "column": self.location.column,
            "ruleId": self.rule_id,
            "description": self.description,
            "recommendation": self.recommendation,
        }
        if self.location.path is not None:
            data["path"] = str(self.location.path)
        if self.location.snippet:
            data["snippet"] = self.location.snippet
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Finding":
        """Inverse of to_dict(); accepts the stored history format."""
        return cls(
            rule_id=data.get("ruleId") or data.get("rule") or data["rule_id"],
            severity=Severity(data["severity"]),
            message=data["message"],
            location=Location(
                line=data.get("line", 1),
                column=data.get("column", 1),
                path=data.get("path"),
                snippet=data.get("snippet"),
            ),
            description=data.get("description", ""),
            recommendation=data.get("recommendation", ""),
        )
