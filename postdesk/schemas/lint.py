from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class LintIssue(BaseModel):
    code: str
    severity: Severity
    message: str
    line: Optional[int] = None
    field: Optional[str] = None


class LintReport(BaseModel):
    path: str
    issues: List[LintIssue] = Field(default_factory=list)

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.ERROR)

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == Severity.WARNING)

    @computed_field
    @property
    def ok(self) -> bool:
        return self.error_count == 0


class LintRequest(BaseModel):
    text: str
    path: str = "<request>"
