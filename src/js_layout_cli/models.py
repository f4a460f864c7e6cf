from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    STYLE = "STYLE"


class LintIssue(BaseModel):
    severity: Severity
    file_path: str
    line_number: int
    column: int
    rule_id: str
    message: str
    auto_fixable: bool = False


class LayoutSettings(BaseModel):
    max_operands: int = Field(3, ge=1)
    max_passes: int = Field(10, ge=1)
    select: List[str] = Field(default_factory=list)
    ignore: List[str] = Field(default_factory=list)
    indent_unit: Optional[str] = None
