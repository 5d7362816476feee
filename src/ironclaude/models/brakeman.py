"""Subset of Brakeman's JSON report that we display."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BrakemanWarning(BaseModel):
    model_config = ConfigDict(extra="ignore")

    warning_type: str = ""
    message: str = ""
    confidence: str = ""
    file: str = ""
    line: Optional[int] = None

    def format(self) -> str:
        location = f"{self.file}:{self.line}" if self.line is not None else self.file
        return f"[{self.confidence}] {self.warning_type}: {self.message}\n   File: {location}"


class BrakemanReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    warnings: list[BrakemanWarning] = Field(default_factory=list)
    # Brakeman emits scan errors as objects ({"error": ..., "location": ...})
    errors: list[Any] = Field(default_factory=list)
