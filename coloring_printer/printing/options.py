"""
Print job options and results.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _has_control_chars(s: str) -> bool:
    return any(ord(c) < 32 or ord(c) == 127 for c in s)


class PrintJobOptions(BaseModel):
    """Device options for a single print job. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    copies: int = Field(default=1, ge=1, description="Number of copies to print")
    media_size: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Spooler media name, e.g. '4x6' or 'w288h432'",
        examples=["4x6", "A6"],
    )
    grayscale: Optional[bool] = Field(default=None, description="Request monochrome output")
    fit_to_page: Optional[bool] = Field(default=None, description="Scale the image to the printable area")
    extra: Dict[str, str] = Field(
        default_factory=dict,
        description="Spooler-specific key/value options passed through verbatim",
    )

    @field_validator("media_size")
    @classmethod
    def _validate_media(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if _has_control_chars(v) or " " in v:
            raise ValueError("media_size must be a single token")
        return v

    @field_validator("extra")
    @classmethod
    def _validate_extra(cls, v: Dict[str, str]) -> Dict[str, str]:
        for key, value in v.items():
            if not key.strip() or key != key.strip() or "=" in key or " " in key:
                raise ValueError(f"invalid option name: {key!r}")
            if _has_control_chars(key) or _has_control_chars(value):
                raise ValueError(f"option {key!r} contains control characters")
        return v


@dataclass(frozen=True)
class PrintJobResult:
    printer_name: str
    submitted_at: datetime
    job_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "printer_name": self.printer_name,
            "submitted_at": self.submitted_at.isoformat(),
            "job_id": self.job_id,
        }


__all__ = ["PrintJobOptions", "PrintJobResult"]
