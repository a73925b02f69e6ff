from __future__ import annotations

"""
Pydantic schemas for the Coloring Printer API (v1).

Requests arrive either as JSON (base64 image) or multipart form data; both
are normalized into PrintRequest so the route has one validated shape.
"""

import base64
import binascii
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from coloring_printer.printing.options import PrintJobOptions


def form_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s == "":
        return None
    return s in ("1", "true", "yes", "on")


class PrintRequest(BaseModel):
    """A ready-made image plus how (and whether) to print it."""

    image: bytes = Field(description="Encoded image bytes (PNG/JPEG/GIF/BMP)")
    mime_type: str = Field(default="image/png", max_length=100, examples=["image/png", "image/jpeg"])
    enable_printer: bool = Field(default=True, description="Set false to skip printing and only echo the image")
    options: Optional[PrintJobOptions] = Field(default=None, description="Defaults to one copy fit to the page")

    @field_validator("image", mode="before")
    @classmethod
    def _decode_image(cls, v: Any) -> bytes:
        if isinstance(v, (bytes, bytearray)):
            return bytes(v)
        if isinstance(v, str):
            s = v.strip()
            # Accept data URLs from browser canvas exports
            if s.startswith("data:") and "," in s:
                s = s.split(",", 1)[1]
            try:
                return base64.b64decode(s, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError("image must be base64 encoded") from e
        raise ValueError("image is required")

    @field_validator("image")
    @classmethod
    def _limit_size(cls, v: bytes, info: ValidationInfo) -> bytes:
        if not v:
            raise ValueError("image is empty")
        limits = (info.context or {}).get("limits", {})
        max_bytes = int(limits.get("MAX_IMAGE_BYTES", 0) or 0)
        if max_bytes and len(v) > max_bytes:
            raise ValueError(f"image exceeds {max_bytes} bytes")
        return v

    @field_validator("mime_type")
    @classmethod
    def _validate_mime(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if not v.startswith("image/"):
            raise ValueError("Invalid image format")
        return v


def options_from_form(form: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Collect PrintJobOptions fields from multipart form values.
    Unknown fields named "option.<key>" become spooler extras.
    """
    opts: Dict[str, Any] = {}
    if form.get("copies") not in (None, ""):
        opts["copies"] = form.get("copies")
    if form.get("media_size"):
        opts["media_size"] = form.get("media_size")
    for key in ("grayscale", "fit_to_page"):
        b = form_bool(form.get(key))
        if b is not None:
            opts[key] = b
    extra = {k[len("option."):]: str(v) for k, v in form.items() if k.startswith("option.")}
    if extra:
        opts["extra"] = extra
    return opts


__all__ = ["PrintRequest", "form_bool", "options_from_form"]
