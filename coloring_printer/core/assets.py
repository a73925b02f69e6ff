"""
Image asset helpers for Coloring Printer.

Used by the web layer to validate uploads and by the submitter to pick a
file extension for scratch files. Independent of Flask.
"""

from __future__ import annotations

import io
import os
from typing import Dict, List, Optional

from PIL import Image, UnidentifiedImageError

IMAGE_EXTS: List[str] = [".png", ".jpg", ".jpeg", ".gif", ".bmp"]

# Pillow format name -> file extension
_FORMAT_EXTS: Dict[str, str] = {
    "PNG": ".png",
    "JPEG": ".jpg",
    "GIF": ".gif",
    "BMP": ".bmp",
}


def is_supported_image(filename: str) -> bool:
    """
    True if the filename has a supported image extension.
    """
    ext = os.path.splitext(filename)[1].lower()
    return ext in IMAGE_EXTS


def image_format(data: bytes) -> Optional[str]:
    """
    Return the Pillow format name of an encoded image (e.g. "PNG"), or None if
    the bytes are not an image Pillow can identify.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.format
    except (UnidentifiedImageError, OSError, ValueError):
        return None


def guess_image_suffix(data: bytes, default: str = ".png") -> str:
    """
    Pick a file extension matching the encoded image, falling back to default.
    """
    fmt = image_format(data)
    return _FORMAT_EXTS.get(fmt or "", default)


def verify_image(data: bytes) -> bool:
    """
    True if data decodes as a supported, structurally valid image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format not in _FORMAT_EXTS:
                return False
            img.verify()
        return True
    except Exception:
        return False


__all__ = [
    "IMAGE_EXTS",
    "guess_image_suffix",
    "image_format",
    "is_supported_image",
    "verify_image",
]
