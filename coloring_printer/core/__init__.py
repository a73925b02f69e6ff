"""
Core utilities for Coloring Printer.

This package groups non-Flask helpers used across the app:
- config: paths, JSON load/save, Settings resolution
- logging: request/thread context filter, JSON formatter and root logger config
- assets: image format detection and validation utilities

Exports are explicit to keep static analyzers (e.g., Pyright) happy.
"""

from .assets import (
    IMAGE_EXTS,
    guess_image_suffix,
    image_format,
    is_supported_image,
    verify_image,
)
from .config import (
    Settings,
    default_config_path,
    default_scratch_path,
    get_config_path,
    get_settings,
    load_config,
    save_config,
)
from .logging import (
    JsonFormatter,
    ContextFilter,
    configure_logging,
)

__all__ = [
    # config
    "Settings",
    "default_config_path",
    "default_scratch_path",
    "get_config_path",
    "get_settings",
    "load_config",
    "save_config",
    # logging
    "configure_logging",
    "ContextFilter",
    "JsonFormatter",
    # assets
    "IMAGE_EXTS",
    "guess_image_suffix",
    "image_format",
    "is_supported_image",
    "verify_image",
]
