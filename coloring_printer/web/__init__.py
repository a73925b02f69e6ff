"""
Web module for Coloring Printer.

Exposes blueprints for:
- Print and printer listing API: api_bp
- Health endpoint: health_bp
"""

from .api import api_bp
from .health import health_bp

__all__ = ["api_bp", "health_bp"]
