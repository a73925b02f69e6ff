"""
Coloring Printer package

This module provides an application factory with minimal wiring:
- Configures logging via coloring_printer.core.logging
- Creates a Flask app exposing the print API and health endpoint
- Initializes CSRF protection (the JSON/multipart API routes are exempt)
- Starts the pause watcher once per process unless disabled
"""

from __future__ import annotations

import importlib
import uuid
from collections.abc import Sequence
from typing import Optional

from flask import Flask, g
from flask_wtf import CSRFProtect

csrf = CSRFProtect()


def _register_blueprint(app: Flask, import_path: str, attr: str) -> None:
    """
    Import a blueprint from import_path and register it.
    """
    mod = importlib.import_module(import_path)
    bp = getattr(mod, attr)
    app.register_blueprint(bp)
    app.logger.debug(f"Registered blueprint: {import_path}.{attr}")


def create_app(
    config_overrides: Optional[dict] = None,
    blueprints: Optional[Sequence[tuple[str, str]]] = None,
    register_watcher: Optional[bool] = None,
    settings=None,
    spooler=None,
) -> Flask:
    """
    Application factory.

    Parameters:
    - config_overrides: values to inject into app.config after defaults
    - blueprints: optional list of (import_path, attribute) tuples to register
    - register_watcher: start the pause watcher; defaults to Settings.watcher_enabled
    - settings: Settings to use instead of the ones resolved from config/env
    - spooler: spooler object to use instead of the CUPS command line tools

    Returns:
    - Flask app instance
    """
    from coloring_printer.core.config import get_settings
    from coloring_printer.core.logging import configure_logging
    from coloring_printer.printing import service

    configure_logging()

    settings = settings or get_settings()
    service.configure(settings=settings, spooler=spooler)

    app = Flask("coloring_printer")
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    app.config["COLORPRINT_SETTINGS"] = settings
    app.url_map.strict_slashes = False

    csrf.init_app(app)

    @app.before_request
    def _set_request_id():
        g.request_id = getattr(g, "request_id", uuid.uuid4().hex)

    default_blueprints = [
        ("coloring_printer.web.api", "api_bp"),
        ("coloring_printer.web.health", "health_bp"),
    ]
    for import_path, attr in blueprints or default_blueprints:
        _register_blueprint(app, import_path, attr)

    if register_watcher is None:
        register_watcher = settings.watcher_enabled
    if register_watcher:
        service.ensure_watcher()
        app.logger.info("Pause watcher ensured")

    if config_overrides:
        app.config.update(config_overrides)

    app.logger.info("Coloring Printer app created")
    return app


__all__ = ["create_app", "csrf"]
