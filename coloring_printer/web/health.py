from __future__ import annotations

"""
Health endpoints for Coloring Printer.

This blueprint exposes `/healthz`, reporting:
- Overall status ("ok" or "degraded")
- Pause watcher status (via coloring_printer.printing.service.watcher_status)
- Printer count and the printer a job would go to right now
"""

from typing import Any, Dict

from flask import Blueprint

from coloring_printer.printing import service
from coloring_printer.printing.discovery import PrinterState
from coloring_printer.printing.errors import ExecutionError

health_bp = Blueprint("health", __name__)


@health_bp.get("/healthz")
def healthz():
    status: Dict[str, Any] = {"status": "ok"}
    status["watcher"] = service.watcher_status()

    try:
        printers = service.get_discovery().list()
    except ExecutionError as e:
        status["status"] = "degraded"
        status["reason"] = f"spooler_unavailable: {type(e).__name__}"
        return status, 200

    status["printers"] = len(printers)
    usable = [p for p in printers if p.state is not PrinterState.DISABLED]
    if usable:
        status["usable_printer"] = usable[0].name
    else:
        status["status"] = "degraded"
        status["reason"] = "no_usable_printer"

    paused = [p.name for p in printers if p.state is PrinterState.PAUSED]
    if paused:
        status["paused"] = paused

    return status, 200
