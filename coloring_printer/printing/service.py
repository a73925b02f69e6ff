"""
Process-wide wiring for the printing subsystem.

Builds the default spooler, discovery, submitter and pause watcher from
Settings, and exposes the helpers the web layer calls. The watcher is a
singleton: ensure_watcher() starts it once per process and registers a stop
at interpreter exit.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Any, Dict, Optional

from coloring_printer.core.config import Settings, get_settings
from coloring_printer.printing.discovery import PrinterDiscovery
from coloring_printer.printing.options import PrintJobOptions, PrintJobResult
from coloring_printer.printing.runner import CupsSpooler, ProcessRunner
from coloring_printer.printing.scratch import ScratchFileManager
from coloring_printer.printing.submitter import JobSubmitter, Source
from coloring_printer.printing.watcher import PauseWatcher

logger = logging.getLogger(__name__)

_LOCK = threading.RLock()
_SETTINGS: Optional[Settings] = None
_SPOOLER: Optional[CupsSpooler] = None
_WATCHER: Optional[PauseWatcher] = None


def get_current_settings() -> Settings:
    global _SETTINGS
    with _LOCK:
        if _SETTINGS is None:
            _SETTINGS = get_settings()
        return _SETTINGS


def get_spooler() -> CupsSpooler:
    global _SPOOLER
    with _LOCK:
        if _SPOOLER is None:
            s = get_current_settings()
            _SPOOLER = CupsSpooler(
                runner=ProcessRunner(),
                list_command=s.list_command,
                submit_command=s.submit_command,
                resume_command=s.resume_command,
            )
        return _SPOOLER


def get_discovery() -> PrinterDiscovery:
    return PrinterDiscovery(get_spooler(), preferred=get_current_settings().printer_name)


def get_submitter() -> JobSubmitter:
    s = get_current_settings()
    return JobSubmitter(get_discovery(), get_spooler(), ScratchFileManager(s.scratch_dir))


def configure(settings: Optional[Settings] = None, spooler=None) -> None:
    """
    Replace the process-wide settings and/or spooler (used by create_app and tests).
    A running watcher keeps the collaborators it was started with.
    """
    global _SETTINGS, _SPOOLER
    with _LOCK:
        if settings is not None:
            _SETTINGS = settings
            _SPOOLER = None
        if spooler is not None:
            _SPOOLER = spooler


def default_options() -> PrintJobOptions:
    """
    Options used by the coloring-page flow: one copy scaled to the page.
    """
    media = get_current_settings().media_size
    return PrintJobOptions(copies=1, fit_to_page=True, media_size=media)


def print_image(source: Source, options: Optional[PrintJobOptions] = None) -> PrintJobResult:
    """
    Submit an image to the first usable printer. Raises PrintingError subclasses.

    Fields set on options override default_options(); unset or None fields
    keep the configured defaults.
    """
    merged = default_options()
    if options is not None:
        merged = merged.model_copy(update=options.model_dump(exclude_unset=True, exclude_none=True))
    return get_submitter().submit(source, merged)


def ensure_watcher() -> PauseWatcher:
    """
    Ensure the pause watcher thread is started (idempotent).
    """
    global _WATCHER
    with _LOCK:
        if _WATCHER is not None:
            return _WATCHER
        s = get_current_settings()
        watcher = PauseWatcher(get_discovery(), get_spooler(), interval=s.watch_interval_seconds)
        watcher.start()
        atexit.register(watcher.stop, 2.0)
        _WATCHER = watcher
        logger.info("Pause watcher started")
        return watcher


def watcher_status() -> Dict[str, Any]:
    w = _WATCHER
    if w is None:
        return {"state": "idle", "alive": False}
    return w.status()


__all__ = [
    "configure",
    "default_options",
    "ensure_watcher",
    "get_current_settings",
    "get_discovery",
    "get_spooler",
    "get_submitter",
    "print_image",
    "watcher_status",
]
