"""
Printing subsystem for Coloring Printer.

- runner: external process execution and the CUPS spooler command shapes
- discovery: printer listing and status classification
- scratch: temporary files for in-memory images
- submitter: print job submission
- watcher: background resume of paused printers
- service: process-wide wiring from Settings

For convenience, common names are re-exported for easy import.
"""

from .discovery import PrinterDescriptor, PrinterDiscovery, PrinterState, classify_status
from .errors import ExecutionError, NoPrinterAvailable, PrintingError, PrintSubmissionError, ScratchFileError
from .options import PrintJobOptions, PrintJobResult
from .runner import CupsSpooler, ProcessResult, ProcessRunner
from .scratch import ScratchFileHandle, ScratchFileManager
from .submitter import JobSubmitter, build_submit_args
from .watcher import PauseWatcher, Ticker

__all__ = [
    "CupsSpooler",
    "ExecutionError",
    "JobSubmitter",
    "NoPrinterAvailable",
    "PauseWatcher",
    "PrintJobOptions",
    "PrintJobResult",
    "PrintSubmissionError",
    "PrinterDescriptor",
    "PrinterDiscovery",
    "PrinterState",
    "PrintingError",
    "ProcessResult",
    "ProcessRunner",
    "ScratchFileError",
    "ScratchFileHandle",
    "ScratchFileManager",
    "Ticker",
    "build_submit_args",
    "classify_status",
]
