"""
Exception types raised by the printing subsystem.

Everything derives from PrintingError so the web layer can treat any print
failure as a soft failure with a single except clause.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PrintingError(Exception):
    """Base class for print job management failures."""


class NoPrinterAvailable(PrintingError):
    """Discovery found no printer that is not disabled."""

    def __init__(self, message: str = "No usable printer found") -> None:
        super().__init__(message)


class ExecutionError(PrintingError):
    """An external command could not be launched (not found, permission denied)."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"Could not run {self.command[0] if self.command else '?'}: {reason}")


class PrintSubmissionError(PrintingError):
    """The submit command ran but the spooler rejected the job."""

    def __init__(
        self,
        message: str,
        *,
        printer_name: Optional[str] = None,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.printer_name = printer_name
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)

    @property
    def output(self) -> str:
        return ((self.stdout or "") + (self.stderr or "")).strip()


class ScratchFileError(PrintingError):
    """A scratch file could not be written or removed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)


__all__ = [
    "ExecutionError",
    "NoPrinterAvailable",
    "PrintSubmissionError",
    "PrintingError",
    "ScratchFileError",
]
