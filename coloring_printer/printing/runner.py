"""
External process plumbing for the print spooler.

ProcessRunner launches a program and captures its output; CupsSpooler wraps a
runner with one method per spooler command shape (list, submit, resume).

There is no timeout on the external process: a hung spooler command blocks
its caller until it exits.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from coloring_printer.printing.errors import ExecutionError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class ProcessResult:
    command: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        return ((self.stdout or "") + (self.stderr or "")).strip()


class ProcessRunner:
    """
    Run an external program to completion and capture stdout/stderr.

    Exit codes are returned, never interpreted. Launch failures raise
    ExecutionError.
    """

    def run(self, command: str, args: Optional[Sequence[str]] = None) -> ProcessResult:
        cmd = [command, *(str(a) for a in (args or ()))]
        logger.debug("Running %s", cmd)
        try:
            # Status text is locale dependent; undecodable bytes become U+FFFD
            proc = subprocess.run(
                cmd, capture_output=True, text=True, encoding="utf-8", errors="replace", check=False
            )
        except FileNotFoundError as e:
            raise ExecutionError(cmd, "command not found") from e
        except PermissionError as e:
            raise ExecutionError(cmd, "permission denied") from e
        except OSError as e:
            raise ExecutionError(cmd, str(e)) from e
        return ProcessResult(
            command=cmd,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


@dataclass
class CupsSpooler:
    """
    Spooler backed by the CUPS command line tools.

    Command names are configurable so any process-based queue with the same
    three command shapes can stand in.
    """

    runner: ProcessRunner = field(default_factory=ProcessRunner)
    list_command: str = "lpstat"
    submit_command: str = "lp"
    resume_command: str = "cupsenable"

    def list_printers(self) -> ProcessResult:
        return self.runner.run(self.list_command, ["-p"])

    def submit(self, path: PathLike, args: Sequence[str]) -> ProcessResult:
        return self.runner.run(self.submit_command, [*args, os.fspath(path)])

    def resume(self, printer_name: str) -> ProcessResult:
        return self.runner.run(self.resume_command, [printer_name])


__all__ = ["CupsSpooler", "ProcessResult", "ProcessRunner"]
