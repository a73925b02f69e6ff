# Ensure the repository root is on sys.path so `coloring_printer` can be imported in tests,
# and provide spooler fakes so no real lp/lpstat/cupsenable process is ever spawned.

import io
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest


def _ensure_repo_root_on_syspath() -> None:
    # This file lives at: <repo_root>/tests/conftest.py
    here = Path(__file__).resolve()
    repo_str = str(here.parent.parent)
    if repo_str not in sys.path:
        sys.path.insert(0, repo_str)


_ensure_repo_root_on_syspath()

from coloring_printer.printing.runner import ProcessResult  # noqa: E402


class FakeSpooler:
    """
    Records every spooler call and returns scripted results.

    - listings: successive stdout strings for list_printers(); the last one repeats
    - submit_exit / submit_stdout / submit_stderr: result of submit()
    - resume_exit: per-printer exit code for resume(); resume_raises: names that raise
    """

    def __init__(self, listings=None):
        self.listings: List[str] = list(listings or [""])
        self.list_calls = 0
        self.submit_calls: List[Dict] = []
        self.resume_calls: List[str] = []
        self.submit_exit = 0
        self.submit_stdout = "request id is Label-A-1 (1 file(s))\n"
        self.submit_stderr = ""
        self.submit_raises: Optional[Exception] = None
        self.resume_exit: Dict[str, int] = {}
        self.resume_raises: Dict[str, Exception] = {}
        self.seen_files: List[bool] = []

    def list_printers(self) -> ProcessResult:
        idx = min(self.list_calls, len(self.listings) - 1)
        self.list_calls += 1
        return ProcessResult(command=["lpstat", "-p"], exit_code=0, stdout=self.listings[idx])

    def submit(self, path, args) -> ProcessResult:
        self.submit_calls.append({"path": str(path), "args": list(args)})
        self.seen_files.append(Path(path).exists())
        if self.submit_raises is not None:
            raise self.submit_raises
        return ProcessResult(
            command=["lp", *args, str(path)],
            exit_code=self.submit_exit,
            stdout=self.submit_stdout,
            stderr=self.submit_stderr,
        )

    def resume(self, printer_name: str) -> ProcessResult:
        self.resume_calls.append(printer_name)
        if printer_name in self.resume_raises:
            raise self.resume_raises[printer_name]
        code = self.resume_exit.get(printer_name, 0)
        return ProcessResult(
            command=["cupsenable", printer_name],
            exit_code=code,
            stderr="" if code == 0 else "cupsenable: Forbidden",
        )


class FakeTicker:
    """Ticker that never sleeps; stops itself after `max_waits` intervals."""

    def __init__(self, max_waits: int = 1):
        self.max_waits = max_waits
        self.waits: List[float] = []
        self._stopped = False

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if len(self.waits) >= self.max_waits:
            self._stopped = True
        return self._stopped

    def stop(self) -> None:
        self._stopped = True

    @property
    def stopped(self) -> bool:
        return self._stopped


def make_png(size=(8, 8)) -> bytes:
    from PIL import Image

    buf = io.BytesIO()
    Image.new("L", size, 255).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def fake_spooler():
    return FakeSpooler()
