"""
Scratch files for in-memory images that the spooler needs as a path.

A handle belongs to the call that materialized it and must be released on
every exit path of that call. scoped() does this for you.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Iterator, Optional

from coloring_printer.printing.errors import ScratchFileError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScratchFileHandle:
    path: str


class ScratchFileManager:
    """
    Write byte buffers to uniquely named files in a scratch directory.

    Names come from tempfile.mkstemp, which creates the file exclusively, so
    concurrent callers never share a path.
    """

    def __init__(self, directory: str, prefix: str = "print-", suffix: str = ".png") -> None:
        self.directory = directory
        self.prefix = prefix
        self.suffix = suffix

    def materialize(self, data: bytes, suffix: Optional[str] = None) -> ScratchFileHandle:
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, path = tempfile.mkstemp(prefix=self.prefix, suffix=suffix or self.suffix, dir=self.directory)
        except OSError as e:
            raise ScratchFileError(f"Could not create scratch file in {self.directory}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(path)
            raise ScratchFileError(f"Could not write scratch file {path}: {e}", path=path) from e

        logger.debug("Materialized %d bytes to %s", len(data), path)
        return ScratchFileHandle(path=path)

    def release(self, handle: Optional[ScratchFileHandle]) -> None:
        """
        Delete the scratch file. Safe to call when it is already gone.
        """
        if handle is None:
            return
        try:
            os.unlink(handle.path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise ScratchFileError(f"Could not remove scratch file {handle.path}: {e}", path=handle.path) from e
        logger.debug("Released scratch file %s", handle.path)

    @contextlib.contextmanager
    def scoped(self, data: bytes, suffix: Optional[str] = None) -> Iterator[ScratchFileHandle]:
        handle = self.materialize(data, suffix=suffix)
        try:
            yield handle
        finally:
            self.release(handle)


__all__ = ["ScratchFileHandle", "ScratchFileManager"]
