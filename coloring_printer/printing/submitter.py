"""
Print job submission.

JobSubmitter resolves a usable printer, turns PrintJobOptions into spooler
arguments and runs the submit command. Byte buffers are written to a scratch
file first; that file is released before submit() returns, whatever happens.
A failed release is logged and never replaces the job outcome.
The caller's image data is never modified.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from typing import List, Optional, Union

from coloring_printer.core.assets import guess_image_suffix
from coloring_printer.printing.discovery import PrinterDiscovery
from coloring_printer.printing.errors import PrintSubmissionError, ScratchFileError
from coloring_printer.printing.options import PrintJobOptions, PrintJobResult
from coloring_printer.printing.scratch import ScratchFileHandle, ScratchFileManager

logger = logging.getLogger(__name__)

Source = Union[bytes, bytearray, memoryview, str, "os.PathLike[str]"]

_REQUEST_ID_RE = re.compile(r"request id is (\S+)", re.IGNORECASE)


def build_submit_args(printer_name: str, options: PrintJobOptions) -> List[str]:
    """
    Build lp-style arguments for one job (the file path is appended by the spooler).
    """
    args = ["-d", printer_name, "-n", str(max(1, int(options.copies)))]
    if options.media_size:
        args += ["-o", f"media={options.media_size}"]
    if options.grayscale:
        args += ["-o", "print-color-mode=monochrome"]
    if options.fit_to_page:
        args += ["-o", "fit-to-page"]
    for key, value in options.extra.items():
        args += ["-o", f"{key}={value}"]
    return args


def parse_job_id(output: str) -> Optional[str]:
    """
    Extract the job id from lp's "request id is Label-A-42 (1 file(s))" line.
    """
    m = _REQUEST_ID_RE.search(output or "")
    return m.group(1) if m else None


class JobSubmitter:
    """
    Submit images to the first usable printer.

    Parameters:
    - discovery: PrinterDiscovery used to pick the target
    - spooler: object with submit(path, args) -> ProcessResult
    - scratch: ScratchFileManager for byte-buffer sources
    """

    def __init__(self, discovery: PrinterDiscovery, spooler, scratch: ScratchFileManager) -> None:
        self.discovery = discovery
        self.spooler = spooler
        self.scratch = scratch

    def submit(self, source: Source, options: Optional[PrintJobOptions] = None) -> PrintJobResult:
        """
        Print source (encoded image bytes or a path to an image file).

        Raises:
            NoPrinterAvailable: no printer that is not disabled
            ExecutionError: the submit command could not be launched
            PrintSubmissionError: the spooler rejected the job, or the path is missing
            ScratchFileError: the byte buffer could not be written to disk
        """
        options = options or PrintJobOptions()
        printer = self.discovery.find_first_usable()

        handle: Optional[ScratchFileHandle] = None
        try:
            if isinstance(source, (bytes, bytearray, memoryview)):
                data = bytes(source)
                handle = self.scratch.materialize(data, suffix=guess_image_suffix(data))
                path = handle.path
            else:
                path = os.fspath(source)
                if not os.path.isfile(path):
                    raise PrintSubmissionError(f"Print file does not exist: {path}", printer_name=printer.name)

            args = build_submit_args(printer.name, options)
            logger.info("Submitting print job to %s (copies=%d)", printer.name, options.copies)
            result = self.spooler.submit(path, args)
            if not result.ok:
                raise PrintSubmissionError(
                    f"Printer {printer.name} rejected the job (exit {result.exit_code}): {result.output}",
                    printer_name=printer.name,
                    exit_code=result.exit_code,
                    stdout=result.stdout,
                    stderr=result.stderr,
                )

            job = PrintJobResult(
                printer_name=printer.name,
                submitted_at=datetime.now(timezone.utc),
                job_id=parse_job_id(result.stdout),
            )
            logger.info("Print job %s accepted by %s", job.job_id or "-", printer.name)
            return job
        finally:
            try:
                self.scratch.release(handle)
            except ScratchFileError as e:
                # The job outcome stands; a leftover scratch file is only logged
                logger.error("Could not remove scratch file %s: %s", e.path, e)


__all__ = ["JobSubmitter", "build_submit_args", "parse_job_id"]
