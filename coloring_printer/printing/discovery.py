"""
Printer discovery through the spooler's list command.

Every call to PrinterDiscovery.list() returns a fresh snapshot. Descriptors
are plain values; nothing here caches printer state between calls.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from coloring_printer.printing.errors import NoPrinterAvailable

logger = logging.getLogger(__name__)


class PrinterState(str, enum.Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    PAUSED = "paused"
    DISABLED = "disabled"
    UNKNOWN = "unknown"


# Checked in order; the first state whose keyword appears in the status text wins.
# A paused CUPS queue also reports "disabled", so paused must come first.
STATUS_KEYWORDS: Tuple[Tuple[PrinterState, Tuple[str, ...]], ...] = (
    (PrinterState.PAUSED, ("paused",)),
    (PrinterState.DISABLED, ("disabled",)),
    (PrinterState.PROCESSING, ("processing", "printing")),
    (PrinterState.IDLE, ("idle",)),
)


@dataclass(frozen=True)
class PrinterDescriptor:
    name: str
    state: PrinterState
    status_text: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "state": self.state.value, "status": self.status_text}


def classify_status(text: str) -> PrinterState:
    """
    Map a free-text spooler status phrase to a PrinterState.
    """
    lowered = (text or "").lower()
    for state, keywords in STATUS_KEYWORDS:
        if any(k in lowered for k in keywords):
            return state
    return PrinterState.UNKNOWN


def parse_status_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Split one list-command line into (name, status phrase).

    Understands "printer NAME is idle..." (lpstat -p), "NAME: status" and
    "NAME status". Returns None for lines without a printer name.
    """
    stripped = line.strip()
    if not stripped:
        return None
    if stripped.lower().startswith("printer "):
        rest = stripped[len("printer "):].strip()
        name, _, status = rest.partition(" ")
        return (name, status.strip()) if name else None
    if ":" in stripped:
        name, _, status = stripped.partition(":")
        name = name.strip()
        if name and " " not in name:
            return name, status.strip()
    name, _, status = stripped.partition(" ")
    return name, status.strip()


def parse_printer_list(output: str) -> List[PrinterDescriptor]:
    """
    Parse list-command output into descriptors, one per printer line.

    Indented lines continue the previous printer (CUPS prints state reasons
    such as "Paused" there) and extend its status text; one that comes before
    any printer line is dropped. Lines that cannot be classified come back
    as UNKNOWN rather than failing the whole listing.
    """
    entries: List[List[str]] = []
    for raw in (output or "").splitlines():
        if not raw.strip():
            continue
        if raw[:1].isspace():
            if entries:
                entries[-1][1] = f"{entries[-1][1]} {raw.strip()}".strip()
            else:
                logger.debug("Ignoring continuation line before any printer: %r", raw)
            continue
        try:
            parsed = parse_status_line(raw)
        except Exception as e:
            logger.debug("Skipping unparsable printer line %r: %s", raw, e)
            parsed = None
        if parsed is None:
            logger.debug("Ignoring printer line without a name: %r", raw)
            continue
        entries.append([parsed[0], parsed[1]])

    return [PrinterDescriptor(name=name, state=classify_status(status), status_text=status) for name, status in entries]


class PrinterDiscovery:
    """
    Query the spooler for configured printers.

    Parameters:
    - spooler: object with list_printers() -> ProcessResult
    - preferred: optional printer name tried first by find_first_usable()
    """

    def __init__(self, spooler, preferred: Optional[str] = None) -> None:
        self.spooler = spooler
        self.preferred = preferred

    def list(self) -> List[PrinterDescriptor]:
        """
        Return a fresh snapshot of printers in spooler order.

        ExecutionError propagates when the list command cannot be launched. A
        non-zero exit is logged and whatever was printed is still parsed (CUPS
        exits non-zero when no printers are configured).
        """
        result = self.spooler.list_printers()
        if not result.ok:
            logger.warning("Printer list command exited %s: %s", result.exit_code, result.output)
        printers = parse_printer_list(result.stdout)
        logger.debug("Discovered %d printer(s): %s", len(printers), [(p.name, p.state.value) for p in printers])
        return printers

    def find_first_usable(self) -> PrinterDescriptor:
        """
        Return the first printer that is not disabled.

        Raises NoPrinterAvailable when the spooler reports none.
        """
        printers = self.list()
        usable = [p for p in printers if p.state is not PrinterState.DISABLED]
        if not usable:
            if printers:
                raise NoPrinterAvailable(f"All {len(printers)} printer(s) are disabled")
            raise NoPrinterAvailable("No printers configured")
        if self.preferred:
            for p in usable:
                if p.name == self.preferred:
                    return p
            logger.info("Preferred printer %s not usable; falling back to %s", self.preferred, usable[0].name)
        return usable[0]


__all__ = [
    "PrinterDescriptor",
    "PrinterDiscovery",
    "PrinterState",
    "STATUS_KEYWORDS",
    "classify_status",
    "parse_printer_list",
    "parse_status_line",
]
