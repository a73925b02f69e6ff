"""
Background watcher that resumes paused printers.

Thermal printers drop their CUPS queue into a paused state after a paper jam
or a USB hiccup, and nothing un-pauses it by itself. PauseWatcher polls
discovery on a fixed interval and issues a resume for every printer it finds
paused. Each resume attempt stands alone: failures are logged and the watcher
moves on to the next printer and the next tick.

The watcher owns its scheduling primitive (a Ticker) so tests can drive ticks
without waiting on the wall clock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from coloring_printer.printing.discovery import PrinterDiscovery, PrinterState

logger = logging.getLogger(__name__)

STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_STOPPED = "stopped"


class Ticker:
    """
    Interval timer backed by threading.Event.

    wait() sleeps for the interval and returns False, or returns True early once
    stop() has been called.
    """

    def __init__(self) -> None:
        self._stopped = threading.Event()

    def wait(self, seconds: float) -> bool:
        return self._stopped.wait(seconds)

    def stop(self) -> None:
        self._stopped.set()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PauseWatcher:
    """
    Poll for paused printers and resume them.

    Parameters:
    - discovery: PrinterDiscovery polled on each tick
    - spooler: object with resume(name) -> ProcessResult
    - interval: seconds between ticks
    - ticker: scheduling primitive; a fresh Ticker when omitted
    """

    def __init__(
        self,
        discovery: PrinterDiscovery,
        spooler,
        interval: float = 1.0,
        ticker: Optional[Ticker] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.discovery = discovery
        self.spooler = spooler
        self.interval = float(interval)
        self.ticker = ticker or Ticker()

        self._lock = threading.Lock()
        self._state = STATE_IDLE
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0
        self.resumed_total = 0
        self.last_tick_at: Optional[str] = None

    @property
    def state(self) -> str:
        return self._state

    def tick(self) -> List[str]:
        """
        Run one poll. Returns the names of printers that were resumed.
        """
        self.ticks += 1
        self.last_tick_at = _utc_now_iso()
        try:
            printers = self.discovery.list()
        except Exception as e:
            logger.warning("Pause watcher could not list printers: %s", e)
            return []

        resumed: List[str] = []
        for printer in printers:
            if printer.state is not PrinterState.PAUSED:
                continue
            logger.info("Printer %s is paused; resuming", printer.name)
            try:
                result = self.spooler.resume(printer.name)
            except Exception as e:
                logger.error("Resume of %s failed: %s", printer.name, e)
                continue
            if not result.ok:
                logger.error("Resume of %s exited %s: %s", printer.name, result.exit_code, result.output)
                continue
            resumed.append(printer.name)

        self.resumed_total += len(resumed)
        return resumed

    def _run(self) -> None:
        """
        Loop until the ticker is stopped. Never raises.
        """
        logger.info("Pause watcher running (interval=%.2fs)", self.interval)
        try:
            while not self.ticker.stopped:
                try:
                    self.tick()
                except Exception:
                    logger.exception("Pause watcher tick failed")
                if self.ticker.wait(self.interval):
                    break
        finally:
            with self._lock:
                self._state = STATE_STOPPED
            logger.info("Pause watcher stopped")

    def start(self) -> None:
        """
        Start the background thread (idempotent while running).
        """
        with self._lock:
            if self._state == STATE_RUNNING:
                return
            if self._state == STATE_STOPPED:
                raise RuntimeError("Pause watcher has been stopped and cannot be restarted")
            t = threading.Thread(target=self._run, daemon=True, name="coloring-printer-pause-watcher")
            self._thread = t
            self._state = STATE_RUNNING
        t.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the loop to exit and wait for the thread to finish.
        """
        self.ticker.stop()
        t = self._thread
        if t is not None and t.is_alive() and t is not threading.current_thread():
            t.join(timeout)
        with self._lock:
            self._state = STATE_STOPPED

    def status(self) -> Dict[str, Any]:
        t = self._thread
        return {
            "state": self._state,
            "alive": bool(t) and t.is_alive(),  # type: ignore[union-attr]
            "interval_seconds": self.interval,
            "ticks": self.ticks,
            "last_tick_at": self.last_tick_at,
            "resumed_total": self.resumed_total,
        }


__all__ = ["PauseWatcher", "STATE_IDLE", "STATE_RUNNING", "STATE_STOPPED", "Ticker"]
