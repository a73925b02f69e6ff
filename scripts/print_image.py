#!/usr/bin/env python3
"""
Print an image file (or list printers) from the command line, using the same
settings and spooler wiring as the web service.

Usage:
    python scripts/print_image.py --list
    python scripts/print_image.py page.png --copies 2 --fit-to-page -o orientation-requested=3
    python scripts/print_image.py --resume-paused
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from coloring_printer.core.logging import configure_logging  # noqa: E402
from coloring_printer.printing import service  # noqa: E402
from coloring_printer.printing.errors import PrintingError  # noqa: E402
from coloring_printer.printing.options import PrintJobOptions  # noqa: E402
from coloring_printer.printing.watcher import PauseWatcher  # noqa: E402


def _parse_extra(values):
    extra = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep:
            raise SystemExit(f"Option must be key=value: {item}")
        extra[key] = value
    return extra


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Coloring Printer command line")
    parser.add_argument("image", nargs="?", help="Image file to print")
    parser.add_argument("--list", action="store_true", help="List printers and their state")
    parser.add_argument("--resume-paused", action="store_true", help="Resume paused printers once and exit")
    parser.add_argument("--copies", type=int, default=1)
    parser.add_argument("--media", dest="media_size")
    parser.add_argument("--grayscale", action="store_true", default=None)
    parser.add_argument("--fit-to-page", action="store_true", default=None)
    parser.add_argument("-o", dest="extra", action="append", help="Extra spooler option key=value")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    configure_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.list:
            for p in service.get_discovery().list():
                print(f"{p.name}\t{p.state.value}\t{p.status_text}")
            return 0
        if args.resume_paused:
            watcher = PauseWatcher(service.get_discovery(), service.get_spooler())
            resumed = watcher.tick()
            print("Resumed: " + (", ".join(resumed) if resumed else "none"))
            return 0
        if not args.image:
            parser.error("an image path is required unless --list or --resume-paused is given")

        options = PrintJobOptions(
            copies=args.copies,
            media_size=args.media_size,
            grayscale=args.grayscale,
            fit_to_page=args.fit_to_page,
            extra=_parse_extra(args.extra),
        )
        result = service.print_image(args.image, options)
        print(f"Submitted to {result.printer_name}" + (f" as {result.job_id}" if result.job_id else ""))
        return 0
    except ValidationError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return 2
    except PrintingError as e:
        print(f"Print failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
