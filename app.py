#!/usr/bin/env python3
"""
Coloring Printer - Flask service that prints coloring pages on a thermal printer.

Run directly for development:
    python app.py --host 0.0.0.0 --port 3000
"""

import argparse
import os

from coloring_printer import create_app


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Coloring Printer web service")
    parser.add_argument(
        "--host",
        default=os.environ.get("COLORPRINT_HOST", "0.0.0.0"),
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("COLORPRINT_PORT", "3000")),
        help="Port to bind to (default: 3000)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    app = create_app()
    app.logger.info("Starting Coloring Printer on http://%s:%d", args.host, args.port)
    # The reloader would start a second pause watcher in the child process
    app.run(host=args.host, port=args.port, debug=args.debug, use_reloader=False)
