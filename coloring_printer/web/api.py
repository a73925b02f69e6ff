from __future__ import annotations

"""
JSON API (v1) for Coloring Printer.

Endpoints:
- POST /api/v1/print    : Print a ready-made coloring page and echo it back
- GET  /api/v1/printers : Current printer snapshot from the spooler

POST /api/v1/print accepts either multipart/form-data:
    image=<file>, copies, media_size, grayscale, fit_to_page, enable_printer, option.<key>=<value>
or JSON:
    {"image": "<base64>", "mime_type": "image/png", "enable_printer": true,
     "options": {"copies": 1, "fit_to_page": true, "extra": {...}}}

Printing is fail-open: a print failure is logged and the image is still
returned with status 200. The outcome is reported in X-Print-* headers.
"""

import os
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from coloring_printer import csrf
from coloring_printer.core.assets import is_supported_image, verify_image
from coloring_printer.printing import service
from coloring_printer.printing.errors import ExecutionError, PrintingError
from . import schemas

api_bp = Blueprint("api", __name__, url_prefix="/api/v1")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except Exception:
        return default


MAX_IMAGE_BYTES = _env_int("COLORPRINT_MAX_IMAGE_BYTES", 8 * 1024 * 1024)


def _json_error(msg: str, code: int = 400):
    return jsonify({"error": msg}), code


def _first_error(e: ValidationError) -> str:
    try:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        msg = first.get("msg", "invalid input")
        return f"{loc}: {msg}" if loc else msg
    except Exception:
        return "invalid input"


def _read_request() -> Dict[str, Any]:
    """
    Normalize multipart or JSON input into a dict for PrintRequest.
    """
    if request.mimetype == "multipart/form-data":
        upload = request.files.get("image")
        if upload is None:
            raise ValueError("Image file is required")
        if upload.filename and not is_supported_image(upload.filename):
            raise ValueError("Unsupported image file type")
        data: Dict[str, Any] = {
            "image": upload.read(),
            "mime_type": upload.mimetype or "image/png",
            "enable_printer": schemas.form_bool(request.form.get("enable_printer")) is not False,
        }
        opts = schemas.options_from_form(request.form)
        if opts:
            data["options"] = opts
        return data
    if request.is_json:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValueError("Expected a JSON object")
        return body
    raise ValueError("Expected multipart/form-data or application/json body")


@csrf.exempt
@api_bp.post("/print")
def print_page():
    """
    Validate the image, try to print it, and return the image regardless of the print outcome.
    """
    try:
        raw = _read_request()
    except ValueError as e:
        return _json_error(str(e), 400)

    try:
        req = schemas.PrintRequest.model_validate(raw, context={"limits": {"MAX_IMAGE_BYTES": MAX_IMAGE_BYTES}})
    except ValidationError as e:
        return _json_error(_first_error(e), 400)

    if not verify_image(req.image):
        return _json_error("Image data is not a supported image", 400)

    headers: Dict[str, str] = {}
    if not req.enable_printer:
        current_app.logger.info("Printing disabled by request; skipping print job")
        headers["X-Print-Status"] = "skipped"
    else:
        try:
            result = service.print_image(req.image, req.options)
            current_app.logger.info("Print job submitted to %s", result.printer_name)
            headers["X-Print-Status"] = "submitted"
            headers["X-Print-Printer"] = result.printer_name
            if result.job_id:
                headers["X-Print-Job"] = result.job_id
        except PrintingError as e:
            current_app.logger.warning("Printing failed: %s", e)
            headers["X-Print-Status"] = "failed"
            headers["X-Print-Error"] = type(e).__name__
        except Exception as e:
            current_app.logger.exception("Unexpected printing error")
            headers["X-Print-Status"] = "failed"
            headers["X-Print-Error"] = type(e).__name__

    return Response(req.image, status=200, mimetype=req.mime_type, headers=headers)


@api_bp.get("/printers")
def printers():
    """
    Return the spooler's current printers with their classified state.
    """
    try:
        items = [p.to_dict() for p in service.get_discovery().list()]
    except ExecutionError as e:
        current_app.logger.warning("Printer listing failed: %s", e)
        return _json_error("spooler_unavailable", 503)
    return jsonify({"printers": items})
