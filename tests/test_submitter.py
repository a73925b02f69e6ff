import os
import threading

import pytest

from conftest import FakeSpooler

from coloring_printer.printing.discovery import PrinterDiscovery
from coloring_printer.printing.errors import ExecutionError, NoPrinterAvailable, PrintSubmissionError
from coloring_printer.printing.options import PrintJobOptions
from coloring_printer.printing.scratch import ScratchFileManager
from coloring_printer.printing.submitter import JobSubmitter, build_submit_args, parse_job_id


def _submitter(spooler, scratch_dir):
    return JobSubmitter(PrinterDiscovery(spooler), spooler, ScratchFileManager(str(scratch_dir)))


def test_build_submit_args_encodes_all_options():
    opts = PrintJobOptions(
        copies=2,
        media_size="4x6",
        grayscale=True,
        fit_to_page=True,
        extra={"orientation-requested": "3", "print-quality": "5"},
    )
    assert build_submit_args("Label-A", opts) == [
        "-d", "Label-A",
        "-n", "2",
        "-o", "media=4x6",
        "-o", "print-color-mode=monochrome",
        "-o", "fit-to-page",
        "-o", "orientation-requested=3",
        "-o", "print-quality=5",
    ]


def test_build_submit_args_defaults():
    assert build_submit_args("Label-A", PrintJobOptions()) == ["-d", "Label-A", "-n", "1"]
    assert build_submit_args("Label-A", PrintJobOptions(grayscale=False, fit_to_page=False)) == [
        "-d", "Label-A", "-n", "1",
    ]


def test_options_validation():
    with pytest.raises(ValueError):
        PrintJobOptions(copies=0)
    with pytest.raises(ValueError):
        PrintJobOptions(extra={"bad key": "x"})
    with pytest.raises(ValueError):
        PrintJobOptions(extra={"k": "line\nbreak"})
    with pytest.raises(ValueError):
        PrintJobOptions(media_size="4 x 6")


def test_parse_job_id():
    assert parse_job_id("request id is Label-A-42 (1 file(s))\n") == "Label-A-42"
    assert parse_job_id("") is None


def test_submit_bytes_copies_and_fit_to_page(tmp_path, png_bytes):
    spooler = FakeSpooler(["Label-A: idle\n"])
    original = bytes(png_bytes)

    result = _submitter(spooler, tmp_path).submit(png_bytes, PrintJobOptions(copies=3, fit_to_page=True))

    assert result.printer_name == "Label-A"
    assert result.job_id == "Label-A-1"
    assert result.submitted_at.tzinfo is not None
    call = spooler.submit_calls[0]
    args = call["args"]
    assert args[args.index("-d") + 1] == "Label-A"
    assert args[args.index("-n") + 1] == "3"
    assert "fit-to-page" in args
    assert call["path"].endswith(".png")
    # The scratch file existed while lp ran and is gone afterwards
    assert spooler.seen_files == [True]
    assert os.listdir(tmp_path) == []
    assert png_bytes == original


def test_submit_nonzero_exit_raises_and_cleans_up(tmp_path, png_bytes):
    spooler = FakeSpooler(["Label-A: idle\n"])
    spooler.submit_exit = 1
    spooler.submit_stdout = ""
    spooler.submit_stderr = "lp: The printer or class does not exist."

    with pytest.raises(PrintSubmissionError) as ei:
        _submitter(spooler, tmp_path).submit(png_bytes)

    err = ei.value
    assert err.exit_code == 1
    assert err.printer_name == "Label-A"
    assert "does not exist" in err.stderr
    assert "does not exist" in err.output
    assert os.listdir(tmp_path) == []


def test_submit_launch_failure_cleans_up(tmp_path, png_bytes):
    spooler = FakeSpooler(["Label-A: idle\n"])
    spooler.submit_raises = ExecutionError(["lp"], "command not found")

    with pytest.raises(ExecutionError):
        _submitter(spooler, tmp_path).submit(png_bytes)
    assert os.listdir(tmp_path) == []


def _unlink_denied(path):
    raise PermissionError(13, "Permission denied", path)


def test_accepted_job_survives_scratch_removal_failure(tmp_path, png_bytes, monkeypatch, caplog):
    spooler = FakeSpooler(["Label-A: idle\n"])
    monkeypatch.setattr(os, "unlink", _unlink_denied)

    with caplog.at_level("ERROR", logger="coloring_printer.printing.submitter"):
        result = _submitter(spooler, tmp_path).submit(png_bytes)

    assert result.printer_name == "Label-A"
    assert result.job_id == "Label-A-1"
    assert len(spooler.submit_calls) == 1
    assert "Could not remove scratch file" in caplog.text


def test_rejected_job_error_survives_scratch_removal_failure(tmp_path, png_bytes, monkeypatch):
    spooler = FakeSpooler(["Label-A: idle\n"])
    spooler.submit_exit = 2
    spooler.submit_stdout = ""
    spooler.submit_stderr = "lp: Unsupported document-format"
    monkeypatch.setattr(os, "unlink", _unlink_denied)

    with pytest.raises(PrintSubmissionError) as ei:
        _submitter(spooler, tmp_path).submit(png_bytes)

    assert ei.value.exit_code == 2
    assert "Unsupported document-format" in ei.value.stderr


def test_submit_error_while_building_command_cleans_up(tmp_path, png_bytes, monkeypatch):
    import coloring_printer.printing.submitter as submitter_mod

    def _boom(printer_name, options):
        raise ValueError("bad options")

    monkeypatch.setattr(submitter_mod, "build_submit_args", _boom)
    spooler = FakeSpooler(["Label-A: idle\n"])

    with pytest.raises(ValueError):
        _submitter(spooler, tmp_path).submit(png_bytes)
    assert spooler.submit_calls == []
    assert os.listdir(tmp_path) == []


def test_no_printer_propagates_without_scratch_file(tmp_path, png_bytes):
    spooler = FakeSpooler(["Label-A: disabled\n"])
    with pytest.raises(NoPrinterAvailable):
        _submitter(spooler, tmp_path).submit(png_bytes)
    assert spooler.submit_calls == []
    assert not (tmp_path.exists() and os.listdir(tmp_path))


def test_submit_existing_path_is_used_directly(tmp_path, png_bytes):
    image = tmp_path / "page.png"
    image.write_bytes(png_bytes)
    scratch = tmp_path / "scratch"
    spooler = FakeSpooler(["Label-A: idle\n"])

    _submitter(spooler, scratch).submit(str(image))

    assert spooler.submit_calls[0]["path"] == str(image)
    assert image.exists()
    assert not scratch.exists()


def test_submit_missing_path(tmp_path):
    spooler = FakeSpooler(["Label-A: idle\n"])
    with pytest.raises(PrintSubmissionError):
        _submitter(spooler, tmp_path).submit(str(tmp_path / "missing.png"))
    assert spooler.submit_calls == []


def test_concurrent_submissions_use_distinct_scratch_files(tmp_path, png_bytes):
    spooler = FakeSpooler(["Label-A: idle\n"])
    submitter = _submitter(spooler, tmp_path)
    errors = []

    def _work():
        try:
            submitter.submit(png_bytes)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=_work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    paths = [c["path"] for c in spooler.submit_calls]
    assert len(paths) == 8
    assert len(set(paths)) == 8
    assert os.listdir(tmp_path) == []
