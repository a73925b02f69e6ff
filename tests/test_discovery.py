import pytest

from conftest import FakeSpooler

from coloring_printer.printing.discovery import (
    PrinterDiscovery,
    PrinterState,
    classify_status,
    parse_printer_list,
)
from coloring_printer.printing.errors import NoPrinterAvailable


@pytest.mark.parametrize(
    "text",
    ["paused", "PAUSED", "disabled since Mon - Paused", "is idle, paused", "now printing job-3 (Paused)"],
)
def test_paused_wins_over_other_keywords(text):
    assert classify_status(text) is PrinterState.PAUSED


@pytest.mark.parametrize(
    "text,expected",
    [
        ("is idle.  enabled since Tue 14 Oct 2026", PrinterState.IDLE),
        ("now printing Label-A-12.  enabled since", PrinterState.PROCESSING),
        ("processing", PrinterState.PROCESSING),
        ("disabled since Tue 14 Oct 2026 -", PrinterState.DISABLED),
        ("Disabled and idle", PrinterState.DISABLED),
        ("en attente", PrinterState.UNKNOWN),
        ("", PrinterState.UNKNOWN),
    ],
)
def test_classification_order(text, expected):
    assert classify_status(text) is expected


def test_parse_colon_and_lpstat_shapes():
    out = "Label-A: idle\nprinter Label-B is idle.  enabled since Tue 14 Oct 2026 10:00:00\n\nLabel-C processing\n"
    printers = parse_printer_list(out)
    assert [p.name for p in printers] == ["Label-A", "Label-B", "Label-C"]
    assert [p.state for p in printers] == [PrinterState.IDLE, PrinterState.IDLE, PrinterState.PROCESSING]


def test_continuation_line_extends_previous_status():
    out = "printer Thermal disabled since Tue 14 Oct 2026 10:00:00 -\n\tPaused\nprinter Office is idle.\n"
    printers = parse_printer_list(out)
    assert [p.name for p in printers] == ["Thermal", "Office"]
    assert printers[0].state is PrinterState.PAUSED
    assert "Paused" in printers[0].status_text


def test_leading_continuation_line_is_not_a_printer():
    printers = parse_printer_list("\tPaused\nLabel-A: idle\n")
    assert [(p.name, p.state) for p in printers] == [("Label-A", PrinterState.IDLE)]

    discovery = PrinterDiscovery(FakeSpooler(["  Paused\nLabel-A: disabled\nLabel-B: idle\n"]))
    assert discovery.find_first_usable().name == "Label-B"


def test_malformed_lines_degrade_to_unknown():
    printers = parse_printer_list("Label-A\n???\nLabel-B: idle\n")
    assert [(p.name, p.state) for p in printers] == [
        ("Label-A", PrinterState.UNKNOWN),
        ("???", PrinterState.UNKNOWN),
        ("Label-B", PrinterState.IDLE),
    ]


def test_find_first_usable_skips_paused_only_when_disabled():
    spooler = FakeSpooler(["Label-A: idle\nLabel-B: paused\n"])
    assert PrinterDiscovery(spooler).find_first_usable().name == "Label-A"

    spooler = FakeSpooler(["Label-A: disabled\nLabel-B: paused\n"])
    # Paused is still usable: the spooler queues the job until it is resumed
    assert PrinterDiscovery(spooler).find_first_usable().name == "Label-B"


def test_find_first_usable_never_returns_disabled():
    spooler = FakeSpooler(["Label-A: disabled\nLabel-B: Disabled since yesterday\n"])
    with pytest.raises(NoPrinterAvailable):
        PrinterDiscovery(spooler).find_first_usable()


def test_find_first_usable_empty_listing():
    with pytest.raises(NoPrinterAvailable):
        PrinterDiscovery(FakeSpooler([""])).find_first_usable()


def test_preferred_printer_is_used_when_usable():
    spooler = FakeSpooler(["Label-A: idle\nLabel-B: idle\nLabel-C: disabled\n"])
    assert PrinterDiscovery(spooler, preferred="Label-B").find_first_usable().name == "Label-B"
    # A disabled preferred printer falls back to spooler order
    assert PrinterDiscovery(spooler, preferred="Label-C").find_first_usable().name == "Label-A"


def test_each_list_call_is_a_fresh_snapshot():
    spooler = FakeSpooler(["Label-A: paused\n", "Label-A: idle\n"])
    discovery = PrinterDiscovery(spooler)
    assert discovery.list()[0].state is PrinterState.PAUSED
    assert discovery.list()[0].state is PrinterState.IDLE
    assert spooler.list_calls == 2
