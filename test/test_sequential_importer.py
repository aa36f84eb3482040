#!/usr/bin/env python3
"""
Node reference resolution and diagnostics reporting.
"""

import logging

from rigdef.diagnostics import Diagnostic, DiagnosticsReporter, ErrorKind, Severity
from rigdef.rig_keywords import Keyword
from rigdef.rig_model import Cinecam, Document, NodeRef, RefFlags, Wheel
from rigdef.sequential_importer import AddressingMode, SequentialImporter

BOTH_STATES = RefFlags.IMPORT_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_VALID


def make_importer():
    reporter = DiagnosticsReporter(sink=lambda severity, text: None)
    reporter.reset("test.truck")
    importer = SequentialImporter(reporter)
    importer.init()
    return reporter, importer


def ref(text, line_number=1, flags=BOTH_STATES):
    num = abs(int(text)) if text.lstrip("+-").isdigit() else 0
    return NodeRef(text=text, num=num, flags=flags, line_number=line_number)


# --------------------------
# Importer
# --------------------------

def test_generated_blocks()->None:
    _, importer = make_importer()
    for num in (1, 2, 3):
        importer.add_numbered_node(num)
    wheel, cinecam = Wheel(), Cinecam()
    importer.generate_nodes_for_wheel(Keyword.WHEELS, 4, wheel)
    importer.add_generated_node(Keyword.CINECAM, cinecam)

    assert importer.process(Document()) == AddressingMode.NUMBERED
    assert wheel.generated_node_ids == list(range(4, 12))
    assert cinecam.generated_node_ids == [12]


def test_wheels2_generate_four_nodes_per_ray()->None:
    _, importer = make_importer()
    importer.add_numbered_node(0)
    block = importer.generate_nodes_for_wheel(Keyword.WHEELS2, 3, Wheel())
    assert block.start == 1
    assert block.count == 12


def test_numeric_refs()->None:
    reporter, importer = make_importer()
    importer.add_numbered_node(1)
    importer.add_generated_node(Keyword.CINECAM, Cinecam())
    known, generated, missing = ref("1"), ref("2"), ref("7", line_number=9)
    for r in (known, generated, missing):
        importer.add_ref(r)

    importer.process(Document())
    assert known.flags == RefFlags.IMPORT_STATE_IS_VALID
    assert str(generated) == "2"
    assert reporter.count(Severity.WARNING, ErrorKind.UNRESOLVED_NODE) == 1
    assert reporter.messages[0].line_number == 9
    assert reporter.messages[0].text == "Node '7' is not defined"
    assert reporter.messages[0].keyword == "none"


def test_numbered_mode_rejects_names()->None:
    reporter, importer = make_importer()
    importer.add_numbered_node(1)
    bad = importer.add_ref(ref("wheel_hub"))
    importer.process(Document())
    assert bad.flags == RefFlags.NONE
    assert reporter.count(Severity.ERROR) == 1
    assert "is not a valid node number" in reporter.messages[0].text


def test_numbered_mode_accepts_numeric_prefix()->None:
    reporter, importer = make_importer()
    importer.add_numbered_node(5)
    r = importer.add_ref(NodeRef(text="5x", num=5, flags=BOTH_STATES, line_number=3))
    importer.process(Document())
    assert r.flags == RefFlags.IMPORT_STATE_IS_VALID
    assert str(r) == "5"
    assert reporter.count() == 0


def test_named_mode_knows_numbered_nodes()->None:
    reporter, importer = make_importer()
    importer.add_numbered_node(1)
    importer.disable()
    known, unknown = importer.add_ref(ref("1")), importer.add_ref(ref("2"))
    importer.process(Document())
    assert known.is_named_valid and unknown.is_named_valid
    assert reporter.count(Severity.WARNING, ErrorKind.UNRESOLVED_NODE) == 1
    assert reporter.messages[0].text == "Node '2' is not defined"


def test_mixed_mode()->None:
    reporter, importer = make_importer()
    importer.add_numbered_node(1)
    importer.add_named_node("hub")
    named, numeric, unknown = ref("hub"), ref("1"), ref("axle")
    for r in (named, numeric, unknown):
        importer.add_ref(r)

    assert importer.process(Document()) == AddressingMode.MIXED
    assert named.is_named_valid and not named.is_numeric_valid
    assert numeric.is_numeric_valid and not numeric.is_named_valid
    assert unknown.flags == RefFlags.NONE
    assert reporter.count(Severity.ERROR, ErrorKind.UNRESOLVED_NODE) == 1


def test_mixed_mode_named_first()->None:
    _, importer = make_importer()
    importer.add_numbered_node(5)
    importer.add_named_node("5")
    r = importer.add_ref(ref("5", flags=BOTH_STATES | RefFlags.IMPORT_STATE_MUST_CHECK_NAMED_FIRST))
    importer.process(Document())
    assert r.flags == RefFlags.REGULAR_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_NAMED


def test_disable()->None:
    reporter, importer = make_importer()
    importer.disable()
    assert not importer.enabled
    importer.add_named_node("a")
    r = importer.add_ref(ref("b"))
    assert importer.process(Document()) == AddressingMode.NAMED
    assert r.is_named_valid
    assert reporter.count(Severity.WARNING) == 1


def test_named_mode_keeps_generated_ids_empty()->None:
    _, importer = make_importer()
    importer.add_named_node("a")
    wheel = Wheel()
    importer.generate_nodes_for_wheel(Keyword.WHEELS, 2, wheel)
    importer.process(Document())
    assert wheel.generated_node_ids == []


def test_process_runs_once()->None:
    reporter, importer = make_importer()
    importer.add_ref(ref("3"))
    importer.process(Document())
    assert importer.process(Document()) == AddressingMode.NUMBERED
    assert reporter.count() == 1


def test_process_restores_reporter_context()->None:
    reporter, importer = make_importer()
    reporter.line_number, reporter.keyword = 42, "end"
    importer.add_ref(ref("3", line_number=5))
    importer.process(Document())
    assert reporter.messages[0].line_number == 5
    assert (reporter.line_number, reporter.keyword) == (42, "end")


# --------------------------
# Diagnostics
# --------------------------

def test_diagnostic_format()->None:
    diag = Diagnostic(Severity.ERROR, ErrorKind.STRUCTURAL, "a.truck", 3, "beams", "oops")
    assert diag.format() == "a.truck:3 (beams): oops"


def test_reporter_context_and_counts()->None:
    received = []
    reporter = DiagnosticsReporter(sink=lambda severity, text: received.append((severity, text)))
    reporter.reset("a.truck")
    reporter.line_number, reporter.keyword = 7, "nodes"
    reporter.warning(ErrorKind.ARGUMENT_COUNT, "too few")
    reporter.error(ErrorKind.ARGUMENT_TYPE, "bad")
    reporter.error(ErrorKind.STRUCTURAL, "worse")

    assert received[0] == (Severity.WARNING, "a.truck:7 (nodes): too few")
    assert reporter.count() == 3
    assert reporter.count(Severity.ERROR) == 2
    assert reporter.count(kind=ErrorKind.ARGUMENT_TYPE) == 1
    assert reporter.count(Severity.WARNING, ErrorKind.STRUCTURAL) == 0

    reporter.reset("b.truck")
    assert reporter.count() == 0
    assert reporter.line_number == 0


def test_failing_sink_is_contained(caplog)->None:
    def sink(severity, text):
        raise RuntimeError("sink down")

    reporter = DiagnosticsReporter(sink=sink)
    with caplog.at_level(logging.ERROR, logger="rigdef"):
        diag = reporter.error(ErrorKind.IO, "cannot read")
    assert diag.text == "cannot read"
    assert len(reporter.messages) == 1
    assert "Diagnostics sink failed" in caplog.text
