#!/usr/bin/env python3
"""
Parser core: line handling, state machine, defaults and node references.
"""

import logging

import pytest

from rigdef import ErrorKind, ParserOptions, RigParser, Severity
from rigdef.config import BEAM_BREAK, BEAM_DEFORM, DEFAULT_DAMP, ROOT_MODULE_NAME
from rigdef.rig_model import BUILTIN_INERTIA, BUILTIN_NODE_DEFAULTS, MinimassOption, Vec3
from rigdef.rig_parser import to_bool, to_float, to_int
from rigdef.sequential_importer import AddressingMode

MY_RIG = """My Rig
nodes
1, 0.0, 0.0, 0.0
2, 1.0, 0.0, 0.0
end
beams
1, 2
end
"""


def parse(text: str, **options):
    parser = RigParser(ParserOptions(**options))
    doc = parser.parse_text(text, filename="test.truck")
    return parser, doc


def kinds(parser) -> list:
    return [m.kind for m in parser.diagnostics.messages]


# --------------------------
# Value conversion
# --------------------------

def test_to_int()->None:
    assert to_int("12") == 12
    assert to_int(" -3abc") == -3
    assert to_int("abc") is None


def test_to_float()->None:
    assert to_float("0.25") == 0.25
    assert to_float("1e3x") == 1000.0
    assert to_float(".5") == 0.5
    assert to_float("x") is None


def test_to_bool()->None:
    assert to_bool("true")
    assert to_bool("YES")
    assert to_bool("1")
    assert not to_bool("0")
    assert not to_bool("false")


def test_invalid_integer_argument()->None:
    """Non-numeric integer reports an error and the line is kept with 0."""
    parser, doc = parse("T\nwheeldetachers\nabc, 2\n3x, 4\nend\n")
    detachers = doc.root_module.wheeldetachers
    assert [(d.wheel_id, d.detacher_group) for d in detachers] == [(0, 2), (3, 4)]
    assert parser.diagnostics.count(Severity.ERROR, ErrorKind.ARGUMENT_TYPE) == 1
    assert parser.diagnostics.count(Severity.WARNING, ErrorKind.ARGUMENT_TYPE) == 1


# --------------------------
# End-to-end
# --------------------------

def test_my_rig()->None:
    parser, doc = parse(MY_RIG)
    root = doc.root_module

    assert doc.name == "My Rig"
    assert [n.id.num for n in root.nodes] == [1, 2]
    assert root.nodes[0].position == Vec3(0.0, 0.0, 0.0)
    assert root.nodes[1].position == Vec3(1.0, 0.0, 0.0)
    assert len(root.beams) == 1
    assert [ref.num for ref in root.beams[0].nodes] == [1, 2]
    assert parser.diagnostics.count(Severity.ERROR) == 0


def test_wheels_not_enough_arguments()->None:
    parser, doc = parse("T\nwheels\n0.5, 0.3, 12, 1, 2, 9999, 1, 1, 3, 50\nend\n")
    assert doc.root_module.wheels == []
    assert kinds(parser) == [ErrorKind.ARGUMENT_COUNT]


def test_not_enough_arguments_skips_line()->None:
    parser, doc = parse("T\nbeams\n1\nend\n")
    assert doc.root_module.beams == []
    assert len(parser.diagnostics.messages) == 1
    msg = parser.diagnostics.messages[0]
    assert msg.severity == Severity.WARNING
    assert msg.format() == "test.truck:3 (beams): Not enough arguments (got 1, 2 needed), skipping line"


def test_parse_file(tmp_path)->None:
    path = tmp_path / "bytes.truck"
    path.write_bytes(b"Bytes Rig\r\nnodes\r\n1, 0, 0, 0\r\n2, 1, 0, 0 ; tail\r\nend\r\n")
    parser = RigParser()
    doc = parser.parse_file(path)
    assert doc.name == "Bytes Rig"
    assert len(doc.root_module.nodes) == 2
    assert parser.diagnostics.filename == "bytes.truck"


def test_parse_file_missing(tmp_path)->None:
    with pytest.raises(OSError):
        RigParser().parse_file(tmp_path / "missing.truck")


def test_read_failure_is_reported()->None:
    def lines():
        yield "Broken Rig"
        yield "nodes"
        yield "1, 0, 0, 0"
        raise OSError("device lost")

    parser = RigParser()
    doc = parser.parse_lines(lines(), filename="broken.truck")
    assert doc.name == "Broken Rig"
    assert len(doc.root_module.nodes) == 1
    assert kinds(parser) == [ErrorKind.IO]


def test_parser_is_reusable()->None:
    parser = RigParser()
    parser.parse_text("T\nbeams\n1\nend\n")
    doc = parser.parse_text(MY_RIG)
    assert doc.name == "My Rig"
    assert parser.diagnostics.messages == []


# --------------------------
# Line handling
# --------------------------

def test_comment_lines_leave_document_unchanged()->None:
    parser = RigParser()
    parser.prepare()
    parser.process_raw_line("My Rig")
    parser.process_raw_line("nodes")
    before = parser.document.to_dict()

    for comment in ("; comment", "// comment", "   ;indented", "/1, 2, 3, 4"):
        line_number = parser.line_number
        parser.process_raw_line(comment)
        assert parser.line_number == line_number + 1
        assert parser.document.to_dict() == before


def test_title_is_first_non_comment_line()->None:
    _, doc = parse("\n; header\n\n  Title, with 1 2 3  \nnodes\n1, 0, 0, 0\nend\n")
    assert doc.name == "Title, with 1 2 3"
    assert len(doc.root_module.nodes) == 1


def test_trailing_comment_is_cut()->None:
    parser, doc = parse("T\nnodes\n1, 0, 0, 0\n2, 1, 0, 0\nend\nbeams\n1, 2 // support beam\nend\n")
    assert len(doc.root_module.beams) == 1
    assert parser.diagnostics.messages == []


def test_unknown_keyword_outside_block_is_dropped()->None:
    parser, doc = parse("T\nfoobar 1 2 3\n1, 2\n")
    assert doc.root_module.beams == []
    assert parser.diagnostics.messages == []


def test_line_numbers_in_diagnostics()->None:
    parser, _ = parse("T\n; comment\n\nbeams\n1\nend\n")
    assert parser.diagnostics.messages[0].line_number == 5


def test_line_numbers_count_only_newlines()->None:
    parser, _ = parse("T\n; form\x0cfeed separator\nbeams\n1\nend\n")
    assert parser.diagnostics.messages[0].line_number == 4

    parser, _ = parse("T\r\nbeams\r\n1\r\nend\r\n")
    assert parser.diagnostics.messages[0].line_number == 3


# --------------------------
# State machine
# --------------------------

def test_section_reuse()->None:
    parser = RigParser()
    parser.prepare()
    parser.process_raw_line("My Rig")
    parser.process_raw_line("section 1 Wheels")
    first = parser.current_module
    parser.process_raw_line("end_section")
    assert parser.current_module is parser.document.root_module
    parser.process_raw_line("section 1 Wheels")
    assert parser.current_module is first
    doc = parser.finalize()
    assert list(doc.user_modules) == ["Wheels"]
    assert [m.name for m in doc.modules()] == [ROOT_MODULE_NAME, "Wheels"]


def test_module_switch_errors()->None:
    parser, doc = parse("T\nend_section\nsection 1 A\nsection 1 A\nsection 1\n")
    assert kinds(parser) == [ErrorKind.STRUCTURAL, ErrorKind.STRUCTURAL, ErrorKind.ARGUMENT_COUNT]
    assert list(doc.user_modules) == ["A"]


def test_section_keyword_must_stand_alone()->None:
    _, doc = parse("T\nnodes 1\n1, 0, 0, 0\n")
    assert doc.root_module.nodes == []


def test_module_collects_elements()->None:
    text = MY_RIG + "section 1 Extra\nbeams\n2, 1\nend\nend_section\nbeams\n1, 2\nend\n"
    _, doc = parse(text)
    assert len(doc.root_module.beams) == 2
    assert len(doc.user_modules["Extra"].beams) == 1


def test_comment_block()->None:
    parser, doc = parse("T\ncomment\n1, 2\nend_comment\nnodes\n1, 0, 0, 0\nend\n")
    assert len(doc.root_module.nodes) == 1
    assert parser.diagnostics.messages == []


def test_description_block()->None:
    _, doc = parse("T\ndescription\nFirst line: a, b\nSecond line\nend_description\n")
    assert doc.root_module.description == ["First line: a, b", "Second line"]


def test_flags()->None:
    _, doc = parse("T\nhideInChooser\nrollon\nenable_advanced_deformation\nSLIDENODE_CONNECT_INSTANTLY\n")
    assert doc.hide_in_chooser
    assert doc.rollon
    assert doc.enable_advanced_deformation
    assert doc.slide_nodes_connect_instantly
    assert not doc.rescuer


def test_ignored_keywords()->None:
    parser, doc = parse("T\nnodes\n1, 0, 0, 0\nrigidifiers\n2, 1, 0, 0\nend\n")
    assert len(doc.root_module.nodes) == 2
    assert parser.diagnostics.messages == []


def test_single_line_keywords_close_section()->None:
    _, doc = parse("T\nnodes\n1, 0, 0, 0\nfileformatversion 3\n2, 1, 0, 0\n")
    assert len(doc.root_module.nodes) == 1


def test_minimass_closes_section()->None:
    _, doc = parse("T\nminimass\n100, l\n1, 0, 0, 0\n")
    root = doc.root_module
    assert root.minimass[0].global_min_mass_kg == 100.0
    assert root.minimass[0].option == MinimassOption.SKIP_LOADED
    assert root.nodes == []


# --------------------------
# Defaults
# --------------------------

def test_set_beam_defaults_negative_values()->None:
    _, doc = parse(MY_RIG.replace("beams", "set_beam_defaults 10 -1 -1 -1\nbeams"))
    defaults = doc.root_module.beams[0].defaults
    assert defaults.springiness == 10.0
    assert defaults.damping_constant == DEFAULT_DAMP
    assert defaults.deformation_threshold == BEAM_DEFORM
    assert defaults.breaking_threshold == BEAM_BREAK
    assert defaults.is_user_defined


def test_defaults_are_snapshots()->None:
    text = ("T\nset_beam_defaults 100\nbeams\n1, 2\nset_beam_defaults 200\n2, 3\nend\n"
            "set_beam_defaults_scale 2, 1, 1, 1\nbeams\n3, 1\nend\n")
    _, doc = parse(text)
    beams = doc.root_module.beams
    assert [b.defaults.springiness for b in beams] == [100.0, 200.0, 200.0]
    assert beams[0].defaults.scale.springiness == 1.0
    assert beams[2].defaults.scale.springiness == 2.0


def test_plastic_coef_inherited()->None:
    text = ("T\nset_beam_defaults 1, 1, 1, 1, 0.1, mat, 0.5\nset_beam_defaults 2, 1, 1, 1, 0.1, mat, -1\n"
            "beams\n1, 2\nend\n")
    _, doc = parse(text)
    defaults = doc.root_module.beams[0].defaults
    assert defaults.plastic_deform_coef == 0.5
    assert defaults.is_plastic_deform_coef_user_defined
    assert defaults.beam_material_name == "mat"


def test_beam_defaults_capture_advanced_deformation()->None:
    _, doc = parse("T\nenable_advanced_deformation\nset_beam_defaults 5\nbeams\n1, 2\nend\n")
    assert doc.root_module.beams[0].defaults.enable_advanced_deformation


def test_set_node_defaults()->None:
    _, doc = parse("T\nset_node_defaults 5, -1, 2, -1, c\nnodes\n1, 0, 0, 0\nend\n")
    defaults = doc.root_module.nodes[0].node_defaults
    assert defaults.load_weight == 5.0
    assert defaults.friction == BUILTIN_NODE_DEFAULTS.friction
    assert defaults.volume == 2.0
    assert defaults.surface == BUILTIN_NODE_DEFAULTS.surface


def test_set_inertia_defaults()->None:
    text = ("T\nset_inertia_defaults 0.5, 0.6, linear\nhydros\n1, 2, 0.1\nend\n"
            "set_inertia_defaults -1\nhydros\n2, 3, 0.1\nend\n")
    _, doc = parse(text)
    hydros = doc.root_module.hydros
    assert hydros[0].inertia_defaults.start_delay_factor == 0.5
    assert hydros[0].inertia_defaults.start_function == "linear"
    assert hydros[1].inertia_defaults == BUILTIN_INERTIA


def test_detacher_group_and_minimass_defaults()->None:
    text = ("T\nset_default_minimass 20\ndetacher_group 3\nnodes\n1, 0, 0, 0\nend\n"
            "detacher_group end\nbeams\n1, 1\nend\n")
    _, doc = parse(text)
    node = doc.root_module.nodes[0]
    assert node.detacher_group == 3
    assert node.default_minimass.min_mass_kg == 20.0
    assert doc.root_module.beams[0].detacher_group == 0


def test_node_without_default_minimass()->None:
    _, doc = parse(MY_RIG)
    assert doc.root_module.nodes[0].default_minimass is None


# --------------------------
# Node references
# --------------------------

def test_node_reference_duality()->None:
    parser = RigParser()
    parser.prepare()
    for line in MY_RIG.splitlines():
        parser.process_raw_line(line)

    ref = parser.current_module.beams[0].nodes[0]
    assert ref.is_numeric_valid
    assert ref.is_named_valid

    parser.finalize()
    assert ref.is_numeric_valid
    assert not ref.is_named_valid


def test_named_nodes()->None:
    parser, doc = parse("T\nnodes2\nfront, 0, 0, 0\nrear, 1, 0, 0\nend\nbeams\nfront, rear\nend\n")
    assert [str(n.id) for n in doc.root_module.nodes] == ["front", "rear"]
    ref = doc.root_module.beams[0].nodes[1]
    assert ref.is_named_valid and not ref.is_numeric_valid
    assert str(ref) == "rear"
    assert parser.importer.addressing_mode() == AddressingMode.NAMED
    assert parser.diagnostics.messages == []


def test_fileformatversion_named_only()->None:
    text = ("T\nfileformatversion 450\nnodes2\na, 0, 0, 0\nb, 1, 0, 0\nend\nbeams\na, b\nend\n"
            "wheels\n0.5, 0.3, 4, a, b, 9999, 1, 1, a, 50, 1, 1, face, band\nend\n")
    parser, doc = parse(text)
    assert not parser.importer.enabled
    assert parser.importer.addressing_mode() == AddressingMode.NAMED
    assert doc.root_module.beams[0].nodes[0].is_named_valid
    assert doc.root_module.wheels[0].generated_node_ids == []


NUMBERED_NODES_AND_BEAM = "nodes\n1, 0, 0, 0\n2, 1, 0, 0\nend\nbeams\n1, 2\nend\n"


def test_fileformatversion_with_numbered_nodes()->None:
    parser, doc = parse("T\nfileformatversion 450\n" + NUMBERED_NODES_AND_BEAM)
    assert parser.importer.addressing_mode() == AddressingMode.NAMED
    assert [str(n) for n in doc.root_module.beams[0].nodes] == ["1", "2"]
    assert parser.diagnostics.count(Severity.WARNING) == 0
    assert parser.diagnostics.count(Severity.ERROR) == 0


def test_late_fileformatversion_with_numbered_nodes()->None:
    parser, doc = parse("T\n" + NUMBERED_NODES_AND_BEAM + "fileformatversion 450\n")
    assert parser.importer.addressing_mode() == AddressingMode.NAMED
    assert doc.root_module.beams[0].nodes[1].is_named_valid
    assert parser.diagnostics.count(Severity.WARNING) == 0


def test_fileformatversion_still_reports_unknown_number()->None:
    parser, _ = parse("T\nfileformatversion 450\nnodes\n1, 0, 0, 0\nend\nbeams\n1, 3\nend\n")
    assert kinds(parser) == [ErrorKind.UNRESOLVED_NODE]
    assert parser.diagnostics.messages[0].text == "Node '3' is not defined"


def test_mixed_addressing()->None:
    text = "T\nnodes\n1, 0, 0, 0\nend\nnodes2\nhub, 1, 0, 0\nend\nbeams\n1, hub\nend\n"
    parser, doc = parse(text)
    first, second = doc.root_module.beams[0].nodes
    assert parser.importer.addressing_mode() == AddressingMode.MIXED
    assert first.is_numeric_valid and first.num == 1
    assert second.is_named_valid and second.text == "hub"


def test_undefined_node_is_reported()->None:
    parser, _ = parse("T\nnodes\n1, 0, 0, 0\nend\nbeams\n1, 7\nend\n")
    assert kinds(parser) == [ErrorKind.UNRESOLVED_NODE]
    assert parser.diagnostics.messages[0].line_number == 6


def test_generated_nodes_are_known()->None:
    text = ("T\nnodes\n1, 0, 0, 0\n2, 1, 0, 0\n3, 0, 1, 0\nend\n"
            "wheels\n0.5, 0.3, 2, 1, 2, 9999, 1, 1, 3, 50, 1, 1, face, band\nend\n"
            "beams\n4, 7\nend\n")
    parser, doc = parse(text)
    assert doc.root_module.wheels[0].generated_node_ids == [4, 5, 6, 7]
    assert parser.diagnostics.messages == []


# --------------------------
# Diagnostics and logging
# --------------------------

def test_custom_sink()->None:
    received = []
    parse("T\nbeams\n1\nend\n", sink=lambda severity, text: received.append((severity, text)))
    assert received == [(Severity.WARNING, "test.truck:3 (beams): Not enough arguments (got 1, 2 needed), skipping line")]


def test_default_sink_logs(caplog)->None:
    with caplog.at_level(logging.WARNING, logger="rigdef"):
        parse("T\nbeams\n1\nend\n")
    assert "Not enough arguments" in caplog.text
