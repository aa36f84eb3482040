#!/usr/bin/env python3
"""
Line sanitizer, tokenizer and keyword resolver.
"""

import pytest

from rigdef.rig_keywords import (
    Keyword,
    KeywordKind,
    identify_keyword,
    keyword_kind,
    sanitize_line,
    split_list,
    tokenize_line,
    trim_trailing_comment,
)


@pytest.mark.parametrize("raw", ["", "   ", "; comment", "\t;indented", "// comment", "/x", "\r\n"])
def test_sanitize_skips_blank_and_comment_lines(raw)->None:
    assert sanitize_line(raw) is None


def test_sanitize_trims()->None:
    assert sanitize_line("  1, 2, 3  \r\n") == "1, 2, 3"
    assert sanitize_line("1, 2 ;; comment") == "1, 2"
    assert sanitize_line("1, 2 // comment") == "1, 2"


def test_sanitize_decodes_bytes()->None:
    assert sanitize_line(b"abc\xff def\n") == "abc? def"
    assert sanitize_line("café".encode("utf-8")) == "café"


def test_sanitize_truncates()->None:
    assert len(sanitize_line("x" * 3000)) == 2000
    assert sanitize_line("abcdef", max_length=3) == "abc"


def test_trim_trailing_comment()->None:
    assert trim_trailing_comment("a/b") == "a"
    assert trim_trailing_comment("1, 2 \t//comment") == "1, 2"
    assert trim_trailing_comment("no comment") == "no comment"


def test_tokenize()->None:
    line = "1, 0.0:2"
    spans = tokenize_line(line)
    assert spans == [(0, 1), (3, 3), (7, 1)]
    assert [line[s:s + n] for s, n in spans] == ["1", "0.0", "2"]
    assert tokenize_line("a|b\tc,,d") == [(0, 1), (2, 1), (4, 1), (7, 1)]
    assert tokenize_line("") == []


def test_tokenize_max_args()->None:
    assert len(tokenize_line(", ".join(["1"] * 150))) == 100
    assert len(tokenize_line("1 2 3 4", max_args=2)) == 2


def test_split_list()->None:
    assert split_list("1,,2, 3", ",") == ["1", "2", " 3"]
    assert split_list("5, 1 2", ", ") == ["5", "1", "2"]


@pytest.mark.parametrize("line, keyword", [
    ("nodes", Keyword.NODES),
    ("NODES", Keyword.NODES),
    ("nodes  ", Keyword.NODES),
    ("nodes2", Keyword.NODES2),
    ("end", Keyword.END),
    ("end_section", Keyword.END_SECTION),
    ("section 1 Extra", Keyword.SECTION),
    ("hideInChooser", Keyword.HIDEINCHOOSER),
    ("hideinchooser", Keyword.HIDEINCHOOSER),
    ("set_beam_defaults 1, 2", Keyword.SET_BEAM_DEFAULTS),
    ("set_beam_defaults_scale 1, 1, 1, 1", Keyword.SET_BEAM_DEFAULTS_SCALE),
    ("AntiLockBrakes 1, 2", Keyword.ANTILOCKBRAKES),
    ("add_animation 1.0, 0, 0", Keyword.ADD_ANIMATION),
    ("forset 1-5", Keyword.FORSET),
    ("submesh", Keyword.SUBMESH),
])
def test_identify_keyword(line, keyword)->None:
    assert identify_keyword(line) == keyword


@pytest.mark.parametrize("line", [
    "1, 2, 3",
    "nodes 1",
    "beamsx",
    "set_beam_defaultsx 1",
    "front, 0, 0, 0",
    "_nodes",
])
def test_data_lines(line)->None:
    assert identify_keyword(line) is None


def test_keyword_kind()->None:
    assert keyword_kind(Keyword.ROLLON) == KeywordKind.FLAG
    assert keyword_kind(Keyword.SET_NODE_DEFAULTS) == KeywordKind.DIRECTIVE
    assert keyword_kind(Keyword.BEAMS) == KeywordKind.SECTION
    assert keyword_kind(Keyword.END_DESCRIPTION) == KeywordKind.END
    assert keyword_kind(Keyword.END_SECTION) == KeywordKind.MODULE
    assert keyword_kind(Keyword.ENVMAP) == KeywordKind.IGNORED
