"""
Rig definition parser package for parsing Rigs of Rods truck files.
"""

from .config import ParserOptions
from .diagnostics import (
    Diagnostic,
    DiagnosticsReporter,
    ErrorKind,
    Severity,
    setup_logging,
)
from .rig_keywords import Keyword, identify_keyword, sanitize_line, tokenize_line
from .rig_model import (
    Beam,
    BeamDefaults,
    Document,
    Module,
    Node,
    NodeDefaults,
    NodeId,
    NodeRef,
    RefFlags,
)
from .rig_parser import RigParser
from .sequential_importer import AddressingMode, SequentialImporter

__all__ = [
    "RigParser",
    "ParserOptions",
    "Document",
    "Module",
    "Node",
    "NodeId",
    "NodeRef",
    "RefFlags",
    "Beam",
    "BeamDefaults",
    "NodeDefaults",
    "Keyword",
    "identify_keyword",
    "sanitize_line",
    "tokenize_line",
    "Diagnostic",
    "DiagnosticsReporter",
    "ErrorKind",
    "Severity",
    "setup_logging",
    "AddressingMode",
    "SequentialImporter",
]
