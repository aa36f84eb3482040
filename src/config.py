"""
Parser configuration and format constants.

Exports:
    LINE_BUFFER_LENGTH: Raw lines are truncated to this many characters.
    LINE_MAX_ARGS: Maximum number of arguments the tokenizer produces.
    ROOT_MODULE_NAME: Name of the always-present root module.
    NAMED_NODES_FILE_FORMAT_VERSION: First 'fileformatversion' which uses named-only nodes.
    ParserOptions: Per-parser settings and external collaborators.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional

LINE_BUFFER_LENGTH: int = 2000
LINE_MAX_ARGS: int = 100

ROOT_MODULE_NAME: str = "_Root_"

NAMED_NODES_FILE_FORMAT_VERSION: int = 450

# Built-in physics defaults of the format
DEFAULT_SPRING: float = 9000000.0
DEFAULT_DAMP: float = 12000.0
BEAM_DEFORM: float = 400000.0
BEAM_BREAK: float = 1000000.0
DEFAULT_BEAM_DIAMETER: float = 0.05
BEAM_SKELETON_DIAMETER: float = 0.01
DEFAULT_MINIMASS: float = 50.0
DEFAULT_SKELETON_VISIBILITY_RANGE: float = 150.0


@dataclass
class ParserOptions:
    """
    Settings of a RigParser instance.

    Attributes:
        resource_group: Resource group name passed to `resource_exists`
        resource_exists: Callable (group, name) -> bool used to validate textures
            of 'managedmaterials'. None means every texture is assumed present.
        sink: Callable (severity, text) receiving formatted diagnostics.
            None forwards diagnostics to the 'rigdef' logger.
        line_buffer_length: Raw lines are truncated to this length
        max_args: Tokenizer argument cap
    """
    resource_group: str = ""
    resource_exists: Optional[Callable[[str, str], bool]] = None
    sink: Optional[Callable[..., None]] = None
    line_buffer_length: int = LINE_BUFFER_LENGTH
    max_args: int = LINE_MAX_ARGS
