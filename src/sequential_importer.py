"""
Sequential import of legacy node addressing.

Old truck files address nodes by number and let wheels and cinecams generate
extra nodes which take the next free numbers. Newer files use named nodes.
Both can appear without a version header, so while parsing every node
reference keeps both interpretations. When the whole file has been read the
importer decides, once, which interpretation holds for each reference and
commits the numbers reserved for generated nodes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import re

from .diagnostics import DiagnosticsReporter, ErrorKind
from .rig_keywords import Keyword
from .rig_model import Document, NodeRef, RefFlags

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?\d+")

# Nodes generated per wheel ray
_NODES_PER_RAY = {
    Keyword.WHEELS: 2,
    Keyword.MESHWHEELS: 2,
    Keyword.MESHWHEELS2: 2,
    Keyword.WHEELS2: 4,
    Keyword.FLEXBODYWHEELS: 4,
}


class AddressingMode(Enum):
    NUMBERED = "numbered"  # legacy, numbers only
    NAMED = "named"        # named only
    MIXED = "mixed"        # both declaration kinds present


@dataclass
class GeneratedBlock:
    """Contiguous range of node numbers reserved for an element that generates nodes."""
    keyword: Keyword
    owner: Any
    start: int
    count: int

    @property
    def ids(self) -> list[int]:
        return list(range(self.start, self.start + self.count))


@dataclass
class SequentialImporter:
    reporter: DiagnosticsReporter
    enabled: bool = False
    named_only: bool = False
    numbered_nodes: set[int] = field(default_factory=set)
    named_nodes: set[str] = field(default_factory=set)
    refs: list[NodeRef] = field(default_factory=list)
    generated: list[GeneratedBlock] = field(default_factory=list)
    processed: bool = False
    _next_generated_id: int = 0

    def init(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self.named_only = False
        self.numbered_nodes = set()
        self.named_nodes = set()
        self.refs = []
        self.generated = []
        self.processed = False
        self._next_generated_id = 0

    def disable(self) -> None:
        """Called when the file declares a format version which requires named nodes."""
        if self.enabled:
            logger.debug("Sequential import disabled, named-only addressing from line %d",
                         self.reporter.line_number)
        self.enabled = False
        self.named_only = True

    # --------------------------
    # Recording
    # --------------------------

    def add_numbered_node(self, num: int) -> None:
        self.numbered_nodes.add(num)

    def add_named_node(self, name: str) -> None:
        self.named_nodes.add(name)

    def add_ref(self, ref: NodeRef) -> NodeRef:
        self.refs.append(ref)
        return ref

    def _reserve(self, keyword: Keyword, owner: Any, count: int) -> GeneratedBlock:
        highest_declared = max(self.numbered_nodes) if self.numbered_nodes else -1
        start = max(highest_declared + 1, self._next_generated_id)
        block = GeneratedBlock(keyword=keyword, owner=owner, start=start, count=max(count, 0))
        self._next_generated_id = start + block.count
        self.generated.append(block)
        return block

    def generate_nodes_for_wheel(self, keyword: Keyword, num_rays: int, owner: Any) -> GeneratedBlock:
        return self._reserve(keyword, owner, num_rays * _NODES_PER_RAY[keyword])

    def add_generated_node(self, keyword: Keyword, owner: Any) -> GeneratedBlock:
        return self._reserve(keyword, owner, 1)

    # --------------------------
    # Resolution
    # --------------------------

    def addressing_mode(self) -> AddressingMode:
        if self.named_only or (self.named_nodes and not self.numbered_nodes):
            return AddressingMode.NAMED
        if self.named_nodes:
            return AddressingMode.MIXED
        return AddressingMode.NUMBERED

    def _is_known_number(self, num: int) -> bool:
        if num in self.numbered_nodes:
            return True
        return any(b.start <= num < b.start + b.count for b in self.generated)

    def _unresolved(self, ref: NodeRef, text: str) -> None:
        self.reporter.line_number = ref.line_number
        self.reporter.error(ErrorKind.UNRESOLVED_NODE, text)
        ref.flags = RefFlags.NONE

    def _commit_numeric(self, ref: NodeRef) -> None:
        ref.set_numeric()
        if not self._is_known_number(ref.num):
            self.reporter.line_number = ref.line_number
            self.reporter.warning(ErrorKind.UNRESOLVED_NODE,
                                  f"Node '{ref.text}' is not defined")

    def _is_known_name(self, text: str) -> bool:
        if text in self.named_nodes:
            return True
        # Numbered declarations stay addressable by their number in named-only files
        return _INTEGER_RE.fullmatch(text) is not None and int(text) in self.numbered_nodes

    def _commit_named(self, ref: NodeRef) -> None:
        ref.set_named()
        if not self._is_known_name(ref.text):
            self.reporter.line_number = ref.line_number
            self.reporter.warning(ErrorKind.UNRESOLVED_NODE,
                                  f"Node '{ref.text}' is not defined")

    def _resolve(self, ref: NodeRef, mode: AddressingMode) -> None:
        is_integer = _INTEGER_RE.fullmatch(ref.text) is not None
        if mode == AddressingMode.NAMED:
            self._commit_named(ref)
        elif mode == AddressingMode.NUMBERED:
            # Numeric prefix is enough, "5x" addresses node 5
            if _INTEGER_RE.match(ref.text):
                self._commit_numeric(ref)
            else:
                self._unresolved(ref, f"Node '{ref.text}' is not a valid node number")
        elif ref.must_check_named_first and ref.text in self.named_nodes:
            ref.set_named()
        elif is_integer:
            self._commit_numeric(ref)
        elif ref.text in self.named_nodes:
            ref.set_named()
        else:
            self._unresolved(ref, f"Node '{ref.text}' is not defined")

    def process(self, document: Document) -> AddressingMode:
        """
        Resolve every buffered reference and commit generated node numbers.

        Runs once per parse; later calls return the mode without touching
        the document.
        """
        mode = self.addressing_mode()
        if self.processed:
            return mode
        self.processed = True

        saved_line, saved_keyword = self.reporter.line_number, self.reporter.keyword
        self.reporter.keyword = "none"
        try:
            for ref in self.refs:
                self._resolve(ref, mode)

            if mode != AddressingMode.NAMED:
                for block in self.generated:
                    block.owner.generated_node_ids = block.ids
        finally:
            self.reporter.line_number, self.reporter.keyword = saved_line, saved_keyword

        logger.debug("Sequential import of '%s': mode=%s, %d refs, %d generated blocks",
                     document.name, mode.value, len(self.refs), len(self.generated))
        return mode
