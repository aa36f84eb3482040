"""
Diagnostics reporting for the truck file parser.

Every recoverable problem found while parsing becomes a Diagnostic. The
reporter decorates it with file name, line number and keyword context and
forwards the text to a sink. Reporting never raises.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional
import logging
import sys

logger = logging.getLogger(__name__)


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ErrorKind(Enum):
    """Error taxonomy of the parser; none of these abort parsing."""
    STRUCTURAL = "structural"
    ARGUMENT_COUNT = "argument_count"
    ARGUMENT_TYPE = "argument_type"
    UNKNOWN_OPTION = "unknown_option"
    INVALID_VALUE = "invalid_value"
    RESOURCE_MISSING = "resource_missing"
    UNRESOLVED_NODE = "unresolved_node"
    IO = "io"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass
class Diagnostic:
    """
    A single reported message.

    Attributes:
        severity: Message severity
        kind: Taxonomy entry
        filename: Name of the parsed file (may be empty)
        line_number: 1-based line number the message refers to
        keyword: Keyword context active when the message was produced
        text: Raw message text
    """
    severity: Severity
    kind: ErrorKind
    filename: str
    line_number: int
    keyword: str
    text: str

    def format(self) -> str:
        return f"{self.filename}:{self.line_number} ({self.keyword}): {self.text}"


def log_sink(severity: Severity, text: str) -> None:
    """Default sink: forward to the package logger."""
    logger.log(_LOG_LEVELS[severity], text)


@dataclass
class DiagnosticsReporter:
    """
    Formats and forwards diagnostics with file/line/keyword context.

    The parser updates `filename`, `line_number` and `keyword` as it goes;
    `report()` snapshots them into a Diagnostic.
    """
    sink: Optional[Callable[[Severity, str], None]] = None
    filename: str = ""
    line_number: int = 0
    keyword: str = "none"
    messages: list[Diagnostic] = field(default_factory=list)

    def reset(self, filename: str = "") -> None:
        self.filename = filename
        self.line_number = 0
        self.keyword = "none"
        self.messages = []

    def report(self, severity: Severity, kind: ErrorKind, text: str) -> Diagnostic:
        diag = Diagnostic(
            severity=severity,
            kind=kind,
            filename=self.filename,
            line_number=self.line_number,
            keyword=self.keyword,
            text=text,
        )
        self.messages.append(diag)
        sink = self.sink if self.sink is not None else log_sink
        try:
            sink(severity, diag.format())
        except Exception:
            logger.exception("Diagnostics sink failed for message: %s", diag.format())
        return diag

    def warning(self, kind: ErrorKind, text: str) -> Diagnostic:
        return self.report(Severity.WARNING, kind, text)

    def error(self, kind: ErrorKind, text: str) -> Diagnostic:
        return self.report(Severity.ERROR, kind, text)

    def count(self, severity: Severity | None = None, kind: ErrorKind | None = None) -> int:
        return len([
            m for m in self.messages
            if (severity is None or m.severity == severity) and (kind is None or m.kind == kind)
        ])


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the logger of the 'rigdef' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    pkg_logger = logging.getLogger("rigdef")
    pkg_logger.setLevel(level)

    # Avoid duplicate handlers when called twice
    if pkg_logger.hasHandlers():
        pkg_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    pkg_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        pkg_logger.addHandler(file_handler)

    pkg_logger.debug("Logging initialized.")
