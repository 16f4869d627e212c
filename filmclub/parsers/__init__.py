"""Parsers for exported voting-round snapshots."""

from .base import SnapshotParser

# Parser registry - import parsers here to register them
_parsers: list[type[SnapshotParser]] = []


def register_parser(parser_class: type[SnapshotParser]) -> type[SnapshotParser]:
    """Decorator to register a parser class."""
    _parsers.append(parser_class)
    return parser_class


def get_all_parsers() -> list[type[SnapshotParser]]:
    """Return all registered parser classes."""
    return _parsers.copy()


def detect_parser(source: str) -> SnapshotParser | None:
    """Auto-detect and return an appropriate parser instance for the given source."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse(source):
            return parser
    return None


def detect_parser_by_content(content: bytes, filename: str) -> SnapshotParser | None:
    """Return a parser that recognises the content itself, if any."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse_content(content, filename):
            return parser
    return None


def get_supported_formats() -> str:
    """Return a user-friendly description of supported export formats."""
    lines = ["We currently support round exports as:"]
    for parser_class in _parsers:
        description = getattr(parser_class, "FORMAT_DESCRIPTION", None)
        if description:
            lines.append(f"  - {description}")
    return "\n".join(lines)


from . import json_export  # noqa: E402, F401
from . import csv_export  # noqa: E402, F401
