"""Streaming parser that turns bead pattern markup into a :class:`Pattern`."""

from __future__ import annotations

import logging
import re
from typing import Callable, List, Optional
from xml.etree import ElementTree as ET

from .pattern import Bead, Pattern

LOGGER = logging.getLogger(__name__)

CompletionCallback = Callable[[Optional[Pattern]], None]

_PLAIN_INTEGER = re.compile(r"[+-]?[0-9]+")
_MAX_COUNT = 2**63 - 1

_PATTERN_TAG = "pattern"
_BEAD_TAG = "bead"


def lenient_int(text: str) -> int:
    """Parse ``text`` as a non-negative 64-bit integer, returning 0 when it is not one."""

    stripped = text.strip()
    if not _PLAIN_INTEGER.fullmatch(stripped):
        return 0
    digits = stripped.lstrip("+-").lstrip("0")
    if not digits or stripped.startswith("-"):
        return 0
    if len(digits) > len(str(_MAX_COUNT)):
        return 0
    value = int(digits)
    return value if value <= _MAX_COUNT else 0


def _local_name(tag: str) -> str:
    # Drop any "{namespace}" prefix so namespaced documents still match.
    return tag.rsplit("}", 1)[-1]


class PatternParser:
    """Incremental pattern parser with explicit accumulator state.

    Markup is pushed through :meth:`feed` in as many pieces as the caller
    likes. The completion callback fires exactly once: with the built
    :class:`Pattern` when the ``pattern`` element closes, or with ``None`` when
    the markup is malformed or ends before that element closes.
    """

    def __init__(self, on_complete: CompletionCallback | None = None) -> None:
        self._on_complete = on_complete
        self._pull = ET.XMLPullParser(events=("start", "end"))
        self._current_element = ""
        self._name_parts: List[str] = []
        self._rows = 0
        self._columns = 0
        self._beads: List[Bead] = []
        self._bead_color = ""
        self._bead_count = 0
        self._done = False
        self.result: Pattern | None = None

    @property
    def done(self) -> bool:
        return self._done

    def feed(self, data: bytes | str) -> None:
        """Push another slice of markup into the parser."""

        if self._done:
            return
        try:
            self._pull.feed(data)
            self._drain_events()
        except ET.ParseError as exc:
            self._fail(str(exc))

    def close(self) -> Pattern | None:
        """Finish the document and return the parsed pattern, if any."""

        if not self._done:
            try:
                self._pull.close()
                self._drain_events()
            except ET.ParseError as exc:
                self._fail(str(exc))
        if not self._done:
            self._fail(f"document ended before </{_PATTERN_TAG}>")
        return self.result

    # Event handling -----------------------------------------------------

    def _drain_events(self) -> None:
        for event, element in self._pull.read_events():
            if self._done:
                return
            tag = _local_name(element.tag)
            if event == "start":
                self._start_element(tag)
                continue
            self._characters(tag, element.text)
            self._end_element(tag)
            if tag != _PATTERN_TAG:
                element.clear()

    def _start_element(self, tag: str) -> None:
        self._current_element = tag
        if tag == _BEAD_TAG:
            self._bead_color = ""
            self._bead_count = 0

    def _characters(self, tag: str, text: str | None) -> None:
        if text is None or tag != self._current_element:
            return
        value = text.strip()
        if not value:
            return
        if tag == "patternName":
            self._name_parts.append(value)
        elif tag == "rows":
            self._rows = lenient_int(value)
        elif tag == "columns":
            self._columns = lenient_int(value)
        elif tag == "color":
            self._bead_color += value.lower()
        elif tag == "count":
            self._bead_count = lenient_int(value)

    def _end_element(self, tag: str) -> None:
        if tag == _BEAD_TAG:
            self._beads.append(
                Bead(identity=len(self._beads), color=self._bead_color, count=self._bead_count)
            )
        elif tag == _PATTERN_TAG:
            pattern = Pattern(
                name="".join(self._name_parts),
                columns=self._columns,
                rows=self._rows,
                beads=tuple(self._beads),
            )
            LOGGER.debug("parsed pattern %r with %d beads", pattern.name, pattern.bead_count)
            self._finish(pattern)

    def _fail(self, reason: str) -> None:
        if self._done:
            return
        LOGGER.warning("pattern markup rejected: %s", reason)
        self._finish(None)

    def _finish(self, pattern: Pattern | None) -> None:
        if self._done:
            return
        self._done = True
        self.result = pattern
        if self._on_complete is not None:
            self._on_complete(pattern)


def parse_pattern(
    data: bytes | str, on_complete: CompletionCallback | None = None
) -> Pattern | None:
    """Parse a complete pattern document in one call."""

    parser = PatternParser(on_complete)
    parser.feed(data)
    return parser.close()


__all__ = ["CompletionCallback", "PatternParser", "lenient_int", "parse_pattern"]
