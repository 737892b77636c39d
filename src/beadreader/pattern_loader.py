"""Entry points that turn pattern files into :class:`Pattern` values.

Every loader either returns a fully built pattern or ``None``. Decode failures
are logged and absorbed here so callers can keep whatever pattern they already
had loaded.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .errors import InvalidEncodingError, PatternDecodeError
from .inflate import inflate_text
from .itxt import PATTERN_KEYWORD, extract_text_payload
from .pattern import Pattern
from .pattern_parser import parse_pattern
from .png_container import ITXT_CHUNK_TYPE, has_signature, read_chunk

LOGGER = logging.getLogger(__name__)


def is_container(data: bytes) -> bool:
    """Return ``True`` when ``data`` should be decoded as an image container."""

    return has_signature(data)


def extract_pattern_text(data: bytes, *, keyword: str = PATTERN_KEYWORD) -> str:
    """Pull the embedded pattern markup out of container ``data``.

    Raises a :class:`PatternDecodeError` subclass describing the first stage
    that failed.
    """

    payload = read_chunk(data, ITXT_CHUNK_TYPE)
    text_bytes, compressed = extract_text_payload(payload, keyword)
    if compressed:
        return inflate_text(text_bytes)
    try:
        return text_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(f"embedded text is not valid UTF-8: {exc}") from exc


def decode_structured_text(data: bytes | str) -> Pattern | None:
    return parse_pattern(data)


def decode_container(data: bytes, *, keyword: str = PATTERN_KEYWORD) -> Pattern | None:
    try:
        text = extract_pattern_text(data, keyword=keyword)
    except PatternDecodeError as exc:
        LOGGER.warning("container rejected (%s): %s", type(exc).__name__, exc)
        return None
    return parse_pattern(text)


async def load_from_structured_text(data: bytes | str) -> Pattern | None:
    """Parse pattern markup off the event loop."""

    return await asyncio.to_thread(decode_structured_text, data)


async def load_from_container(
    data: bytes, *, keyword: str = PATTERN_KEYWORD
) -> Pattern | None:
    """Decode a pattern embedded in container ``data`` off the event loop."""

    return await asyncio.to_thread(decode_container, data, keyword=keyword)


async def load_pattern_file(path: Path) -> Pattern | None:
    """Load ``path`` as a container or as plain markup, sniffed by signature."""

    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        LOGGER.warning("unable to read pattern %s: %s", path, exc)
        return None

    if is_container(data):
        LOGGER.info("decoding embedded pattern from %s", path)
        return await load_from_container(data)
    LOGGER.info("decoding pattern markup from %s", path)
    return await load_from_structured_text(data)


__all__ = [
    "decode_container",
    "decode_structured_text",
    "extract_pattern_text",
    "is_container",
    "load_from_container",
    "load_from_structured_text",
    "load_pattern_file",
]
