"""Split international text chunk payloads into their fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from .errors import ChunkNotFoundError, InvalidChunkStructureError

LOGGER = logging.getLogger(__name__)

PATTERN_KEYWORD = "BeadPattern"

_COMPRESSION_METHOD_ZLIB = 0


@dataclass(frozen=True)
class InternationalText:
    """Decoded header fields plus the (possibly compressed) text bytes."""

    keyword: str
    compression_flag: int
    compression_method: int
    language_tag: str
    translated_keyword: str
    text: bytes

    @property
    def compressed(self) -> bool:
        return self.compression_flag == 1


def _split_terminated(payload: bytes, start: int, field: str) -> Tuple[bytes, int]:
    end = payload.find(b"\x00", start)
    if end < 0:
        raise InvalidChunkStructureError(f"{field} is missing its null terminator")
    return payload[start:end], end + 1


def parse_international_text(payload: bytes) -> InternationalText:
    """Decode the fixed field layout of an international text chunk."""

    raw_keyword, offset = _split_terminated(payload, 0, "keyword")
    if offset + 2 > len(payload):
        raise InvalidChunkStructureError("chunk ends before the compression fields")
    compression_flag = payload[offset]
    compression_method = payload[offset + 1]
    offset += 2
    raw_language, offset = _split_terminated(payload, offset, "language tag")
    raw_translated, offset = _split_terminated(payload, offset, "translated keyword")

    if compression_flag == 1 and compression_method != _COMPRESSION_METHOD_ZLIB:
        raise InvalidChunkStructureError(
            f"unsupported compression method {compression_method}"
        )

    return InternationalText(
        keyword=raw_keyword.decode("latin-1"),
        compression_flag=compression_flag,
        compression_method=compression_method,
        language_tag=raw_language.decode("ascii", errors="replace"),
        translated_keyword=raw_translated.decode("utf-8", errors="replace"),
        text=payload[offset:],
    )


def extract_text_payload(
    payload: bytes, keyword: str = PATTERN_KEYWORD
) -> Tuple[bytes, bool]:
    """Return ``(text_bytes, compressed)`` when the chunk carries ``keyword``.

    A chunk labelled with any other keyword is reported as
    :class:`ChunkNotFoundError` so callers treat it the same as a missing chunk.
    """

    chunk = parse_international_text(payload)
    if chunk.keyword != keyword:
        raise ChunkNotFoundError(
            f"text chunk keyword {chunk.keyword!r} does not match {keyword!r}"
        )
    LOGGER.debug(
        "keyword %r carries %d text bytes (compressed=%s)",
        keyword,
        len(chunk.text),
        chunk.compressed,
    )
    return chunk.text, chunk.compressed


__all__ = [
    "InternationalText",
    "PATTERN_KEYWORD",
    "extract_text_payload",
    "parse_international_text",
]
