"""Walk the length-prefixed chunk stream of PNG containers."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Iterator

from .errors import ChunkNotFoundError, InvalidContainerError

LOGGER = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
ITXT_CHUNK_TYPE = b"iTXt"

_HEADER = struct.Struct(">I4s")
_CRC_BYTES = 4


@dataclass(frozen=True)
class PngChunk:
    """A single chunk lifted out of a container stream."""

    tag: bytes
    payload: bytes
    offset: int

    @property
    def name(self) -> str:
        return self.tag.decode("latin-1")


def has_signature(data: bytes) -> bool:
    """Return ``True`` when ``data`` opens with the PNG signature."""

    return data[: len(PNG_SIGNATURE)] == PNG_SIGNATURE


def iter_chunks(data: bytes) -> Iterator[PngChunk]:
    """Yield every chunk in ``data`` in stream order.

    The trailing checksum of each chunk is skipped without verification. A
    missing signature or a header/payload that runs past the end of ``data``
    raises :class:`InvalidContainerError`.
    """

    if not has_signature(data):
        raise InvalidContainerError("missing PNG signature")

    view = memoryview(data)
    offset = len(PNG_SIGNATURE)
    total = len(data)
    while offset < total:
        if offset + _HEADER.size > total:
            raise InvalidContainerError(
                f"truncated chunk header at offset {offset} "
                f"({total - offset} bytes remain)"
            )
        length, tag = _HEADER.unpack_from(view, offset)
        payload_start = offset + _HEADER.size
        payload_end = payload_start + length
        if payload_end + _CRC_BYTES > total:
            raise InvalidContainerError(
                f"chunk {tag!r} at offset {offset} declares {length} bytes "
                "past the end of the container"
            )
        yield PngChunk(tag=bytes(tag), payload=bytes(view[payload_start:payload_end]), offset=offset)
        offset = payload_end + _CRC_BYTES


def read_chunk(data: bytes, tag: bytes = ITXT_CHUNK_TYPE) -> bytes:
    """Return the payload of the first chunk in ``data`` tagged ``tag``."""

    for chunk in iter_chunks(data):
        if chunk.tag == tag:
            LOGGER.debug(
                "found %s chunk at offset %d (%d bytes)", chunk.name, chunk.offset, len(chunk.payload)
            )
            return chunk.payload
        LOGGER.debug("skipping %s chunk at offset %d", chunk.name, chunk.offset)
    raise ChunkNotFoundError(f"no {tag.decode('latin-1')} chunk in container")


__all__ = [
    "ITXT_CHUNK_TYPE",
    "PNG_SIGNATURE",
    "PngChunk",
    "has_signature",
    "iter_chunks",
    "read_chunk",
]
