"""Inflate zlib-family text streams through a fixed-size output window."""

from __future__ import annotations

import logging
import zlib

from .errors import DecompressionFailedError, InvalidEncodingError

LOGGER = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
GZIP_HEADER_BYTES = 10
DEFAULT_BUFFER_SIZE = 16_384


def _looks_like_zlib_header(data: bytes) -> bool:
    if len(data) < 2:
        return False
    cmf, flg = data[0], data[1]
    return cmf & 0x0F == 8 and (cmf << 8 | flg) % 31 == 0


def _strip_framing(data: bytes) -> tuple[bytes, int]:
    """Return the inner stream and the ``wbits`` needed to decode it."""

    if data.startswith(GZIP_MAGIC):
        # Best effort: skip the fixed header only, trailer is left for unused_data.
        LOGGER.debug("stripping %d byte gzip header", GZIP_HEADER_BYTES)
        return data[GZIP_HEADER_BYTES:], -zlib.MAX_WBITS
    if _looks_like_zlib_header(data):
        return data, zlib.MAX_WBITS
    return data, -zlib.MAX_WBITS


def inflate_bytes(data: bytes, *, buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    """Inflate ``data`` draining at most ``buffer_size`` bytes per step."""

    if buffer_size <= 0:
        raise ValueError("buffer_size must be positive")

    stream, wbits = _strip_framing(data)
    inflater = zlib.decompressobj(wbits)
    output = bytearray()
    pending = stream
    steps = 0
    try:
        while not inflater.eof:
            produced = inflater.decompress(pending, buffer_size)
            output += produced
            steps += 1
            pending = inflater.unconsumed_tail
            if not pending and not produced and not inflater.eof:
                raise DecompressionFailedError(
                    "compressed stream ended before the end-of-stream marker"
                )
    except zlib.error as exc:
        raise DecompressionFailedError(f"inflate failed: {exc}") from exc

    LOGGER.debug(
        "inflated %d bytes into %d bytes over %d steps", len(stream), len(output), steps
    )
    return bytes(output)


def inflate_text(data: bytes, *, buffer_size: int = DEFAULT_BUFFER_SIZE) -> str:
    """Inflate ``data`` and decode the result as UTF-8 text."""

    raw = inflate_bytes(data, buffer_size=buffer_size)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidEncodingError(f"inflated text is not valid UTF-8: {exc}") from exc


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "GZIP_HEADER_BYTES",
    "GZIP_MAGIC",
    "inflate_bytes",
    "inflate_text",
]
