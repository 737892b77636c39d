"""Exception hierarchy raised while decoding bead pattern sources."""

from __future__ import annotations


class PatternDecodeError(ValueError):
    """Base class for failures that abort a single pattern load."""


class InvalidContainerError(PatternDecodeError):
    """Raised when the container signature is missing or chunk framing is truncated."""


class ChunkNotFoundError(PatternDecodeError):
    """Raised when no chunk carries the requested tag and keyword."""


class InvalidChunkStructureError(PatternDecodeError):
    """Raised when a text chunk lacks a terminator or names an unknown compression."""


class DecompressionFailedError(PatternDecodeError):
    """Raised when the compressed text stream cannot be inflated."""


class InvalidEncodingError(PatternDecodeError):
    """Raised when inflated bytes are not valid UTF-8 text."""


__all__ = [
    "ChunkNotFoundError",
    "DecompressionFailedError",
    "InvalidChunkStructureError",
    "InvalidContainerError",
    "InvalidEncodingError",
    "PatternDecodeError",
]
