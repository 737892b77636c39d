from __future__ import annotations

import gzip
import zlib

import pytest

from beadreader.errors import DecompressionFailedError, InvalidEncodingError
from beadreader.inflate import DEFAULT_BUFFER_SIZE, inflate_bytes, inflate_text

_SAMPLE = (
    "<pattern><patternName>Café Bracelet</patternName>"
    + "<bead><color>aqua</color><count>9</count></bead>" * 200
    + "</pattern>"
)


def test_zlib_stream_round_trips() -> None:
    assert inflate_text(zlib.compress(_SAMPLE.encode("utf-8"))) == _SAMPLE


def test_gzip_framing_is_stripped() -> None:
    assert inflate_text(gzip.compress(_SAMPLE.encode("utf-8"))) == _SAMPLE


def test_raw_deflate_stream_is_accepted() -> None:
    compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
    raw = compressor.compress(_SAMPLE.encode("utf-8")) + compressor.flush()

    assert inflate_text(raw) == _SAMPLE


@pytest.mark.parametrize("buffer_size", [1, 7, 64, 4096, DEFAULT_BUFFER_SIZE])
def test_output_is_drained_through_small_buffers(buffer_size: int) -> None:
    payload = bytes(range(256)) * 40 + _SAMPLE.encode("utf-8")

    assert inflate_bytes(zlib.compress(payload), buffer_size=buffer_size) == payload


def test_empty_text_inflates_to_empty_string() -> None:
    assert inflate_text(zlib.compress(b"")) == ""


def test_corrupt_stream_fails() -> None:
    with pytest.raises(DecompressionFailedError):
        inflate_bytes(b"\x78\x9c" + b"\xff" * 16)


def test_truncated_stream_fails() -> None:
    compressed = zlib.compress(_SAMPLE.encode("utf-8"))

    with pytest.raises(DecompressionFailedError):
        inflate_bytes(compressed[: len(compressed) // 2])


def test_empty_input_fails() -> None:
    with pytest.raises(DecompressionFailedError):
        inflate_bytes(b"")


def test_non_utf8_output_is_an_encoding_error() -> None:
    with pytest.raises(InvalidEncodingError):
        inflate_text(zlib.compress(b"\xff\xfe\xfa color"))


def test_buffer_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        inflate_bytes(zlib.compress(b"abc"), buffer_size=0)
