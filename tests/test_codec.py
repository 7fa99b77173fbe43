"""
Embedding blob encoding: big-endian float32, bit-exact round trip.
"""

import numpy as np
import pytest

from ragmemory.vector.codec import encode_embedding, decode_embedding


def test_encoded_length_is_four_bytes_per_component():
    """A d-dimensional vector encodes to 4 * d bytes."""
    assert len(encode_embedding([1.0, 2.0, 3.0])) == 12
    assert len(encode_embedding(np.zeros(384, dtype=np.float32))) == 384 * 4


def test_encoding_is_big_endian():
    """1.0f is 0x3F800000; the most significant byte comes first."""
    assert encode_embedding([1.0]) == b"\x3f\x80\x00\x00"
    assert encode_embedding([-2.0, 0.5]) == b"\xc0\x00\x00\x00\x3f\x00\x00\x00"


def test_round_trip_is_bit_exact_for_edge_values():
    """Signed zero, subnormals and extremes survive unchanged."""
    tiny = np.finfo(np.float32).tiny
    values = np.array([
        0.0,
        -0.0,
        1.0,
        -1.5,
        0.1,
        np.pi,
        tiny,
        tiny / np.float32(4),  # subnormal
        1e-45,  # smallest subnormal
        np.finfo(np.float32).max,
        -np.finfo(np.float32).max,
    ], dtype=np.float32)

    decoded = decode_embedding(encode_embedding(values))

    assert decoded.dtype == np.float32
    assert np.array_equal(decoded.view(np.uint32), values.view(np.uint32))


def test_round_trip_is_bit_exact_for_random_vectors():
    """Typical model outputs decode to exactly the floats written."""
    rng = np.random.default_rng(42)
    for _ in range(10):
        values = rng.standard_normal(384).astype(np.float32)
        decoded = decode_embedding(encode_embedding(values))
        assert np.array_equal(decoded.view(np.uint32), values.view(np.uint32))


def test_decode_empty_blob():
    assert decode_embedding(b"").size == 0


def test_decode_rejects_truncated_blob():
    """A blob that is not a whole number of floats is corrupt."""
    with pytest.raises(ValueError):
        decode_embedding(b"\x3f\x80\x00")
