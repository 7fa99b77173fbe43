"""
On-disk embedding encoding: sequential big-endian IEEE-754 float32 values.
"""

from typing import Sequence, Union

import numpy as np

# Big-endian float32, 4 bytes per component
EMBEDDING_DTYPE = np.dtype(">f4")


def encode_embedding(vector: Union[Sequence[float], np.ndarray]) -> bytes:
    """Serialize a vector to a 4 x dimension byte blob."""
    return np.asarray(vector, dtype=np.float32).astype(EMBEDDING_DTYPE).tobytes()


def decode_embedding(blob: bytes) -> np.ndarray:
    """Restore the float32 vector written by encode_embedding, bit for bit."""
    if len(blob) % EMBEDDING_DTYPE.itemsize != 0:
        raise ValueError(f"Embedding blob length {len(blob)} is not a multiple of {EMBEDDING_DTYPE.itemsize}")

    return np.frombuffer(blob, dtype=EMBEDDING_DTYPE).astype(np.float32)
