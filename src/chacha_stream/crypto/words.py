"""32-bit word arithmetic used by the ChaCha20 state.

The in-place helpers take a word array and an index rather than a reference
to a single word, so a quarter round can update four words of one array
without aliasing.
"""

from __future__ import annotations

import struct
from typing import MutableSequence, Sequence

from chacha_stream.errors import CipherMisuseError

MASK32 = 0xFFFFFFFF
WORD_SIZE = 4


def add32(a: int, b: int) -> int:
    return (a + b) & MASK32


def xor32(a: int, b: int) -> int:
    return (a ^ b) & MASK32


def rotl32(value: int, bits: int) -> int:
    """Rotate a 32-bit word left by ``bits`` positions."""

    bits %= 32
    return ((value << bits) & MASK32) | (value >> (32 - bits))


def add_assign(words: MutableSequence[int], idx: int, rhs: int) -> None:
    words[idx] = (words[idx] + rhs) & MASK32


def xor_assign(words: MutableSequence[int], idx: int, rhs: int) -> None:
    words[idx] ^= rhs


def rotate_left_assign(words: MutableSequence[int], idx: int, bits: int) -> None:
    words[idx] = rotl32(words[idx], bits)


def le_bytes_to_words(data: bytes | bytearray | memoryview) -> list[int]:
    """Decode little-endian bytes into 32-bit words regardless of host order."""

    if len(data) % WORD_SIZE:
        raise CipherMisuseError(
            f"Cannot reinterpret {len(data)} bytes as 32-bit words (length must be a multiple of {WORD_SIZE})"
        )
    return list(struct.unpack(f"<{len(data) // WORD_SIZE}I", data))


def words_to_le_bytes(words: Sequence[int], out: bytearray | memoryview) -> None:
    """Encode words little-endian into ``out``, which must hold exactly 4 bytes per word."""

    if len(out) != len(words) * WORD_SIZE:
        raise CipherMisuseError(f"Output buffer must be {len(words) * WORD_SIZE} bytes, got {len(out)}")
    struct.pack_into(f"<{len(words)}I", out, 0, *words)
