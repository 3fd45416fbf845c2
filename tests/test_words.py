"""Tests for 32-bit word helpers."""
from __future__ import annotations

import pytest

from chacha_stream.crypto.words import (
    MASK32,
    add32,
    add_assign,
    le_bytes_to_words,
    rotate_left_assign,
    rotl32,
    words_to_le_bytes,
    xor32,
    xor_assign,
)
from chacha_stream.errors import CipherMisuseError


def test_add32_wraps() -> None:
    assert add32(MASK32, 1) == 0
    assert add32(0x80000000, 0x80000001) == 1


def test_rotl32() -> None:
    assert rotl32(0x80000000, 1) == 1
    assert rotl32(0x7998BFDA, 7) == 0xCC5FED3C
    assert rotl32(0x12345678, 0) == 0x12345678
    assert rotl32(0x12345678, 32) == 0x12345678


def test_xor32() -> None:
    assert xor32(0xFFFF0000, 0x0F0F0F0F) == 0xF0F00F0F


def test_in_place_helpers_touch_only_target_index() -> None:
    words = [1, 2, 3, 4]
    add_assign(words, 0, MASK32)
    xor_assign(words, 1, 0b11)
    rotate_left_assign(words, 2, 4)
    assert words == [0, 1, 0x30, 4]


def test_le_bytes_to_words_is_little_endian() -> None:
    assert le_bytes_to_words(bytes([0x00, 0x01, 0x02, 0x03, 0xFF, 0, 0, 0])) == [0x03020100, 0xFF]


def test_le_bytes_to_words_rejects_partial_word() -> None:
    with pytest.raises(CipherMisuseError):
        le_bytes_to_words(b"\x00" * 31)


def test_words_to_le_bytes_writes_into_buffer() -> None:
    out = bytearray(8)
    words_to_le_bytes([0x03020100, 0x07060504], out)
    assert out == bytearray(range(8))


def test_words_to_le_bytes_rejects_wrong_buffer_size() -> None:
    with pytest.raises(CipherMisuseError):
        words_to_le_bytes([1, 2], bytearray(7))
