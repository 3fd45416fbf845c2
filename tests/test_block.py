"""Tests for the ChaCha20 block function."""
from __future__ import annotations

import struct

from chacha_stream.crypto.block import chacha20_block, chacha20_rounds, keystream_block
from chacha_stream.crypto.state import State
from chacha_stream.vectors import (
    BLOCK_AFTER_ROUNDS,
    BLOCK_COUNTER,
    BLOCK_KEY,
    BLOCK_NONCE,
    BLOCK_OUTPUT,
    BLOCK_SETUP,
    ZERO_KEY_KEYSTREAM,
)


def test_rounds_without_feed_forward() -> None:
    state = State.existing(BLOCK_SETUP)
    assert chacha20_rounds(state).words == BLOCK_AFTER_ROUNDS


def test_block_applies_feed_forward() -> None:
    state = State.from_params(BLOCK_KEY, BLOCK_NONCE, BLOCK_COUNTER)
    assert chacha20_block(state).words == BLOCK_OUTPUT


def test_block_leaves_input_untouched() -> None:
    state = State.existing(BLOCK_SETUP)
    first = chacha20_block(state)
    second = chacha20_block(state)
    assert state.words == BLOCK_SETUP
    assert first == second


def test_keystream_block_serializes_little_endian() -> None:
    block = keystream_block(BLOCK_KEY, BLOCK_NONCE, BLOCK_COUNTER)
    assert struct.unpack("<16I", block) == BLOCK_OUTPUT


def test_zero_key_keystream() -> None:
    assert keystream_block(bytes(32), bytes(12), 0) == ZERO_KEY_KEYSTREAM


def test_counter_changes_keystream() -> None:
    assert keystream_block(BLOCK_KEY, BLOCK_NONCE, 1) != keystream_block(BLOCK_KEY, BLOCK_NONCE, 2)
