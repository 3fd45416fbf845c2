"""ChaCha20 block function: 20 rounds plus feed-forward."""
from __future__ import annotations

from chacha_stream.crypto.state import State

ROUNDS = 20
DOUBLE_ROUNDS = ROUNDS // 2

COLUMN_ROUNDS = ((0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15))
DIAGONAL_ROUNDS = ((0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14))


def chacha20_rounds(state: State) -> State:
    """Run the 10 double rounds on ``state`` in place, without feed-forward."""

    for _ in range(DOUBLE_ROUNDS):
        for a, b, c, d in COLUMN_ROUNDS:
            state.quarter_round(a, b, c, d)
        for a, b, c, d in DIAGONAL_ROUNDS:
            state.quarter_round(a, b, c, d)
    return state


def chacha20_block(state: State) -> State:
    """Return the transformed block for ``state``; ``state`` itself is left untouched."""

    working = chacha20_rounds(state.copy())
    working += state
    return working


def keystream_block(key: bytes | bytearray, nonce: bytes | bytearray, counter: int) -> bytes:
    """Compute one 64-byte keystream block.

    The returned ``bytes`` cannot be scrubbed; prefer the in-place cipher API
    for real data.
    """

    with State.from_params(key, nonce, counter) as state, chacha20_block(state) as block:
        return bytes(block.as_little_endian_bytes())
