"""The 16-word ChaCha20 state matrix.

Layout by index::

    0  1  2  3     constants "expand 32-byte k"
    4  5  6  7     key words 0-3
    8  9  10 11    key words 4-7
    12 13 14 15    block counter, nonce words 0-2

Words live in a flat list owned by the state. Operations address words by
index, and ``scrub()`` overwrites every slot with zero.
"""
from __future__ import annotations

from typing import Iterable, MutableSequence, Sequence

from chacha_stream.crypto.secure_memory import secure_zeroize
from chacha_stream.crypto.words import (
    MASK32,
    WORD_SIZE,
    add_assign,
    le_bytes_to_words,
    rotate_left_assign,
    words_to_le_bytes,
    xor_assign,
)
from chacha_stream.errors import CipherMisuseError

CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
STATE_WORDS = 16
STATE_BYTES = STATE_WORDS * WORD_SIZE
KEY_WORDS = 8
NONCE_WORDS = 3

KEY_SLICE = slice(4, 12)
COUNTER_INDEX = 12
NONCE_SLICE = slice(13, 16)


def quarter_round(words: MutableSequence[int], a: int, b: int, c: int, d: int) -> None:
    """Apply the ChaCha quarter round to four distinct indices of ``words``."""

    if len({a, b, c, d}) != 4:
        raise CipherMisuseError(f"Quarter round indices must be distinct, got ({a}, {b}, {c}, {d})")

    add_assign(words, a, words[b])
    xor_assign(words, d, words[a])
    rotate_left_assign(words, d, 16)

    add_assign(words, c, words[d])
    xor_assign(words, b, words[c])
    rotate_left_assign(words, b, 12)

    add_assign(words, a, words[b])
    xor_assign(words, d, words[a])
    rotate_left_assign(words, d, 8)

    add_assign(words, c, words[d])
    xor_assign(words, b, words[c])
    rotate_left_assign(words, b, 7)


class State:
    """Mutable ChaCha20 state. Zeroed by ``scrub()``, on context exit and on collection."""

    __slots__ = ("_words", "_out")

    def __init__(self) -> None:
        self._words: list[int] = list(CONSTANTS) + [0] * (STATE_WORDS - len(CONSTANTS))
        self._out = bytearray(STATE_BYTES)

    @classmethod
    def from_params(cls, key: bytes | bytearray, nonce: bytes | bytearray, counter: int) -> State:
        state = cls()
        state.rewrite(key, nonce, counter)
        return state

    @classmethod
    def existing(cls, words: Iterable[int]) -> State:
        """Wrap 16 precomputed words, e.g. an intermediate test vector."""

        values = [int(w) for w in words]
        if len(values) != STATE_WORDS:
            raise CipherMisuseError(f"State requires {STATE_WORDS} words, got {len(values)}")
        if any(not 0 <= w <= MASK32 for w in values):
            raise CipherMisuseError("State words must be unsigned 32-bit integers")
        state = cls()
        state._words[:] = values
        secure_zeroize(values)
        return state

    def rewrite(self, key: bytes | bytearray, nonce: bytes | bytearray, counter: int) -> None:
        """Reset constants, key, nonce and counter in place."""

        self._words[0:4] = CONSTANTS
        self.set_key_bytes(key)
        self.set_nonce_bytes(nonce)
        self.set_counter(counter)

    def set_key(self, key_words: Sequence[int]) -> None:
        if len(key_words) != KEY_WORDS:
            raise CipherMisuseError(f"Key must be {KEY_WORDS} words, got {len(key_words)}")
        self._words[KEY_SLICE] = key_words

    def set_nonce(self, nonce_words: Sequence[int]) -> None:
        if len(nonce_words) != NONCE_WORDS:
            raise CipherMisuseError(f"Nonce must be {NONCE_WORDS} words, got {len(nonce_words)}")
        self._words[NONCE_SLICE] = nonce_words

    def set_key_bytes(self, key: bytes | bytearray) -> None:
        key_words = le_bytes_to_words(key)
        try:
            self.set_key(key_words)
        finally:
            secure_zeroize(key_words)

    def set_nonce_bytes(self, nonce: bytes | bytearray) -> None:
        nonce_words = le_bytes_to_words(nonce)
        try:
            self.set_nonce(nonce_words)
        finally:
            secure_zeroize(nonce_words)

    def set_counter(self, counter: int) -> None:
        if isinstance(counter, bool) or not isinstance(counter, int) or not 0 <= counter <= MASK32:
            raise CipherMisuseError(f"Block counter must be an unsigned 32-bit integer, got {counter!r}")
        self._words[COUNTER_INDEX] = counter

    @property
    def counter(self) -> int:
        return self._words[COUNTER_INDEX]

    @property
    def words(self) -> tuple[int, ...]:
        return tuple(self._words)

    def quarter_round(self, a: int, b: int, c: int, d: int) -> None:
        quarter_round(self._words, a, b, c, d)

    def add_assign(self, other: State) -> None:
        """Word-wise wrapping addition of ``other`` into this state."""

        if len(other._words) != len(self._words):
            raise CipherMisuseError("Cannot add states of different sizes")
        for idx, value in enumerate(other._words):
            add_assign(self._words, idx, value)

    def __iadd__(self, other: State) -> State:
        self.add_assign(other)
        return self

    def copy(self) -> State:
        clone = State()
        clone._words[:] = self._words
        return clone

    def as_little_endian_bytes(self) -> memoryview:
        """Serialize into the state's 64-byte scratch buffer and return a read-only view of it.

        The view is overwritten by the next call and zeroed by ``scrub()``.
        """

        words_to_le_bytes(self._words, self._out)
        return memoryview(self._out).toreadonly()

    def scrub(self) -> None:
        secure_zeroize(self._words)
        secure_zeroize(self._out)

    def __enter__(self) -> State:
        return self

    def __exit__(self, *args: object) -> None:
        self.scrub()

    def __del__(self) -> None:
        try:
            self.scrub()
        except AttributeError:  # pragma: no cover - partially initialised
            pass

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self._words == other._words

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"State(counter={self.counter}, words={STATE_WORDS})"
