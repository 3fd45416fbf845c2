"""ChaCha20 stream encryption driver.

Encryption and decryption are the same operation: the keystream for
(key, nonce, counter) is XORed into the data in 64-byte blocks.

WARNING:
    - Never reuse a (key, nonce) pair for different plaintexts.
    - There is no authentication; ciphertext can be modified undetected.
"""
from __future__ import annotations

import logging
from typing import Final

from chacha_stream.crypto.block import chacha20_block
from chacha_stream.crypto.secure_memory import SecureBuffer
from chacha_stream.crypto.state import State
from chacha_stream.crypto.words import MASK32
from chacha_stream.errors import CipherMisuseError

logger = logging.getLogger(__name__)

KEY_SIZE: Final[int] = 32
NONCE_SIZE: Final[int] = 12
BLOCK_SIZE: Final[int] = 64
COUNTER_MAX: Final[int] = MASK32
DEFAULT_COUNTER: Final[int] = 1

Buffer = bytes | bytearray | memoryview


def _byte_length(value: Buffer, label: str) -> int:
    try:
        return memoryview(value).nbytes
    except TypeError as exc:
        raise CipherMisuseError(f"{label} must be a bytes-like object, got {type(value).__name__}") from exc


def _validate_params(key: Buffer, nonce: Buffer, counter: int) -> None:
    key_len = _byte_length(key, "Key")
    if key_len != KEY_SIZE:
        raise CipherMisuseError(f"Key must be exactly {KEY_SIZE} bytes, got {key_len}")
    nonce_len = _byte_length(nonce, "Nonce")
    if nonce_len != NONCE_SIZE:
        raise CipherMisuseError(f"Nonce must be exactly {NONCE_SIZE} bytes, got {nonce_len}")
    if isinstance(counter, bool) or not isinstance(counter, int) or not 0 <= counter <= COUNTER_MAX:
        raise CipherMisuseError(f"Counter must be an integer in 0..{COUNTER_MAX}, got {counter!r}")


def _writable_view(data: Buffer) -> tuple[Buffer, memoryview]:
    """Return the object handed back to the caller and a writable byte view of it."""

    if isinstance(data, bytes):
        target: Buffer = bytearray(data)
    elif isinstance(data, (bytearray, memoryview)):
        target = data
    else:
        raise CipherMisuseError(f"Data must be bytes, bytearray or memoryview, got {type(data).__name__}")

    view = memoryview(target)
    if view.readonly:
        raise CipherMisuseError("Data buffer is read-only; pass a bytearray to encrypt in place")
    if view.ndim != 1 or view.format != "B":
        view = view.cast("B")
    return target, view


def _xor_into(chunk: memoryview, keystream: memoryview) -> None:
    for idx in range(len(chunk)):
        chunk[idx] ^= keystream[idx]


def blocks_needed(length: int) -> int:
    return (length + BLOCK_SIZE - 1) // BLOCK_SIZE


def process(data: Buffer, key: Buffer, nonce: Buffer, initial_counter: int) -> Buffer:
    """XOR the ChaCha20 keystream into ``data`` starting at ``initial_counter``.

    ``bytearray`` and writable ``memoryview`` inputs are modified in place and
    returned. ``bytes`` input is copied into a new ``bytearray`` which is
    processed and returned.

    The block counter wraps modulo 2**32; wrapping repeats keystream and is
    logged as a warning but not prevented.
    """

    _validate_params(key, nonce, initial_counter)
    target, view = _writable_view(data)
    if not len(view):
        return target

    key_guard = SecureBuffer(KEY_SIZE)
    nonce_guard = SecureBuffer(NONCE_SIZE)
    state = State()
    try:
        key_guard.buffer[:] = key
        nonce_guard.buffer[:] = nonce
        for block_index, offset in enumerate(range(0, len(view), BLOCK_SIZE)):
            counter = (initial_counter + block_index) & MASK32
            if block_index and counter == 0:
                logger.warning(
                    "Block counter wrapped past %d; keystream is being reused for this nonce",
                    COUNTER_MAX,
                )
            state.rewrite(key_guard.buffer, nonce_guard.buffer, counter)
            with chacha20_block(state) as block:
                _xor_into(view[offset : offset + BLOCK_SIZE], block.as_little_endian_bytes())
    finally:
        state.scrub()
        key_guard.close()
        nonce_guard.close()
    return target


def encrypt(data: Buffer, key: Buffer, nonce: Buffer, counter: int = DEFAULT_COUNTER) -> Buffer:
    """Encrypt ``data`` with ChaCha20. See :func:`process`."""

    return process(data, key, nonce, counter)


def decrypt(data: Buffer, key: Buffer, nonce: Buffer, counter: int = DEFAULT_COUNTER) -> Buffer:
    """Decrypt ``data`` with ChaCha20. Identical to :func:`encrypt`."""

    return process(data, key, nonce, counter)


class ChaCha20:
    """Stateful ChaCha20 stream bound to one key and nonce.

    The block counter advances across calls, so successive ``encrypt`` calls
    continue the keystream. Every call starts on a fresh 64-byte block: the
    unused tail of a partial block is discarded, not carried over.

    Usage::

        with ChaCha20(key, nonce) as stream:
            stream.encrypt(header)
            stream.encrypt(body)
    """

    def __init__(self, key: Buffer, nonce: Buffer, counter: int = 0) -> None:
        _validate_params(key, nonce, counter)
        self._key = SecureBuffer(KEY_SIZE)
        self._nonce = SecureBuffer(NONCE_SIZE)
        self._key.buffer[:] = key
        self._nonce.buffer[:] = nonce
        self._counter = counter
        self._closed = False

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def closed(self) -> bool:
        return self._closed

    def encrypt(self, data: Buffer) -> Buffer:
        if self._closed:
            raise CipherMisuseError("ChaCha20 stream is closed")
        result = process(data, self._key.buffer, self._nonce.buffer, self._counter)
        self._counter = (self._counter + blocks_needed(memoryview(result).nbytes)) & MASK32
        return result

    def decrypt(self, data: Buffer) -> Buffer:
        return self.encrypt(data)

    def close(self) -> None:
        """Zero the key, nonce and counter. The stream is unusable afterwards."""

        if self._closed:
            return
        self._key.close()
        self._nonce.close()
        self._counter = 0
        self._closed = True

    scrub = close

    def __enter__(self) -> ChaCha20:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except AttributeError:  # pragma: no cover - partially initialised
            pass

    def __repr__(self) -> str:
        return f"ChaCha20(counter={self._counter}, closed={self._closed})"
