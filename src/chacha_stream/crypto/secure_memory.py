"""Secure memory utilities for key material and cipher state.

Provides best-effort memory locking (mlock) and zeroing so that keys, nonces,
block counters and keystream buffers do not linger after use. Python cannot
guarantee that no other copy of a value exists, so this is defence in depth
rather than a confidentiality guarantee.
"""
from __future__ import annotations

import ctypes
import ctypes.util
import logging
import platform
from array import array
from contextlib import contextmanager
from typing import Any, Iterator, MutableSequence, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

_MLOCK_AVAILABLE = False
_libc: ctypes.CDLL | None = None

if platform.system() != "Windows":
    try:
        _libc_name = ctypes.util.find_library("c")
        if _libc_name:
            _libc = ctypes.CDLL(_libc_name, use_errno=True)
            _MLOCK_AVAILABLE = True
    except OSError:
        pass


@runtime_checkable
class Scrubbable(Protocol):
    def scrub(self) -> None: ...


def mlock_available() -> bool:
    """Return True if mlock is available on this platform."""
    return _MLOCK_AVAILABLE


class SecureBuffer:
    """A bytearray that attempts to mlock its memory and zeroes on close.

    Usage::

        with SecureBuffer(64) as block:
            block[:] = keystream
            ...
        # Memory is zeroed and munlocked here
    """

    def __init__(self, size: int) -> None:
        self._buffer = bytearray(size)
        self._size = size
        self._locked = False

        if _MLOCK_AVAILABLE and _libc is not None and size:
            try:
                addr = (ctypes.c_char * size).from_buffer(self._buffer)
                result = _libc.mlock(ctypes.addressof(addr), size)
                if result == 0:
                    self._locked = True
                else:
                    errno = ctypes.get_errno()
                    logger.debug("mlock failed (errno=%d), proceeding without lock", errno)
            except (AttributeError, OSError, TypeError, ValueError):
                logger.debug("mlock unavailable, proceeding without lock")

    def __enter__(self) -> bytearray:
        return self._buffer

    def __exit__(self, *args: object) -> None:
        self.close()

    def __len__(self) -> int:
        return self._size

    def close(self) -> None:
        """Securely zero the buffer and unlock memory."""
        secure_zeroize(self._buffer)

        if self._locked and _libc is not None:
            try:
                addr = (ctypes.c_char * self._size).from_buffer(self._buffer)
                _libc.munlock(ctypes.addressof(addr), self._size)
            except (AttributeError, OSError, TypeError, ValueError):
                logger.debug("munlock failed, buffer stays locked until release")
            self._locked = False

    def scrub(self) -> None:
        self.close()

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def buffer(self) -> bytearray:
        return self._buffer


def secure_zeroize(data: bytearray | memoryview | MutableSequence[int] | None) -> None:
    """Zero a mutable buffer or word list in place.

    The trailing read-back creates a data dependency on the written memory.
    """
    if data is None:
        return
    if isinstance(data, memoryview) and data.readonly:
        raise TypeError("Cannot zeroize a read-only memoryview")
    length = len(data)
    for i in range(length):
        data[i] = 0
    if length > 0:
        _ = data[0]


def scrub(value: Any) -> None:
    """Erase any secret-carrying value this package hands out.

    Accepts objects exposing ``scrub()`` (cipher states, secure buffers,
    stream objects), bytearrays, writable memoryviews, and lists or arrays
    of integer words. Immutable ``bytes`` cannot be erased.
    """
    if value is None:
        return
    if isinstance(value, Scrubbable):
        value.scrub()
        return
    if isinstance(value, (bytearray, memoryview, list, array)):
        secure_zeroize(value)
        return
    raise TypeError(f"Cannot scrub value of type {type(value).__name__}")


@contextmanager
def scrubbing(*values: Any) -> Iterator[tuple[Any, ...]]:
    """Scrub every value when the block exits, whether or not it raised."""
    try:
        yield values
    finally:
        for value in values:
            scrub(value)
