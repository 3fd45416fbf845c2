"""Custom exceptions for chacha-stream."""


class ChaChaStreamError(Exception):
    """Base exception for chacha-stream."""


class CipherMisuseError(ChaChaStreamError):
    """The cipher was called in a structurally broken way.

    Raised for aliased quarter-round indices, wrong key or nonce sizes,
    out-of-range counters and read-only data buffers. These indicate a bug in
    the calling code and are never recovered from inside the library.
    """
