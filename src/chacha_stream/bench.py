"""Throughput benchmark against the OpenSSL ChaCha20 from ``cryptography``."""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from chacha_stream.cipher import DEFAULT_COUNTER, KEY_SIZE, NONCE_SIZE, encrypt
from chacha_stream.crypto.secure_memory import scrubbing

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 64 * 1024
DEFAULT_ROUNDS = 3


@dataclass(frozen=True)
class BenchResult:
    implementation: str
    size: int
    rounds: int
    seconds: float

    @property
    def mib_per_second(self) -> float:
        if self.seconds <= 0:
            return float("inf")
        return (self.size * self.rounds) / (1024 * 1024) / self.seconds


class BenchmarkMismatch(AssertionError):
    """Implementations disagreed on the ciphertext for the same input."""


def reference_encrypt(data: bytes, key: bytes, nonce: bytes, counter: int = DEFAULT_COUNTER) -> bytes:
    """Encrypt with OpenSSL's ChaCha20, which takes the counter as the first 4 nonce bytes."""

    full_nonce = counter.to_bytes(4, "little") + nonce
    encryptor = Cipher(algorithms.ChaCha20(key, full_nonce), mode=None).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def run_benchmark(size: int = DEFAULT_SIZE, rounds: int = DEFAULT_ROUNDS) -> list[BenchResult]:
    """Time both implementations on ``size`` random bytes, ``rounds`` times each."""

    if size < 0 or rounds < 1:
        raise ValueError("size must be >= 0 and rounds >= 1")

    key = bytearray(os.urandom(KEY_SIZE))
    nonce = bytearray(os.urandom(NONCE_SIZE))
    payload = os.urandom(size)

    with scrubbing(key, nonce):
        started = time.perf_counter()
        ours = b""
        for _ in range(rounds):
            ours = bytes(encrypt(bytearray(payload), key, nonce))
        pure_seconds = time.perf_counter() - started

        started = time.perf_counter()
        reference = b""
        for _ in range(rounds):
            reference = reference_encrypt(payload, bytes(key), bytes(nonce))
        reference_seconds = time.perf_counter() - started

    if ours != reference:
        raise BenchmarkMismatch("pure-python output differs from the OpenSSL reference")

    logger.debug("benchmarked %d bytes x %d rounds", size, rounds)
    return [
        BenchResult("chacha-stream", size, rounds, pure_seconds),
        BenchResult("cryptography (OpenSSL)", size, rounds, reference_seconds),
    ]
