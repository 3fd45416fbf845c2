"""Cross-checks against the OpenSSL ChaCha20 shipped with ``cryptography``."""
from __future__ import annotations

from hypothesis import given, settings, strategies as st

from chacha_stream import encrypt
from chacha_stream.bench import reference_encrypt, run_benchmark
from chacha_stream.cipher import COUNTER_MAX
from chacha_stream.vectors import SUNSCREEN_CIPHERTEXT, SUNSCREEN_KEY, SUNSCREEN_NONCE, SUNSCREEN_PLAINTEXT


def test_reference_matches_rfc_vector() -> None:
    assert reference_encrypt(SUNSCREEN_PLAINTEXT, SUNSCREEN_KEY, SUNSCREEN_NONCE, 1) == SUNSCREEN_CIPHERTEXT


@settings(max_examples=30, deadline=None)
@given(
    data=st.binary(min_size=0, max_size=512),
    key=st.binary(min_size=32, max_size=32),
    nonce=st.binary(min_size=12, max_size=12),
    # Stay clear of wraparound: OpenSSL carries the counter into the nonce.
    counter=st.integers(min_value=0, max_value=COUNTER_MAX - 16),
)
def test_matches_openssl(data: bytes, key: bytes, nonce: bytes, counter: int) -> None:
    assert bytes(encrypt(data, key, nonce, counter)) == reference_encrypt(data, key, nonce, counter)


def test_benchmark_reports_both_implementations() -> None:
    results = run_benchmark(size=256, rounds=1)
    assert [r.implementation for r in results] == ["chacha-stream", "cryptography (OpenSSL)"]
    assert all(r.size == 256 and r.rounds == 1 for r in results)
    assert all(r.mib_per_second > 0 for r in results)
