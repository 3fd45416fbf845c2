"""Tests for the RFC 8439 self-test runner."""
from __future__ import annotations

import pytest

import chacha_stream.vectors as vectors


def test_all_vectors_pass() -> None:
    results = vectors.run_self_test()
    assert [r.name for r in results] == [name for name, _ in vectors.SELF_TESTS]
    assert all(r.passed for r in results), [r.name for r in results if not r.passed]


def test_mismatch_is_reported_not_raised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(vectors, "SUNSCREEN_CIPHERTEXT", b"\x00" * len(vectors.SUNSCREEN_PLAINTEXT))
    results = {r.name: r for r in vectors.run_self_test()}
    failed = results["rfc8439-2.4.2-sunscreen"]
    assert not failed.passed
    assert failed.detail == "output mismatch"
    assert results["rfc8439-2.3.2-block-output"].passed
