import pytest
from click.testing import CliRunner

import chacha_stream.cli as cli_mod
from chacha_stream.bench import BenchmarkMismatch
from chacha_stream.cli import EXIT_CRYPTO, EXIT_SUCCESS, EXIT_USAGE, cli, main
from chacha_stream.vectors import VectorResult

RFC_KEY = bytes(range(32)).hex()
RFC_NONCE = "000000090000004a00000000"


def test_cli_selftest_passes() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["selftest"])
    assert result.exit_code == EXIT_SUCCESS
    assert "rfc8439-2.3.2-block-output" in result.output
    assert "All 7 vectors passed" in result.output


def test_cli_selftest_reports_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_mod, "run_self_test", lambda: [VectorResult("broken", False, "output mismatch")])
    result = CliRunner().invoke(cli, ["selftest"])
    assert result.exit_code == EXIT_CRYPTO
    assert "FAIL" in result.output


def test_cli_keystream_words() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["keystream", "--key", RFC_KEY, "--nonce", RFC_NONCE, "--counter", "1"])
    assert result.exit_code == EXIT_SUCCESS
    assert "e4e7f110 15593bd1" in result.output
    assert "4e3c50a2" in result.output


def test_cli_keystream_multiple_blocks_as_bytes() -> None:
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["keystream", "--key", "00" * 32, "--nonce", "00" * 12, "--counter", "0", "--blocks", "2", "--bytes"],
    )
    assert result.exit_code == EXIT_SUCCESS
    assert "block 0" in result.output
    assert "block 1" in result.output
    assert "76b8e0ada0f13d90" in result.output


def test_cli_keystream_rejects_short_key() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["keystream", "--key", "0011", "--nonce", RFC_NONCE])
    assert result.exit_code == EXIT_USAGE
    assert "key must be 32 bytes" in result.output


def test_cli_keystream_rejects_non_hex() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["keystream", "--key", "zz" * 32, "--nonce", RFC_NONCE])
    assert result.exit_code == EXIT_USAGE


def test_cli_bench_small() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["bench", "--size", "128", "--rounds", "1"])
    assert result.exit_code == EXIT_SUCCESS
    assert "Outputs match" in result.output


def test_cli_bench_mismatch(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(**_kwargs: object) -> list[object]:
        raise BenchmarkMismatch("differs")

    monkeypatch.setattr(cli_mod, "run_benchmark", _broken)
    result = CliRunner().invoke(cli, ["bench", "--size", "64"])
    assert result.exit_code == EXIT_CRYPTO


def test_main_returns_exit_code() -> None:
    assert main(["selftest"]) == EXIT_SUCCESS
