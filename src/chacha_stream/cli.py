"""Command line harness for chacha-stream: conformance, benchmark and keystream inspection."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Callable

import click
from rich.console import Console
from rich.table import Table

from chacha_stream import __version__
from chacha_stream.bench import DEFAULT_ROUNDS, DEFAULT_SIZE, BenchmarkMismatch, run_benchmark
from chacha_stream.cipher import BLOCK_SIZE, COUNTER_MAX, KEY_SIZE, NONCE_SIZE
from chacha_stream.crypto.block import chacha20_block
from chacha_stream.crypto.secure_memory import scrubbing
from chacha_stream.crypto.state import State
from chacha_stream.errors import CipherMisuseError
from chacha_stream.vectors import run_self_test

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CRYPTO = 2

console = Console()


def _package_version() -> str:
    try:
        return version("chacha-stream")
    except PackageNotFoundError:
        return __version__


def _parse_hex(value: str, expected_len: int, label: str) -> bytearray:
    try:
        raw = bytearray.fromhex(value.replace(":", "").replace(" ", ""))
    except ValueError as exc:
        raise ValueError(f"{label} must be hex encoded") from exc
    if len(raw) != expected_len:
        raise ValueError(f"{label} must be {expected_len} bytes, got {len(raw)}")
    return raw


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except CipherMisuseError as exc:
        console.print(f"[red]Invalid cipher parameters:[/red] {exc}")
        return EXIT_USAGE
    except ValueError as exc:
        console.print(f"[red]Invalid input:[/red] {exc}")
        return EXIT_USAGE
    except BenchmarkMismatch as exc:
        console.print(f"[red]Implementation mismatch:[/red] {exc}")
        return EXIT_CRYPTO
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Unexpected error:[/red] {exc}")
        return EXIT_USAGE
    return EXIT_SUCCESS


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="chacha-stream")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Pure-Python ChaCha20 (RFC 8439) conformance and benchmark harness."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command(name="version", help="Show the installed version.")
def version_command() -> None:
    console.print(f"chacha-stream {_package_version()}")


@cli.command(
    help="Run the RFC 8439 known-answer vectors.",
    epilog="Example:\n  chachastream selftest",
)
@click.pass_context
def selftest(ctx: click.Context) -> None:
    results = run_self_test()
    table = Table(show_header=True, box=None)
    table.add_column("Vector")
    table.add_column("Result")
    for result in results:
        table.add_row(result.name, "[green]pass[/green]" if result.passed else f"[red]FAIL[/red] {result.detail}")
    console.print("[bold]ChaCha20 self-test[/bold]")
    console.print(table)

    failed = [r for r in results if not r.passed]
    if failed:
        console.print(f"[red]{len(failed)} of {len(results)} vectors failed.[/red]")
        ctx.exit(EXIT_CRYPTO)
        return
    console.print(f"[green]All {len(results)} vectors passed.[/green]")
    ctx.exit(EXIT_SUCCESS)


@cli.command(
    help="Measure throughput against the OpenSSL implementation.",
    epilog="Example:\n  chachastream bench --size 1048576 --rounds 2",
)
@click.option("--size", type=click.IntRange(min=0), default=DEFAULT_SIZE, show_default=True, help="Bytes per round.")
@click.option("--rounds", type=click.IntRange(min=1), default=DEFAULT_ROUNDS, show_default=True, help="Repetitions.")
@click.pass_context
def bench(ctx: click.Context, size: int, rounds: int) -> None:
    def _run() -> None:
        results = run_benchmark(size=size, rounds=rounds)
        table = Table(show_header=True, box=None)
        table.add_column("Implementation")
        table.add_column("Bytes", justify="right")
        table.add_column("Seconds", justify="right")
        table.add_column("MiB/s", justify="right")
        for result in results:
            table.add_row(
                result.implementation,
                str(result.size * result.rounds),
                f"{result.seconds:.4f}",
                f"{result.mib_per_second:.2f}",
            )
        console.print("[bold]ChaCha20 benchmark[/bold]")
        console.print(table)
        console.print("[green]Outputs match.[/green]")

    ctx.exit(_handle_action(_run))


@cli.command(
    help="Print keystream blocks as little-endian 32-bit words.",
    epilog="Example:\n  chachastream keystream --key 000102...1f --nonce 000000090000004a00000000 --counter 1",
)
@click.option("--key", "key_hex", required=True, help=f"{KEY_SIZE}-byte key, hex encoded.")
@click.option("--nonce", "nonce_hex", required=True, help=f"{NONCE_SIZE}-byte nonce, hex encoded.")
@click.option("--counter", type=click.IntRange(min=0, max=COUNTER_MAX), default=1, show_default=True)
@click.option("--blocks", type=click.IntRange(min=1), default=1, show_default=True, help="Number of blocks.")
@click.option("--bytes/--words", "as_bytes", default=False, help=f"Print raw {BLOCK_SIZE}-byte hex instead of words.")
@click.pass_context
def keystream(
    ctx: click.Context,
    key_hex: str,
    nonce_hex: str,
    counter: int,
    blocks: int,
    as_bytes: bool,
) -> None:
    def _run() -> None:
        key = _parse_hex(key_hex, KEY_SIZE, "key")
        nonce = _parse_hex(nonce_hex, NONCE_SIZE, "nonce")
        with scrubbing(key, nonce), State() as state:
            for index in range(blocks):
                block_counter = (counter + index) & COUNTER_MAX
                state.rewrite(key, nonce, block_counter)
                with chacha20_block(state) as block:
                    if as_bytes:
                        line = block.as_little_endian_bytes().hex()
                    else:
                        line = " ".join(f"{word:08x}" for word in block.words)
                console.print(f"[bold]block {block_counter}[/bold] {line}")

    ctx.exit(_handle_action(_run))


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="chachastream", standalone_mode=False)
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
