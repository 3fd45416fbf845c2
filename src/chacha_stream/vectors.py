"""Known-answer vectors from RFC 8439 and a self-test runner."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from chacha_stream.cipher import encrypt
from chacha_stream.crypto.block import chacha20_block, chacha20_rounds, keystream_block
from chacha_stream.crypto.state import State, quarter_round

QUARTER_ROUND_INPUT = (0x11111111, 0x01020304, 0x9B8D6F43, 0x01234567)
QUARTER_ROUND_OUTPUT = (0xEA2A92F4, 0xCB1CF8CE, 0x4581472E, 0x5881C4BB)

STATE_QUARTER_ROUND_INDICES = (2, 7, 8, 13)
STATE_QUARTER_ROUND_INPUT = (
    0x879531E0, 0xC5ECF37D, 0x516461B1, 0xC9A62F8A,
    0x44C20EF3, 0x3390AF7F, 0xD9FC690B, 0x2A5F714C,
    0x53372767, 0xB00A5631, 0x974C541A, 0x359E9963,
    0x5C971061, 0x3D631689, 0x2098D9D6, 0x91DBD320,
)  # fmt: skip
STATE_QUARTER_ROUND_OUTPUT = (
    0x879531E0, 0xC5ECF37D, 0xBDB886DC, 0xC9A62F8A,
    0x44C20EF3, 0x3390AF7F, 0xD9FC690B, 0xCFACAFD2,
    0xE46BEA80, 0xB00A5631, 0x974C541A, 0x359E9963,
    0x5C971061, 0xCCC07C79, 0x2098D9D6, 0x91DBD320,
)  # fmt: skip

BLOCK_KEY = bytes(range(32))
BLOCK_NONCE = bytes.fromhex("000000090000004a00000000")
BLOCK_COUNTER = 1
BLOCK_SETUP = (
    0x61707865, 0x3320646E, 0x79622D32, 0x6B206574,
    0x03020100, 0x07060504, 0x0B0A0908, 0x0F0E0D0C,
    0x13121110, 0x17161514, 0x1B1A1918, 0x1F1E1D1C,
    0x00000001, 0x09000000, 0x4A000000, 0x00000000,
)  # fmt: skip
BLOCK_AFTER_ROUNDS = (
    0x837778AB, 0xE238D763, 0xA67AE21E, 0x5950BB2F,
    0xC4F2D0C7, 0xFC62BB2F, 0x8FA018FC, 0x3F5EC7B7,
    0x335271C2, 0xF29489F3, 0xEABDA8FC, 0x82E46EBD,
    0xD19C12B4, 0xB04E16DE, 0x9E83D0CB, 0x4E3C50A2,
)  # fmt: skip
BLOCK_OUTPUT = (
    0xE4E7F110, 0x15593BD1, 0x1FDD0F50, 0xC47120A3,
    0xC7F4D1C7, 0x0368C033, 0x9AAA2204, 0x4E6CD4C3,
    0x466482D2, 0x09AA9F07, 0x05D7C214, 0xA2028BD9,
    0xD19C12B5, 0xB94E16DE, 0xE883D0CB, 0x4E3C50A2,
)  # fmt: skip

SUNSCREEN_KEY = bytes(range(32))
SUNSCREEN_NONCE = bytes.fromhex("000000000000004a00000000")
SUNSCREEN_COUNTER = 1
SUNSCREEN_PLAINTEXT = (
    b"Ladies and Gentlemen of the class of '99: If I could offer you only one tip "
    b"for the future, sunscreen would be it."
)
SUNSCREEN_CIPHERTEXT = bytes.fromhex(
    "6e2e359a2568f98041ba0728dd0d6981"
    "e97e7aec1d4360c20a27afccfd9fae0b"
    "f91b65c5524733ab8f593dabcd62b357"
    "1639d624e65152ab8f530c359f0861d8"
    "07ca0dbf500d6a6156a38e088a22b65e"
    "52bc514d16ccf806818ce91ab7793736"
    "5af90bbf74a35be6b40b8eedf2785e42"
    "874d"
)

ZERO_KEY_KEYSTREAM = bytes.fromhex(
    "76b8e0ada0f13d90405d6ae55386bd28"
    "bdd219b8a08ded1aa836efcc8b770dc7"
    "da41597c5157488d7724e03fb8d84a37"
    "6a43b8f41518a11cc387b669b2ee6586"
)


@dataclass(frozen=True)
class VectorResult:
    name: str
    passed: bool
    detail: str = ""


def _check_quarter_round() -> bool:
    words = list(QUARTER_ROUND_INPUT)
    quarter_round(words, 0, 1, 2, 3)
    return tuple(words) == QUARTER_ROUND_OUTPUT


def _check_state_quarter_round() -> bool:
    with State.existing(STATE_QUARTER_ROUND_INPUT) as state:
        state.quarter_round(*STATE_QUARTER_ROUND_INDICES)
        return state.words == STATE_QUARTER_ROUND_OUTPUT


def _check_block_setup() -> bool:
    with State.from_params(BLOCK_KEY, BLOCK_NONCE, BLOCK_COUNTER) as state:
        return state.words == BLOCK_SETUP


def _check_block_rounds() -> bool:
    with State.existing(BLOCK_SETUP) as state:
        return chacha20_rounds(state).words == BLOCK_AFTER_ROUNDS


def _check_block_output() -> bool:
    with State.existing(BLOCK_SETUP) as state, chacha20_block(state) as block:
        return block.words == BLOCK_OUTPUT


def _check_sunscreen() -> bool:
    buffer = bytearray(SUNSCREEN_PLAINTEXT)
    encrypt(buffer, SUNSCREEN_KEY, SUNSCREEN_NONCE, SUNSCREEN_COUNTER)
    return bytes(buffer) == SUNSCREEN_CIPHERTEXT


def _check_zero_key() -> bool:
    return keystream_block(bytes(32), bytes(12), 0) == ZERO_KEY_KEYSTREAM


SELF_TESTS: tuple[tuple[str, Callable[[], bool]], ...] = (
    ("rfc8439-2.1.1-quarter-round", _check_quarter_round),
    ("rfc8439-2.2.1-state-quarter-round", _check_state_quarter_round),
    ("rfc8439-2.3.2-block-setup", _check_block_setup),
    ("rfc8439-2.3.2-block-rounds", _check_block_rounds),
    ("rfc8439-2.3.2-block-output", _check_block_output),
    ("rfc8439-2.4.2-sunscreen", _check_sunscreen),
    ("rfc8439-a.1-zero-key", _check_zero_key),
)


def run_self_test() -> list[VectorResult]:
    """Run every known-answer vector. Mismatches are reported, not raised."""

    results: list[VectorResult] = []
    for name, check in SELF_TESTS:
        passed = check()
        results.append(VectorResult(name=name, passed=passed, detail="" if passed else "output mismatch"))
    return results
