"""Pure-Python ChaCha20 stream cipher."""

from importlib.metadata import PackageNotFoundError, version

from chacha_stream.cipher import ChaCha20, decrypt, encrypt, process

__all__ = ["ChaCha20", "__version__", "decrypt", "encrypt", "process"]

try:
    __version__ = version("chacha-stream")
except PackageNotFoundError:  # pragma: no cover - happens only from source checkout
    __version__ = "0.0.0-dev"
