"""Loading of Solana CLI keypair files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from solders.keypair import Keypair

from tokenmeta.solana.errors import KeyLoadError

logger = logging.getLogger(__name__)

DEFAULT_KEYPAIR_PATH = "~/.config/solana/id.json"
HOME_MARKER = "~"
KEYPAIR_LENGTH = 64
SECRET_SEED_LENGTH = 32


def expand_home(path: str, home: str | None) -> str:
    """Replace a leading `~` with `home`; leave the path alone when `home` is unset."""
    if path.startswith(HOME_MARKER) and home is not None:
        return path.replace(HOME_MARKER, home, 1)
    return path


def load_signer(path: str, *, home: str | None) -> Keypair:
    """Read a Solana CLI keypair file and return the signer it holds.

    `home` is the caller's home directory (normally ``$HOME``); it is passed in
    rather than read from the environment so callers control expansion.
    """
    expanded = expand_home(path, home)
    try:
        contents = Path(expanded).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise KeyLoadError(f"Failed to read keypair from '{expanded}'", path=expanded) from exc

    try:
        secret = _parse_keypair_bytes(contents)
        _verify_public_half(secret)
        keypair = Keypair.from_bytes(secret)
    except ValueError as exc:
        raise KeyLoadError(f"Failed to parse keypair from '{expanded}'", path=expanded) from exc

    logger.debug("Loaded signer %s from %s", keypair.pubkey(), expanded)
    return keypair


def _parse_keypair_bytes(contents: str) -> bytes:
    parsed = json.loads(contents)
    if not isinstance(parsed, list):
        raise ValueError("keypair file must contain a JSON array of bytes")
    if len(parsed) != KEYPAIR_LENGTH:
        raise ValueError(f"keypair must be {KEYPAIR_LENGTH} bytes, got {len(parsed)}")
    if not all(isinstance(item, int) and not isinstance(item, bool) for item in parsed):
        raise ValueError("keypair bytes must be integers")
    # bytes() rejects values outside 0..255 with ValueError
    return bytes(parsed)


def _verify_public_half(secret: bytes) -> None:
    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(secret[:SECRET_SEED_LENGTH])
    derived = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    if derived != secret[SECRET_SEED_LENGTH:]:
        raise ValueError("public key does not match secret key")


__all__ = ["DEFAULT_KEYPAIR_PATH", "expand_home", "load_signer"]
