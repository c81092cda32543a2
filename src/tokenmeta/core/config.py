"""Runtime settings for the token metadata CLI."""

from __future__ import annotations

from typing import Literal
from urllib.parse import quote, urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from tokenmeta.solana.errors import TokenMetadataError
from tokenmeta.solana.wallet import DEFAULT_KEYPAIR_PATH

DEFAULT_RPC_URL = "https://api.devnet.solana.com"
EXPLORER_TX_URL = "https://explorer.solana.com/tx/{signature}"


class ConfigurationError(TokenMetadataError):
    """Raised when global CLI options are invalid."""


class CLISettings(BaseModel):
    """Options shared by every subcommand."""

    rpc_url: str = DEFAULT_RPC_URL
    keypair_path: str = DEFAULT_KEYPAIR_PATH
    commitment: Literal["processed", "confirmed", "finalized"] = "confirmed"
    timeout: float = Field(default=30.0, gt=0)
    confirm_timeout: float = Field(default=60.0, gt=0)
    verbose: bool = False

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"RPC URL must be an http(s) URL, got '{value}'")
        return value


def load_settings(**values: object) -> CLISettings:
    """Validate CLI options, dropping any left unset."""
    provided = {key: value for key, value in values.items() if value is not None}
    try:
        return CLISettings(**provided)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def explorer_cluster(rpc_url: str) -> str | None:
    """Return the explorer `cluster` query value matching `rpc_url`, or None for mainnet."""
    host = (urlparse(rpc_url).hostname or "").lower()
    if "devnet" in host:
        return "devnet"
    if "testnet" in host:
        return "testnet"
    if "mainnet" in host:
        return None
    return f"custom&customUrl={quote(rpc_url, safe='')}"


def explorer_url(signature: str, rpc_url: str) -> str:
    link = EXPLORER_TX_URL.format(signature=signature)
    cluster = explorer_cluster(rpc_url)
    if cluster is None:
        return link
    return f"{link}?cluster={cluster}"


__all__ = [
    "CLISettings",
    "ConfigurationError",
    "DEFAULT_RPC_URL",
    "explorer_cluster",
    "explorer_url",
    "load_settings",
]
