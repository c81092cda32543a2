"""CLI package for the token metadata tool."""

from __future__ import annotations

import logging
import os
from importlib import metadata
from typing import Optional

import typer
from solders.keypair import Keypair

from tokenmeta.core import (
    DEFAULT_RPC_URL,
    CLISettings,
    ConfigurationError,
    load_settings,
    parse_address,
    plan_create,
    plan_update,
)
from tokenmeta.solana import (
    DEFAULT_KEYPAIR_PATH,
    SolanaRPCClient,
    TokenMetadataError,
    TransactionSubmitter,
    load_signer,
)

from .branding import themed_console
from .report import Reporter

app = typer.Typer(
    help="Create or update token metadata on Solana using the Metaplex Token Metadata program",
    no_args_is_help=True,
    add_completion=False,
)

CLI_CONSOLE = themed_console()
ERR_CONSOLE = themed_console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    if verbose:
        if not root_logger.handlers:
            logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        root_logger.setLevel(logging.DEBUG)
    else:
        if root_logger.handlers:
            root_logger.setLevel(logging.WARNING)
        else:
            logging.basicConfig(level=logging.WARNING, format="%(message)s")


def _reporter() -> Reporter:
    return Reporter(CLI_CONSOLE, ERR_CONSOLE)


def _build_rpc_client(settings: CLISettings) -> SolanaRPCClient:
    return SolanaRPCClient(endpoint=settings.rpc_url, timeout=settings.timeout, commitment=settings.commitment)


def _build_submitter(settings: CLISettings, rpc_client: SolanaRPCClient) -> TransactionSubmitter:
    return TransactionSubmitter(
        rpc=rpc_client,
        commitment=settings.commitment,
        confirm_timeout=settings.confirm_timeout,
    )


def _parse_bool(value: str, option: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"true", "yes", "1"}:
        return True
    if lowered in {"false", "no", "0"}:
        return False
    raise typer.BadParameter(f"expected true or false, got '{value}'", param_hint=option)


def _load_payer(settings: CLISettings) -> Keypair:
    return load_signer(settings.keypair_path, home=os.environ.get("HOME"))


@app.callback()
def main_options(
    ctx: typer.Context,
    keypair: str = typer.Option(DEFAULT_KEYPAIR_PATH, "--keypair", "-k", help="Path to the payer/authority keypair file"),  # noqa: B008
    url: str = typer.Option(DEFAULT_RPC_URL, "--url", "-u", help="Solana RPC URL"),  # noqa: B008
    commitment: str = typer.Option("confirmed", "--commitment", help="Commitment level to wait for (processed|confirmed|finalized)"),  # noqa: B008
    timeout: float = typer.Option(30.0, "--timeout", help="RPC request timeout in seconds"),  # noqa: B008
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),  # noqa: B008
) -> None:
    _configure_logging(verbose)
    try:
        ctx.obj = load_settings(
            rpc_url=url,
            keypair_path=keypair,
            commitment=commitment,
            timeout=timeout,
            verbose=verbose,
        )
    except ConfigurationError as exc:
        _reporter().error(exc)
        raise typer.Exit(code=2) from exc
    logger.debug("Resolved settings: %s", ctx.obj)


@app.command()
def create(
    ctx: typer.Context,
    mint: str = typer.Option(..., "--mint", "-m", help="Token mint address"),  # noqa: B008
    name: str = typer.Option(..., "--name", "-n", help="Token name"),  # noqa: B008
    symbol: str = typer.Option(..., "--symbol", "-s", help="Token symbol"),  # noqa: B008
    uri: str = typer.Option("", "--uri", help="Metadata URI (JSON file URL)"),  # noqa: B008
    mutable: str = typer.Option("true", "--mutable", metavar="BOOL", help="Whether metadata should be mutable (true|false)"),  # noqa: B008
    immutable: bool = typer.Option(False, "--immutable", help="Shorthand for --mutable false"),  # noqa: B008
    seller_fee_basis_points: int = typer.Option(  # noqa: B008
        0, "--seller-fee-basis-points", min=0, max=65535, help="Seller fee basis points (0-10000)"
    ),
) -> None:
    """Create metadata for an existing token mint."""
    is_mutable = _parse_bool(mutable, "--mutable") and not immutable
    settings: CLISettings = ctx.obj
    reporter = _reporter()
    try:
        mint_key = parse_address(mint)
        payer = _load_payer(settings)
        rpc_client = _build_rpc_client(settings)
        reporter.endpoint(settings.rpc_url, payer.pubkey())
        plan = plan_create(
            mint_key,
            payer.pubkey(),
            name=name,
            symbol=symbol,
            uri=uri,
            is_mutable=is_mutable,
            seller_fee_basis_points=seller_fee_basis_points,
        )
        reporter.create_summary(plan)
        submitter = _build_submitter(settings, rpc_client)
        with reporter.waiting("Sending transaction…"):
            signature = submitter.submit([plan.instruction], payer, action="create metadata")
    except TokenMetadataError as exc:
        reporter.error(exc)
        raise typer.Exit(code=1) from exc
    reporter.success("created", signature, settings.rpc_url)


@app.command()
def update(
    ctx: typer.Context,
    mint: str = typer.Option(..., "--mint", "-m", help="Token mint address"),  # noqa: B008
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New token name (optional)"),  # noqa: B008
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="New token symbol (optional)"),  # noqa: B008
    uri: Optional[str] = typer.Option(None, "--uri", help="New metadata URI (optional)"),  # noqa: B008
) -> None:
    """Update metadata for an existing token mint."""
    settings: CLISettings = ctx.obj
    reporter = _reporter()
    try:
        mint_key = parse_address(mint)
        payer = _load_payer(settings)
        rpc_client = _build_rpc_client(settings)
        reporter.endpoint(settings.rpc_url, payer.pubkey())
        plan = plan_update(rpc_client, mint_key, payer.pubkey(), name=name, symbol=symbol, uri=uri)
        reporter.update_summary(plan)
        submitter = _build_submitter(settings, rpc_client)
        with reporter.waiting("Sending transaction…"):
            signature = submitter.submit([plan.instruction], payer, action="update metadata")
    except TokenMetadataError as exc:
        reporter.error(exc)
        raise typer.Exit(code=1) from exc
    reporter.success("updated", signature, settings.rpc_url)


@app.command()
def version() -> None:
    """Show CLI version."""
    try:
        pkg_version = metadata.version("token-metadata-cli")
    except metadata.PackageNotFoundError:
        pkg_version = "0.0.0"
    CLI_CONSOLE.print(f"token-metadata-cli version {pkg_version}")


def main() -> None:
    """Console script entrypoint."""
    app()


__all__ = ["app", "main"]
