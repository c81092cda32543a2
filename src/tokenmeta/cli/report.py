"""Human-readable output for create and update runs."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from solders.pubkey import Pubkey
from solders.signature import Signature

from tokenmeta.core.config import explorer_url
from tokenmeta.core.operations import CreatePlan, UpdatePlan
from tokenmeta.solana.metadata import strip_padding

LABEL_WIDTH = 14


class Reporter:
    """Prints run summaries to `console` and failures to `err_console`."""

    def __init__(self, console: Console, err_console: Console | None = None) -> None:
        self.console = console
        self.err_console = err_console or console

    def _line(self, message: str = "") -> None:
        self.console.print(message, soft_wrap=True)

    def _field(self, label: str, value: object) -> None:
        padded = f"{label}:".ljust(LABEL_WIDTH)
        self._line(f"  [tokenmeta.label]{padded}[/] [tokenmeta.value]{escape(str(value))}[/]")

    def _change(self, label: str, old: str, new: str) -> None:
        padded = f"{label}:".ljust(LABEL_WIDTH)
        self._line(
            f"  [tokenmeta.label]{padded}[/] [tokenmeta.old]{escape(strip_padding(old))}[/]"
            f" -> [tokenmeta.new]{escape(strip_padding(new))}[/]"
        )

    def endpoint(self, rpc_url: str, signer: Pubkey) -> None:
        self._line(f"Using RPC:    {escape(rpc_url)}")
        self._line(f"Using wallet: {signer}")
        self._line()

    def create_summary(self, plan: CreatePlan) -> None:
        self._line("Creating metadata...")
        self._field("Mint", plan.mint)
        self._field("Metadata PDA", plan.metadata)
        self._field("Name", plan.data.name)
        self._field("Symbol", plan.data.symbol)
        self._field("URI", plan.data.uri or "(empty)")
        self._field("Mutable", str(plan.is_mutable).lower())
        self._field("Seller fee", f"{plan.data.seller_fee_basis_points} bps")

    def update_summary(self, plan: UpdatePlan) -> None:
        self._line("Updating metadata...")
        self._field("Mint", plan.mint)
        self._field("Metadata PDA", plan.metadata)
        self._change("Name", plan.existing.name, plan.data.name)
        self._change("Symbol", plan.existing.symbol, plan.data.symbol)
        self._change("URI", plan.existing.uri, plan.data.uri)

    @contextmanager
    def waiting(self, message: str) -> Iterator[None]:
        with self.console.status(message, spinner="dots", spinner_style="tokenmeta.status.spinner"):
            yield

    def success(self, action: str, signature: Signature, rpc_url: str) -> None:
        self._line()
        self._line(f"[tokenmeta.success]✅ Metadata {action} successfully![/]")
        self._line(f"  Signature: {signature}")
        self._line(f"  Explorer:  [tokenmeta.link]{escape(explorer_url(str(signature), rpc_url))}[/]")

    def error(self, exc: BaseException) -> None:
        self.err_console.print(f"[tokenmeta.error]❌ Error:[/] {escape(str(exc))}", soft_wrap=True)
        causes = list(_cause_chain(exc))
        if not causes:
            return
        self.err_console.print()
        self.err_console.print("Caused by:")
        for index, cause in enumerate(causes):
            self.err_console.print(f"  {index}: [tokenmeta.cause]{escape(str(cause) or type(cause).__name__)}[/]", soft_wrap=True)


def _cause_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = {id(exc)}
    current = exc.__cause__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


__all__ = ["Reporter"]
