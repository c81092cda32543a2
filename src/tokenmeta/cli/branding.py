"""Console styling for the token metadata CLI."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

TOKENMETA_THEME = Theme(
    {
        "tokenmeta.label": "bold #9945FF",
        "tokenmeta.value": "#E6FFFA",
        "tokenmeta.old": "#94A3B8",
        "tokenmeta.new": "bold #14F195",
        "tokenmeta.success": "bold #14F195",
        "tokenmeta.link": "underline #38BDF8",
        "tokenmeta.error": "bold #FB7185",
        "tokenmeta.cause": "#FEE2E2",
        "tokenmeta.status.spinner": "#14F195",
    }
)


def themed_console(**kwargs: object) -> Console:
    """Return a Console configured with the token metadata theme."""
    return Console(theme=TOKENMETA_THEME, **kwargs)


__all__ = ["TOKENMETA_THEME", "themed_console"]
