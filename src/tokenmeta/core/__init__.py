"""Core services for the token metadata CLI."""

from .config import CLISettings, ConfigurationError, DEFAULT_RPC_URL, explorer_cluster, explorer_url, load_settings
from .operations import CreatePlan, UpdatePlan, parse_address, plan_create, plan_update

__all__ = [
    "CLISettings",
    "ConfigurationError",
    "DEFAULT_RPC_URL",
    "explorer_cluster",
    "explorer_url",
    "load_settings",
    "CreatePlan",
    "UpdatePlan",
    "parse_address",
    "plan_create",
    "plan_update",
]
