"""Services module initialization."""

from __future__ import annotations

from .account_validator import fetch_reserve_info, minimum_balance, validate_account
from .channel_submitter import SessionState, SubmitterSession
from .config_builder import FieldDescriptor, build_config, config_fields
from .credentials import build_server_uri, derive_secret
from .faucet import acquire_testnet_account
from .ledger_gateway import LedgerGateway, derive_address
from .settlement import SettlementPlugin, create_plugin, load_plugin_class
from .uplink_controller import UplinkController

__all__ = [
    # Credentials
    "derive_secret",
    "build_server_uri",
    "derive_address",
    # Ledger
    "LedgerGateway",
    "validate_account",
    "fetch_reserve_info",
    "minimum_balance",
    "SubmitterSession",
    "SessionState",
    # Configuration
    "FieldDescriptor",
    "config_fields",
    "build_config",
    "acquire_testnet_account",
    # Settlement
    "SettlementPlugin",
    "load_plugin_class",
    "create_plugin",
    # Operations
    "UplinkController",
]
