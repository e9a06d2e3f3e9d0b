"""Gathering and validating a new parent uplink configuration."""

from __future__ import annotations

import inspect
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..config import Settings, get_settings
from ..exceptions import ConfigurationError
from ..models import PluginOptions, UplinkConfig
from .account_validator import validate_account
from .credentials import build_server_uri
from .faucet import acquire_testnet_account
from .ledger_gateway import LedgerGateway, derive_address
from .settlement import load_plugin_class, outgoing_channel_default_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldDescriptor:
    """One question asked while building the config."""

    name: str
    message: str
    default: str = ""
    validate: Callable[[str], bool] | None = None

    def resolve(self, value: Any) -> str:
        """Apply the default and validator to a raw answer."""
        answer = str(value).strip() if value is not None else ""
        if not answer:
            answer = self.default
        if self.validate is not None and not self.validate(answer):
            raise ConfigurationError(f"invalid value for {self.name}: {answer!r}")
        return answer


Ask = Callable[[list[FieldDescriptor]], "dict[str, Any] | Awaitable[dict[str, Any]]"]


def config_fields(testnet: bool, settings: Settings) -> list[FieldDescriptor]:
    """Return the questions for a parent uplink, in the order they are asked."""
    connectors = settings.parent_connectors(testnet)
    return [
        FieldDescriptor(
            name="parent",
            message="BTP host of parent connector:",
            default=random.choice(connectors) if connectors else "",
            validate=lambda host: len(host) != 0,
        ),
        FieldDescriptor(
            name="name",
            message="Name to assign to this channel. Must be changed if other parameters are changed.",
        ),
        FieldDescriptor(
            name="secret",
            message="XRP secret" + (" (optional):" if testnet else ":"),
            # Secret is optional on testnet, the faucet provides one
            validate=lambda secret: testnet or len(secret) != 0,
        ),
        FieldDescriptor(name="address", message="XRP address (optional):"),
        FieldDescriptor(
            name="xrp_server",
            message="Rippled server:",
            default=settings.default_server(testnet),
        ),
    ]


async def _ask(ask: Ask, fields: list[FieldDescriptor]) -> dict[str, str]:
    raw = ask(fields)
    if inspect.isawaitable(raw):
        raw = await raw
    return {f.name: f.resolve(raw.get(f.name)) for f in fields}


async def build_config(
    ask: Ask,
    testnet: bool = False,
    settings: Settings | None = None,
    gateway_factory: Callable[[str], Any] = LedgerGateway,
) -> UplinkConfig:
    """Ask for the uplink parameters and return a validated config.

    On testnet an empty secret means a fresh funded account is taken from
    the faucet, in which case the balance check is skipped. Otherwise the
    account must exist and hold enough XRP for a new outgoing channel
    before the config is returned.
    """
    settings = settings or get_settings()
    plugin_class = load_plugin_class(settings.SETTLEMENT_PLUGIN)
    answers = await _ask(ask, config_fields(testnet, settings))

    secret = answers["secret"]
    address = answers["address"]
    if testnet and not secret:
        address, secret = await acquire_testnet_account(
            settings.XRP_FAUCET_URL,
            settle_seconds=settings.FAUCET_SETTLE_SECONDS,
            timeout=settings.FAUCET_TIMEOUT,
        )
    else:
        try:
            derived = derive_address(secret)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        if address and address != derived:
            logger.warning(f"Address {address} does not match secret (derived {derived})")
        async with gateway_factory(answers["xrp_server"]) as gateway:
            await validate_account(
                gateway, address or derived, outgoing_channel_default_amount(plugin_class)
            )

    server = build_server_uri(answers["parent"], answers["name"], secret)
    return UplinkConfig(
        plugin=settings.SETTLEMENT_PLUGIN,
        options=PluginOptions(
            server=server,
            secret=secret,
            address=address or None,
            xrp_server=answers["xrp_server"],
        ),
    )
