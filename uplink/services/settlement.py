"""Settlement plugin capability and loader."""

from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from xrpl.utils import XRPRangeException, drops_to_xrp

from ..exceptions import PluginLoadError
from ..models import PluginOptions

logger = logging.getLogger(__name__)


@runtime_checkable
class SettlementPlugin(Protocol):
    """Peer-facing money plugin for the parent connection.

    Plugin classes expose ``OUTGOING_CHANNEL_DEFAULT_AMOUNT`` in drops, the
    amount used to fund a newly opened outgoing channel.
    """

    OUTGOING_CHANNEL_DEFAULT_AMOUNT: int | str

    async def connect(self) -> None: ...

    async def send_money(self, amount: str) -> None: ...

    async def disconnect(self) -> None: ...


def load_plugin_class(path: str) -> type:
    """Import a plugin class from ``package.module:ClassName`` or ``package.module.ClassName``."""
    if not path:
        raise PluginLoadError(path, "SETTLEMENT_PLUGIN is not set")

    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise PluginLoadError(path, "expected 'package.module:ClassName'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise PluginLoadError(path, str(e)) from e

    plugin_class = getattr(module, attr, None)
    if plugin_class is None:
        raise PluginLoadError(path, f"module {module_name} has no attribute {attr}")
    if not hasattr(plugin_class, "OUTGOING_CHANNEL_DEFAULT_AMOUNT"):
        raise PluginLoadError(path, "missing OUTGOING_CHANNEL_DEFAULT_AMOUNT")
    return plugin_class


def outgoing_channel_default_amount(plugin_class: type) -> Decimal:
    """Return the plugin's default outgoing channel funding, converted from drops to XRP."""
    drops = plugin_class.OUTGOING_CHANNEL_DEFAULT_AMOUNT
    try:
        return drops_to_xrp(str(int(drops)))
    except (TypeError, ValueError, XRPRangeException) as e:
        raise PluginLoadError(
            f"{plugin_class.__module__}.{plugin_class.__qualname__}",
            f"OUTGOING_CHANNEL_DEFAULT_AMOUNT is not a drops amount: {drops!r}",
        ) from e


def create_plugin(path: str, options: PluginOptions) -> Any:
    """Instantiate the settlement plugin with the persisted options."""
    plugin_class = load_plugin_class(path)
    logger.debug(f"Creating settlement plugin {path}")
    return plugin_class(options.to_dict())
