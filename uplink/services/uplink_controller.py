"""Parent uplink operations: channel report, channel cleanup and top-up."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from ..config import Settings, get_settings
from ..exceptions import SubmissionError
from ..models import Channel, ChannelOutcome, ChannelReport, CleanupResult, UplinkConfig
from .account_validator import fetch_reserve_info
from .channel_submitter import SubmitterSession
from .ledger_gateway import LedgerGateway, derive_address
from .settlement import create_plugin

logger = logging.getLogger(__name__)

ChannelSelector = Callable[
    [list[Channel]], "Sequence[Channel] | Awaitable[Sequence[Channel]]"
]


class UplinkController:
    """Runs uplink operations against the ledger and the settlement plugin.

    One controller serves one command. The ledger connection and the
    submitter session are created on first use and shared by everything
    the command does; ``close()`` releases them.
    """

    def __init__(
        self,
        config: UplinkConfig,
        settings: Settings | None = None,
        gateway_factory: Callable[[str], Any] = LedgerGateway,
        plugin_factory: Callable[..., Any] = create_plugin,
    ) -> None:
        """Initialize the controller for a persisted uplink config."""
        self.config = config
        self.options = config.options
        self.settings = settings or get_settings()
        self._gateway_factory = gateway_factory
        self._plugin_factory = plugin_factory
        self._gateway: Any | None = None
        self._submitter: SubmitterSession | None = None
        self._init_lock = asyncio.Lock()

    async def __aenter__(self) -> UplinkController:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def address(self) -> str:
        """Ledger account of the uplink, derived from the secret when not configured."""
        return self.options.address or derive_address(self.options.secret)

    async def gateway(self) -> Any:
        """Return the connected ledger gateway, connecting on first use."""
        async with self._init_lock:
            if self._gateway is None:
                gateway = self._gateway_factory(self.options.xrp_server)
                await gateway.connect()
                self._gateway = gateway
            return self._gateway

    async def submitter(self) -> SubmitterSession:
        """Return the submitter session for the uplink account."""
        gateway = await self.gateway()
        async with self._init_lock:
            if self._submitter is None:
                self._submitter = SubmitterSession(gateway, self.address, self.options.secret)
            return self._submitter

    async def close(self) -> None:
        """Disconnect from the ledger."""
        async with self._init_lock:
            gateway, self._gateway, self._submitter = self._gateway, None, None
        if gateway is not None:
            await gateway.close()

    async def list_channels(self) -> list[Channel]:
        """Fetch the account's channels from the ledger."""
        gateway = await self.gateway()
        logger.info("Fetching channels...")
        return await gateway.list_channels(self.address)

    async def report(self) -> ChannelReport:
        """Fetch channels, balance and reserves for display."""
        gateway = await self.gateway()
        channels = await self.list_channels()
        account = await gateway.get_account_info(self.address)
        reserve = await fetch_reserve_info(gateway, account)
        return ChannelReport(
            address=self.address,
            balance=account.balance,
            reserved=reserve.reserved,
            channels=channels,
        )

    async def _close_channel(self, submitter: SubmitterSession, channel: Channel) -> ChannelOutcome:
        logger.info(f"Closing channel {channel.channel_id}")
        try:
            await submitter.submit_claim(channel.channel_id, close=True)
        except SubmissionError as e:
            logger.warning(f"Warning for channel {channel.channel_id}: {e.cause}")
            return ChannelOutcome(channel=channel, error=e.cause)
        return ChannelOutcome(channel=channel)

    async def close_channels(self, channels: Sequence[Channel]) -> CleanupResult:
        """Submit a close claim for every channel, collecting each outcome.

        A failed channel does not stop the others; failures are reported
        in the result. Submissions are serialized by the session.
        """
        if not channels:
            return CleanupResult()
        submitter = await self.submitter()
        outcomes = await asyncio.gather(
            *(self._close_channel(submitter, channel) for channel in channels)
        )
        result = CleanupResult(outcomes=list(outcomes))
        logger.info(result.summary())
        return result

    async def cleanup(self, select: ChannelSelector) -> CleanupResult:
        """Let ``select`` choose among the live channels, then close the chosen ones."""
        channels = await self.list_channels()
        chosen = select(channels)
        if inspect.isawaitable(chosen):
            chosen = await chosen
        return await self.close_channels(list(chosen))

    async def topup(self, amount: int | str) -> None:
        """Pre-fund the connector balance with ``amount`` base units."""
        try:
            value = int(amount)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid top-up amount: {amount!r}") from e
        if value <= 0:
            raise ValueError("Top-up amount must be positive")

        plugin = self._plugin_factory(self.config.plugin, self.options)
        logger.info("Connecting to parent connector...")
        await plugin.connect()
        try:
            logger.info(f"Sending {value} to parent connector...")
            await plugin.send_money(str(value))
        finally:
            await plugin.disconnect()
        logger.info(f"Topped up parent balance by {value}")
