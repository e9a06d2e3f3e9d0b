"""Shared fakes for uplink tests. Nothing here touches the network."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from uplink.config import Settings
from uplink.exceptions import AccountMissingError, GatewayError
from uplink.models import AccountInfo, Channel, PluginOptions, UplinkConfig

# Genesis account of a fresh rippled; the pair is public
TEST_SECRET = "snoPBrXtMeMyMHUVTgbuqAfg1SUTb"
TEST_ADDRESS = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
TEST_SERVER = "wss://rippled.test:51233"
TEST_PARENT = "parent.example.com"


def make_channel(index: int, **overrides: Any) -> Channel:
    data: dict[str, Any] = {
        "channel_id": f"{index:064X}",
        "destination_account": "rPEPPER7kfTD9w2To4CQk6UCfuHM9c6GDY",
        "amount": "1000000",
        "balance": "250000",
    }
    data.update(overrides)
    return Channel.model_validate(data)


class FakeGateway:
    """In-memory LedgerGateway."""

    def __init__(
        self,
        server: str = TEST_SERVER,
        balance: Decimal = Decimal("100"),
        owner_count: int = 0,
        base_reserve: Decimal = Decimal("10"),
        increment_reserve: Decimal = Decimal("2"),
        channels: list[Channel] | None = None,
        missing_accounts: set[str] | None = None,
        failing_channels: set[str] | None = None,
        submit_delay: float = 0,
    ) -> None:
        self.server = server
        self.balance = balance
        self.owner_count = owner_count
        self.base_reserve = base_reserve
        self.increment_reserve = increment_reserve
        self.channels = channels or []
        self.missing_accounts = missing_accounts or set()
        self.failing_channels = failing_channels or set()
        self.submit_delay = submit_delay

        self.connect_calls = 0
        self.close_calls = 0
        self.subscribe_calls: list[str] = []
        self.submitted: list[Any] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __aenter__(self) -> FakeGateway:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def connect(self) -> None:
        self.connect_calls += 1

    async def close(self) -> None:
        self.close_calls += 1

    async def get_account_info(self, address: str) -> AccountInfo:
        if address in self.missing_accounts:
            raise AccountMissingError(address, self.server)
        return AccountInfo(address=address, balance=self.balance, owner_count=self.owner_count)

    async def get_server_info(self) -> dict[str, Decimal]:
        return {"base_reserve": self.base_reserve, "increment_reserve": self.increment_reserve}

    async def list_channels(self, address: str) -> list[Channel]:
        return list(self.channels)

    async def subscribe(self, address: str) -> None:
        self.subscribe_calls.append(address)

    async def submit(self, transaction: Any, wallet: Any) -> dict[str, Any]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.submit_delay)
            self.submitted.append(transaction)
            if transaction.channel in self.failing_channels:
                raise GatewayError("transaction failed: tecNO_PERMISSION", self.server)
            return {"validated": True, "meta": {"TransactionResult": "tesSUCCESS"}}
        finally:
            self.in_flight -= 1


class FakePlugin:
    """Settlement plugin that records calls."""

    OUTGOING_CHANNEL_DEFAULT_AMOUNT = 10_000_000

    instances: list[FakePlugin] = []

    def __init__(self, options: dict[str, Any]) -> None:
        self.options = options
        self.calls: list[tuple[str, ...]] = []
        FakePlugin.instances.append(self)

    async def connect(self) -> None:
        self.calls.append(("connect",))

    async def send_money(self, amount: str) -> None:
        self.calls.append(("send_money", amount))

    async def disconnect(self) -> None:
        self.calls.append(("disconnect",))


@pytest.fixture
def plugin_options() -> PluginOptions:
    return PluginOptions(
        server=f"btp+wss://test:{'ab' * 32}@{TEST_PARENT}",
        secret=TEST_SECRET,
        address=TEST_ADDRESS,
        xrp_server=TEST_SERVER,
    )


@pytest.fixture
def uplink_config(plugin_options: PluginOptions) -> UplinkConfig:
    return UplinkConfig(plugin="conftest:FakePlugin", options=plugin_options)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        SETTLEMENT_PLUGIN="conftest:FakePlugin",
        XRP_SERVER=TEST_SERVER,
        XRP_TESTNET_SERVER=TEST_SERVER,
        FAUCET_SETTLE_SECONDS=0,
        PARENT_CONNECTORS_LIVE=[TEST_PARENT],
        PARENT_CONNECTORS_TEST=[TEST_PARENT],
    )


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
