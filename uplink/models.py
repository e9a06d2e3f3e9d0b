"""Uplink configuration and ledger data models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import (
    ASSET_CODE,
    ASSET_SCALE,
    BALANCE_MAXIMUM,
    BALANCE_MINIMUM,
    SETTLE_THRESHOLD,
    SETTLE_TO,
)


class _PersistedModel(BaseModel):
    """Frozen model persisted with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    def to_dict(self) -> dict:
        """Return the wire representation (camelCase, absent optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


class BalanceConfig(_PersistedModel):
    """Connector balance bounds for the parent account."""

    minimum: str = BALANCE_MINIMUM
    maximum: str = BALANCE_MAXIMUM
    settle_threshold: str = SETTLE_THRESHOLD
    settle_to: str = SETTLE_TO


class PluginOptions(_PersistedModel):
    """Options handed to the settlement plugin.

    ``server`` embeds the derived BTP name and secret; it can always be
    recomputed from the parent host, channel name and ``secret``.
    """

    server: str
    secret: str
    address: str | None = None
    xrp_server: str

    @field_validator("address", mode="before")
    @classmethod
    def _blank_address_is_none(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class UplinkConfig(_PersistedModel):
    """Full parent uplink configuration as persisted on disk."""

    relation: Literal["parent"] = "parent"
    plugin: str
    asset_code: str = ASSET_CODE
    asset_scale: int = ASSET_SCALE
    balance: BalanceConfig = Field(default_factory=BalanceConfig)
    send_routes: bool = False
    receive_routes: bool = False
    options: PluginOptions


def save_config(config: UplinkConfig, path: Path | str) -> Path:
    """Write the uplink config as JSON and return the path written."""
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(config.to_json() + "\n", encoding="utf-8")
    return target


def load_config(path: Path | str) -> UplinkConfig:
    """Read a persisted uplink config."""
    source = Path(path).expanduser()
    return UplinkConfig.model_validate_json(source.read_text(encoding="utf-8"))


class Channel(BaseModel):
    """Payment channel as reported by ``account_channels``. Amounts in drops."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    channel_id: str
    destination_account: str
    amount: int
    balance: int = 0
    expiration: int | None = None
    settle_delay: int | None = None
    public_key: str | None = None

    @property
    def remaining(self) -> int:
        """Drops still claimable from the channel."""
        return self.amount - self.balance


@dataclass(frozen=True)
class AccountInfo:
    """Balance and owned-object count of a ledger account."""

    address: str
    balance: Decimal  # XRP
    owner_count: int


@dataclass(frozen=True)
class ReserveInfo:
    """Reserve requirements for one account, in XRP."""

    base_reserve: Decimal
    increment_reserve: Decimal
    owner_count: int

    @property
    def reserved(self) -> Decimal:
        return self.base_reserve + self.increment_reserve * self.owner_count


@dataclass(frozen=True)
class ChannelReport:
    """Snapshot of an account and its outgoing channels."""

    address: str
    balance: Decimal
    reserved: Decimal
    channels: list[Channel] = field(default_factory=list)

    @property
    def available(self) -> Decimal:
        return self.balance - self.reserved


@dataclass(frozen=True)
class ChannelOutcome:
    """Result of closing one channel. ``error`` is None on success."""

    channel: Channel
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CleanupResult:
    """Per-channel outcomes of a cleanup batch, in submission order."""

    outcomes: list[ChannelOutcome] = field(default_factory=list)

    @property
    def closed(self) -> list[ChannelOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[ChannelOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def summary(self) -> str:
        return f"{len(self.closed)} of {len(self.outcomes)} channels closed"
