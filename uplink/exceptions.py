"""Uplink error taxonomy."""

from __future__ import annotations

from decimal import Decimal


class UplinkError(Exception):
    """Base class for every error raised by the uplink."""


class ConfigurationError(UplinkError):
    """Settings or persisted configuration are missing or invalid."""


class GatewayError(UplinkError):
    """Transport or protocol failure reported by the ledger connection."""

    def __init__(self, message: str, server: str | None = None):
        self.server = server
        super().__init__(f"{message} (server: {server})" if server else message)


class AccountMissingError(GatewayError):
    """The ledger answered ``actNotFound`` for an account query."""

    def __init__(self, address: str, server: str | None = None):
        self.address = address
        super().__init__(f"account {address} not found", server)


class AccountNotFoundError(UplinkError):
    """The configured account does not exist on the ledger."""

    def __init__(self, address: str, server: str | None = None):
        self.address = address
        self.server = server
        super().__init__(
            f"account {address} does not exist on {server or 'the ledger'}; "
            "fund it before opening a channel"
        )


class InsufficientBalanceError(UplinkError):
    """The account cannot cover reserves plus a new outgoing channel."""

    def __init__(self, address: str, balance: Decimal, min_required: Decimal):
        self.address = address
        self.balance = balance
        self.min_required = min_required
        super().__init__(
            f"account {address} balance is too low: has {balance} XRP, "
            f"must be at least {min_required} XRP"
        )


class SubmissionError(UplinkError):
    """A channel claim could not be submitted or was rejected."""

    def __init__(self, channel_id: str, cause: str):
        self.channel_id = channel_id
        self.cause = cause
        super().__init__(f"channel {channel_id}: {cause}")


class PluginLoadError(UplinkError):
    """The settlement plugin class could not be imported."""

    def __init__(self, path: str, cause: str):
        self.path = path
        super().__init__(f"cannot load settlement plugin {path!r}: {cause}")


class FaucetError(UplinkError):
    """The testnet faucet did not hand out a funded account."""

    def __init__(self, url: str, cause: str):
        self.url = url
        super().__init__(f"faucet {url} failed: {cause}")
