"""Pre-flight balance check before a new outgoing channel is configured."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol

from ..constants import FEE_MARGIN
from ..exceptions import AccountMissingError, AccountNotFoundError, InsufficientBalanceError
from ..models import AccountInfo, ReserveInfo

logger = logging.getLogger(__name__)


class AccountLedger(Protocol):
    """The part of the ledger gateway the validator depends on."""

    server: str

    async def get_account_info(self, address: str) -> AccountInfo: ...

    async def get_server_info(self) -> dict[str, Decimal]: ...


async def fetch_reserve_info(gateway: AccountLedger, account: AccountInfo) -> ReserveInfo:
    """Combine server reserves with the account's owner count."""
    server_info = await gateway.get_server_info()
    return ReserveInfo(
        base_reserve=Decimal(server_info["base_reserve"]),
        increment_reserve=Decimal(server_info["increment_reserve"]),
        owner_count=account.owner_count,
    )


def minimum_balance(reserve: ReserveInfo, outgoing_channel_default_amount: Decimal) -> Decimal:
    """Balance needed to open one more channel of the default size.

    Covers the current reserves, the reserve of the new channel object,
    the channel's funding and a margin for fees.
    """
    return (
        reserve.reserved
        + reserve.increment_reserve
        + Decimal(outgoing_channel_default_amount)
        + FEE_MARGIN
    )


async def validate_account(
    gateway: AccountLedger,
    address: str,
    outgoing_channel_default_amount: Decimal,
) -> Decimal:
    """Check that ``address`` can fund a new outgoing channel.

    Returns
    -------
        The minimum balance the account was checked against

    Raises
    ------
        AccountNotFoundError: The account does not exist on the ledger
        InsufficientBalanceError: The balance is below the computed minimum

    """
    try:
        account = await gateway.get_account_info(address)
    except AccountMissingError as e:
        raise AccountNotFoundError(address, gateway.server) from e

    reserve = await fetch_reserve_info(gateway, account)
    min_balance = minimum_balance(reserve, outgoing_channel_default_amount)

    if account.balance < min_balance:
        logger.warning(
            f"Account {address} balance {account.balance} XRP is below minimum {min_balance} XRP"
        )
        raise InsufficientBalanceError(address, account.balance, min_balance)

    logger.info(f"Account {address} has {account.balance} XRP (minimum {min_balance} XRP)")
    return min_balance
