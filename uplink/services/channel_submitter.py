"""Serialized payment channel claim submission for one account."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Protocol

from xrpl.models.transactions import PaymentChannelClaim, PaymentChannelClaimFlag
from xrpl.models.transactions.transaction import Transaction
from xrpl.wallet import Wallet

from ..exceptions import GatewayError, SubmissionError
from .ledger_gateway import wallet_from_secret

logger = logging.getLogger(__name__)


class SubmissionLedger(Protocol):
    """The part of the ledger gateway the submitter depends on."""

    async def subscribe(self, address: str) -> None: ...

    async def submit(self, transaction: Transaction, wallet: Wallet) -> dict[str, Any]: ...


class SessionState(str, Enum):
    """Subscription state of a submitter session."""

    UNSUBSCRIBED = "unsubscribed"
    SUBSCRIBED = "subscribed"


class SubmitterSession:
    """Exclusive submission rights for one account's sequence numbers.

    Submissions run one at a time; a second caller waits for the first to
    finish. The account stream subscription is made before the first
    submission and never repeated for the life of the session.
    """

    def __init__(self, gateway: SubmissionLedger, address: str, secret: str) -> None:
        self.gateway = gateway
        self.address = address
        self._wallet = wallet_from_secret(secret)
        self._lock = asyncio.Lock()
        self.state = SessionState.UNSUBSCRIBED

    async def _ensure_subscribed(self) -> None:
        # Caller holds self._lock
        if self.state is SessionState.SUBSCRIBED:
            return
        await self.gateway.subscribe(self.address)
        self.state = SessionState.SUBSCRIBED
        logger.debug(f"Submitter for {self.address} subscribed")

    async def submit_claim(self, channel_id: str, close: bool = False) -> dict[str, Any]:
        """Submit a claim on ``channel_id``, closing the channel if requested.

        Raises
        ------
            SubmissionError: The ledger rejected the claim or could not be reached

        """
        transaction = PaymentChannelClaim(
            account=self.address,
            channel=channel_id,
            flags=PaymentChannelClaimFlag.TF_CLOSE if close else 0,
        )
        async with self._lock:
            try:
                await self._ensure_subscribed()
                result = await self.gateway.submit(transaction, self._wallet)
            except GatewayError as e:
                raise SubmissionError(channel_id, str(e)) from e

        logger.info(f"Claim on channel {channel_id} validated (close={close})")
        return result
