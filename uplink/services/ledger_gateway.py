"""XRP Ledger access for the uplink: account state, channels and submission."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

from xrpl.asyncio.clients import AsyncWebsocketClient
from xrpl.asyncio.transaction import XRPLReliableSubmissionException, submit_and_wait
from xrpl.models.requests import AccountChannels, ServerInfo, Subscribe
from xrpl.models.requests import AccountInfo as AccountInfoRequest
from xrpl.models.requests.request import Request
from xrpl.models.transactions.transaction import Transaction
from xrpl.utils import drops_to_xrp
from xrpl.wallet import Wallet

from ..exceptions import AccountMissingError, GatewayError
from ..models import AccountInfo, Channel

logger = logging.getLogger(__name__)


def wallet_from_secret(secret: str) -> Wallet:
    """Build a signing wallet from a ledger seed."""
    try:
        return Wallet.from_seed(secret)
    except Exception as e:
        raise ValueError(f"Invalid XRP secret: {e}") from e


def derive_address(secret: str) -> str:
    """Derive the classic address controlled by a ledger seed."""
    return wallet_from_secret(secret).classic_address


class LedgerGateway:
    """Thin async wrapper around one rippled websocket connection.

    The connection is opened lazily and only once; all requests made
    through the gateway share it. Ledger errors are raised as
    ``GatewayError``, with ``AccountMissingError`` reserved for
    ``actNotFound`` so callers can tell the two apart.
    """

    def __init__(self, server: str, client: Any | None = None) -> None:
        """Initialize the gateway for a rippled websocket endpoint."""
        self.server = server
        self.client = client if client is not None else AsyncWebsocketClient(server)
        self._connect_lock = asyncio.Lock()
        self._connected = False

    async def __aenter__(self) -> LedgerGateway:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        """Open the websocket connection if it is not open yet."""
        async with self._connect_lock:
            if self._connected:
                return
            logger.info(f"Connecting to XRP ledger at {self.server}")
            try:
                await self.client.open()
            except Exception as e:
                logger.error(f"Failed to connect to {self.server}: {e}")
                raise GatewayError(f"cannot connect: {e}", self.server) from e
            self._connected = True

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        async with self._connect_lock:
            if not self._connected:
                return
            self._connected = False
            try:
                await self.client.close()
                logger.debug(f"Closed connection to {self.server}")
            except Exception as e:
                logger.warning(f"Error closing connection to {self.server}: {e}")

    async def _request(self, request: Request) -> dict[str, Any]:
        """Send a request and return its result, raising on ledger errors."""
        await self.connect()
        try:
            response = await self.client.request(request)
        except Exception as e:
            logger.error(f"Request {request.method.value} to {self.server} failed: {e}")
            raise GatewayError(f"{request.method.value} failed: {e}", self.server) from e

        if response.is_successful():
            return response.result

        result = response.result or {}
        error = result.get("error", "unknown error")
        if error == "actNotFound":
            raise AccountMissingError(getattr(request, "account", "unknown"), self.server)
        message = result.get("error_message") or error
        raise GatewayError(f"{request.method.value} failed: {message}", self.server)

    async def get_account_info(self, address: str) -> AccountInfo:
        """Fetch balance (XRP) and owner count from the validated ledger."""
        result = await self._request(AccountInfoRequest(account=address, ledger_index="validated"))
        account_data = result["account_data"]
        return AccountInfo(
            address=address,
            balance=Decimal(str(drops_to_xrp(account_data["Balance"]))),
            owner_count=int(account_data.get("OwnerCount", 0)),
        )

    async def get_server_info(self) -> dict[str, Decimal]:
        """Fetch the base and per-object reserves (XRP) of the validated ledger."""
        result = await self._request(ServerInfo())
        validated = result.get("info", {}).get("validated_ledger")
        if not validated:
            raise GatewayError("server has no validated ledger", self.server)
        return {
            "base_reserve": Decimal(str(validated["reserve_base_xrp"])),
            "increment_reserve": Decimal(str(validated["reserve_inc_xrp"])),
        }

    async def list_channels(self, address: str) -> list[Channel]:
        """Fetch every payment channel owned by an account, following markers."""
        channels: list[Channel] = []
        marker: Any = None
        while True:
            result = await self._request(
                AccountChannels(account=address, ledger_index="validated", marker=marker)
            )
            channels.extend(Channel.model_validate(c) for c in result.get("channels", []))
            marker = result.get("marker")
            if not marker:
                return channels

    async def subscribe(self, address: str) -> None:
        """Subscribe the connection to an account's transaction stream."""
        await self._request(Subscribe(accounts=[address]))
        logger.debug(f"Subscribed to account stream for {address}")

    async def submit(self, transaction: Transaction, wallet: Wallet) -> dict[str, Any]:
        """Autofill, sign and submit a transaction, waiting for validation.

        Returns
        -------
            The validated transaction result

        Raises
        ------
            GatewayError: The transaction was rejected or never validated

        """
        await self.connect()
        try:
            response = await submit_and_wait(transaction, self.client, wallet)
        except XRPLReliableSubmissionException as e:
            raise GatewayError(str(e), self.server) from e
        except Exception as e:
            logger.error(f"Submission to {self.server} failed: {e}")
            raise GatewayError(f"submission failed: {e}", self.server) from e

        result = response.result
        engine_result = result.get("meta", {}).get("TransactionResult")
        if not response.is_successful() or (engine_result and engine_result != "tesSUCCESS"):
            raise GatewayError(
                f"transaction failed: {engine_result or result.get('error', 'unknown error')}",
                self.server,
            )
        return result
