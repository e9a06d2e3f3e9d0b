"""Testnet faucet funding."""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..exceptions import FaucetError

logger = logging.getLogger(__name__)


async def acquire_testnet_account(
    faucet_url: str,
    settle_seconds: float = 10.0,
    timeout: float = 30.0,
) -> tuple[str, str]:
    """Ask the testnet faucet for a new funded account.

    The faucet funds the account with a payment that still has to be
    validated, so this waits ``settle_seconds`` before returning.

    Returns
    -------
        tuple[str, str]: (address, secret)

    """
    logger.info("Acquiring testnet account...")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(faucet_url, timeout=timeout)
    except httpx.HTTPError as e:
        raise FaucetError(faucet_url, str(e)) from e

    if response.status_code != 200:
        raise FaucetError(faucet_url, f"HTTP {response.status_code}: {response.text}")

    try:
        account = response.json()["account"]
        address = account.get("classicAddress") or account["address"]
        secret = account.get("secret") or account["seed"]
    except (ValueError, KeyError, TypeError) as e:
        raise FaucetError(faucet_url, f"unexpected response: {response.text}") from e

    logger.info(f"Got testnet address {address}")
    logger.info("Waiting for testnet API to fund address...")
    await asyncio.sleep(settle_seconds)
    return address, secret
