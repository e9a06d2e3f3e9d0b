"""XRP Ledger and uplink protocol constants."""

from __future__ import annotations

from decimal import Decimal

# HMAC key for deriving the parent BTP secret. Persisted configs depend on it.
PARENT_BTP_HMAC_KEY = "parent_btp_uri"
BTP_SCHEME = "btp+wss"

# Seconds between the Unix epoch and the Ripple epoch (2000-01-01T00:00:00Z)
RIPPLE_EPOCH_OFFSET = 0x386D4380

DEFAULT_RIPPLED = "wss://s1.ripple.com"
DEFAULT_TESTNET_RIPPLED = "wss://s.altnet.rippletest.net:51233"
DEFAULT_FAUCET_URL = "https://faucet.altnet.rippletest.net/accounts"

# Uplink config defaults
RELATION = "parent"
ASSET_CODE = "XRP"
ASSET_SCALE = 6
BALANCE_MINIMUM = "-Infinity"
BALANCE_MAXIMUM = "20000"
SETTLE_THRESHOLD = "5000"
SETTLE_TO = "10000"

FEE_MARGIN = Decimal("1")  # XRP kept aside for transaction fees
