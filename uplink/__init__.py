"""XRP payment channel uplink to a parent connector."""

from __future__ import annotations

__version__ = "1.0.0"
