"""Utils module initialization."""

from __future__ import annotations

from .formatting import (
    channel_table,
    format_channel_expiration,
    format_drops,
    humanize_duration,
    print_channels,
    print_cleanup_result,
    print_report,
)

__all__ = [
    "channel_table",
    "format_channel_expiration",
    "format_drops",
    "humanize_duration",
    "print_channels",
    "print_cleanup_result",
    "print_report",
]
