"""Console formatting for channel reports and cleanup results."""

from __future__ import annotations

import time
from collections.abc import Sequence
from decimal import Decimal

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..constants import RIPPLE_EPOCH_OFFSET
from ..models import Channel, ChannelReport, CleanupResult

READY_TO_CLOSE = "ready to close"

CHANNEL_HEADERS = ["index", "channel id", "destination", "amount (drops)", "balance (drops)", "expiry"]


def format_drops(drops: int | str) -> str:
    """Format a drops amount with thousands separators."""
    return f"{int(drops):,}"


def ripple_time_to_unix_ms(ripple_time: int) -> int:
    """Convert seconds since the Ripple epoch to Unix milliseconds."""
    return (ripple_time + RIPPLE_EPOCH_OFFSET) * 1000


def humanize_duration(seconds: float) -> str:
    """Describe a duration the way people say it ("3 hours", "a day")."""
    seconds = abs(seconds)
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24

    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    if minutes < 45:
        return f"{round(minutes)} minutes"
    if minutes < 90:
        return "an hour"
    if hours < 22:
        return f"{round(hours)} hours"
    if hours < 36:
        return "a day"
    if days < 26:
        return f"{round(days)} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{round(days / 30.4)} months"
    if days < 548:
        return "a year"
    return f"{round(days / 365)} years"


def format_channel_expiration(expiration: int | None, now_ms: int | None = None) -> str:
    """Label a channel expiration for display.

    No expiration gives an empty label, a passed expiration gives
    "ready to close", anything else gives "in <duration>".
    """
    if not expiration:
        return ""
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    unix_exp = ripple_time_to_unix_ms(expiration)
    if unix_exp <= now_ms:
        return READY_TO_CLOSE
    return "in " + humanize_duration((unix_exp - now_ms) / 1000)


def expiration_style(label: str) -> str:
    return "blue" if label == READY_TO_CLOSE else "yellow"


def format_channel_row(channel: Channel, index: int, now_ms: int | None = None) -> list[str]:
    """Return the table cells for one channel."""
    return [
        str(index),
        channel.channel_id,
        channel.destination_account,
        format_drops(channel.amount),
        format_drops(channel.balance),
        format_channel_expiration(channel.expiration, now_ms),
    ]


def format_xrp(amount: Decimal) -> str:
    """Format an XRP amount without trailing zeros."""
    normalized = amount.normalize()
    return f"{normalized:f}"


def channel_table(channels: Sequence[Channel], now_ms: int | None = None) -> Table:
    """Build the channel table, one row per channel in ledger order."""
    table = Table(show_header=True, header_style="bold green")
    table.add_column(CHANNEL_HEADERS[0], justify="right")
    table.add_column(CHANNEL_HEADERS[1], style="cyan", overflow="fold")
    table.add_column(CHANNEL_HEADERS[2], overflow="fold")
    table.add_column(CHANNEL_HEADERS[3], justify="right")
    table.add_column(CHANNEL_HEADERS[4], justify="right")
    table.add_column(CHANNEL_HEADERS[5])

    for index, channel in enumerate(channels):
        *cells, expiry = format_channel_row(channel, index, now_ms)
        table.add_row(*cells, Text(expiry, style=expiration_style(expiry)))
    return table


def print_channels(console: Console, channels: Sequence[Channel], now_ms: int | None = None) -> None:
    console.print(channel_table(channels, now_ms))


def print_report(console: Console, report: ChannelReport, now_ms: int | None = None) -> None:
    """Print the account summary followed by its channels."""
    console.print(f"[bold green]account:[/bold green] {report.address}")
    console.print(f"[bold green]balance:[/bold green] {format_xrp(report.balance)} XRP")
    console.print(f"[bold green]reserved:[/bold green] {format_xrp(report.reserved)} XRP")
    console.print(f"[bold green]available:[/bold green] {format_xrp(report.available)} XRP")
    if report.channels:
        print_channels(console, report.channels, now_ms)
    else:
        console.print("[yellow]no channels found[/yellow]")


def print_cleanup_result(console: Console, result: CleanupResult) -> None:
    """Print the batch summary and one warning per failed channel."""
    style = "bold yellow" if result.failed else "bold green"
    console.print(f"[{style}]{result.summary()}[/{style}]")
    for outcome in result.failed:
        # Ledger error text may contain brackets, keep it out of markup
        console.print(
            Text(f"Warning for channel {outcome.channel.channel_id}: {outcome.error}", style="red"),
            soft_wrap=True,
        )
