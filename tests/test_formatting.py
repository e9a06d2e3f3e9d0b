from decimal import Decimal

import pytest
from rich.console import Console

from uplink.models import ChannelOutcome, ChannelReport, CleanupResult
from uplink.utils.formatting import (
    channel_table,
    format_channel_expiration,
    format_channel_row,
    format_drops,
    humanize_duration,
    print_cleanup_result,
    print_report,
    ripple_time_to_unix_ms,
)

from conftest import TEST_ADDRESS, make_channel

NOW_RIPPLE = 750000000
NOW_MS = ripple_time_to_unix_ms(NOW_RIPPLE)


@pytest.fixture
def console():
    return Console(record=True, width=200, force_terminal=False)


class TestExpiration:
    """Test channel expiration labels."""

    def test_ripple_epoch(self):
        """Test Ripple time zero is 2000-01-01T00:00:00Z."""
        assert ripple_time_to_unix_ms(0) == 946684800000

    @pytest.mark.parametrize("expiration", [None, 0])
    def test_no_expiration(self, expiration):
        """Test missing or zero expiration renders empty."""
        assert format_channel_expiration(expiration, NOW_MS) == ""

    def test_past_expiration(self):
        """Test a passed expiration is ready to close."""
        assert format_channel_expiration(NOW_RIPPLE - 60, NOW_MS) == "ready to close"

    def test_expiration_now(self):
        """Test an expiration at the current instant is ready to close."""
        assert format_channel_expiration(NOW_RIPPLE, NOW_MS) == "ready to close"

    def test_future_expiration(self):
        """Test a future expiration renders a relative duration."""
        assert format_channel_expiration(NOW_RIPPLE + 3 * 3600, NOW_MS) == "in 3 hours"

    def test_expiry_cell_styled(self):
        """Test the expiry column carries a style per label."""
        channels = [
            make_channel(1, expiration=NOW_RIPPLE - 1),
            make_channel(2, expiration=NOW_RIPPLE + 600),
        ]

        cells = list(channel_table(channels, NOW_MS).columns[5].cells)

        assert [(c.plain, c.style) for c in cells] == [
            ("ready to close", "blue"),
            ("in 10 minutes", "yellow"),
        ]


class TestHumanizeDuration:
    """Test relative duration wording."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (10, "a few seconds"),
            (60, "a minute"),
            (10 * 60, "10 minutes"),
            (60 * 60, "an hour"),
            (5 * 3600, "5 hours"),
            (24 * 3600, "a day"),
            (3 * 86400, "3 days"),
            (30 * 86400, "a month"),
            (90 * 86400, "3 months"),
            (365 * 86400, "a year"),
            (3 * 365 * 86400, "3 years"),
        ],
    )
    def test_wording(self, seconds, expected):
        assert humanize_duration(seconds) == expected


class TestRendering:
    """Test tables and summaries."""

    def test_thousands_separators(self):
        assert format_drops("1000000") == "1,000,000"
        assert format_drops(999) == "999"

    def test_channel_row(self):
        """Test a row holds index, id, destination, amounts and expiry."""
        channel = make_channel(7, amount="2500000", balance="1000", expiration=NOW_RIPPLE - 5)

        assert format_channel_row(channel, 3, NOW_MS) == [
            "3",
            channel.channel_id,
            channel.destination_account,
            "2,500,000",
            "1,000",
            "ready to close",
        ]

    def test_report(self, console):
        """Test the report shows account figures and every channel."""
        channels = [make_channel(1), make_channel(2, expiration=NOW_RIPPLE + 86400 * 3)]
        report = ChannelReport(
            address=TEST_ADDRESS,
            balance=Decimal("120.500000"),
            reserved=Decimal("14"),
            channels=channels,
        )

        print_report(console, report, NOW_MS)
        text = console.export_text()

        assert TEST_ADDRESS in text
        assert "balance: 120.5 XRP" in text
        assert "available: 106.5 XRP" in text
        assert "amount (drops)" in text
        assert channels[0].channel_id in text
        assert "1,000,000" in text
        assert "in 3 days" in text

    def test_report_without_channels(self, console):
        report = ChannelReport(address=TEST_ADDRESS, balance=Decimal("20"), reserved=Decimal("10"))

        print_report(console, report, NOW_MS)

        assert "no channels found" in console.export_text()

    def test_cleanup_result(self, console):
        """Test the summary lists each failure with its channel and cause."""
        failed = make_channel(2)
        result = CleanupResult(
            outcomes=[
                ChannelOutcome(make_channel(1)),
                ChannelOutcome(failed, error="tecNO_PERMISSION"),
            ]
        )

        print_cleanup_result(console, result)
        text = console.export_text()

        assert text.splitlines()[0].strip() == "1 of 2 channels closed"
        assert f"Warning for channel {failed.channel_id}: tecNO_PERMISSION" in text
