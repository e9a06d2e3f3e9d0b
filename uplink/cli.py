#!/usr/bin/env python
"""Command line entry point for the XRP uplink."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Sequence
from pathlib import Path
from typing import TypeVar

from rich.console import Console

from .config import Settings, configure_logging, get_settings
from .exceptions import ConfigurationError, UplinkError
from .models import Channel, load_config, save_config
from .services.config_builder import FieldDescriptor, build_config
from .services.uplink_controller import UplinkController
from .utils.formatting import print_channels, print_cleanup_result, print_report

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


async def read_line(prompt: str) -> str:
    """Read a line from the terminal without blocking the event loop."""
    return await asyncio.to_thread(input, prompt)


async def prompt_fields(fields: list[FieldDescriptor]) -> dict[str, str]:
    """Ask each field on the terminal, showing defaults in parentheses."""
    answers: dict[str, str] = {}
    for field in fields:
        suffix = f" ({field.default})" if field.default else ""
        while True:
            value = (await read_line(f"{field.message}{suffix} ")).strip() or field.default
            if field.validate is None or field.validate(value):
                break
            console.print("[red]A value is required.[/red]")
        answers[field.name] = value
    return answers


def parse_selection(text: str, channels: Sequence[Channel]) -> list[Channel]:
    """Turn "0,2" or "all" into the matching channels."""
    text = text.strip().lower()
    if not text:
        return []
    if text == "all":
        return list(channels)

    chosen: list[Channel] = []
    for part in text.split(","):
        try:
            index = int(part.strip())
        except ValueError as e:
            raise ValueError(f"Invalid channel index: {part.strip()!r}") from e
        if not 0 <= index < len(channels):
            raise ValueError(f"Channel index out of range: {index}")
        if channels[index] not in chosen:
            chosen.append(channels[index])
    return chosen


async def prompt_channel_selection(channels: list[Channel]) -> list[Channel]:
    """Show the channels and ask which ones to close."""
    if not channels:
        console.print("[yellow]no channels to close[/yellow]")
        return []
    print_channels(console, channels)
    text = await read_line("Channels to close (comma separated indices, or 'all'): ")
    return parse_selection(text, channels)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xrp-uplink", description="XRP payment channel uplink")
    parser.add_argument("--config", help="Path of the uplink config file")
    parser.add_argument("--log-level", help="Logging level (default from LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    configure = subparsers.add_parser("configure", help="Create the uplink config")
    configure.add_argument("--testnet", action="store_true", help="Use the XRP testnet")
    configure.add_argument("--force", action="store_true", help="Overwrite an existing config")

    subparsers.add_parser("info", help="Show account balance and channels")
    subparsers.add_parser("cleanup", help="Close selected payment channels")

    topup = subparsers.add_parser("topup", help="Pre-fund the connector balance")
    topup.add_argument("amount", help="Amount in base units (drops)")
    return parser


async def _with_deadline(coro: Awaitable[T], settings: Settings) -> T:
    if settings.OPERATION_TIMEOUT:
        return await asyncio.wait_for(coro, timeout=settings.OPERATION_TIMEOUT)
    return await coro


async def run_configure(args: argparse.Namespace, settings: Settings, path: Path) -> int:
    if path.exists() and not args.force:
        raise ConfigurationError(f"{path} already exists, use --force to overwrite")
    config = await build_config(prompt_fields, testnet=args.testnet, settings=settings)
    save_config(config, path)
    console.print(f"[green]Wrote uplink config to {path}[/green]")
    return 0


async def run_command(args: argparse.Namespace, settings: Settings, path: Path) -> int:
    try:
        config = load_config(path)
    except FileNotFoundError as e:
        raise ConfigurationError(f"no uplink config at {path}, run 'configure' first") from e

    async with UplinkController(config, settings=settings) as controller:
        if args.command == "info":
            console.print("[blue]connecting to xrp ledger...[/blue]")
            print_report(console, await controller.report())
        elif args.command == "cleanup":
            result = await controller.cleanup(prompt_channel_selection)
            print_cleanup_result(console, result)
            return 1 if result.failed else 0
        elif args.command == "topup":
            await controller.topup(args.amount)
            console.print(f"[green]Topped up {args.amount}[/green]")
    return 0


async def run(args: argparse.Namespace, settings: Settings) -> int:
    path = Path(args.config).expanduser() if args.config else settings.config_path()
    if args.command == "configure":
        return await run_configure(args, settings, path)
    return await _with_deadline(run_command(args, settings, path), settings)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the requested command."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level)
    try:
        return asyncio.run(run(args, settings))
    except (UplinkError, ValueError) as e:
        err_console.print(f"Error: {e}", style="bold red", markup=False, soft_wrap=True)
        return 1
    except asyncio.TimeoutError:
        err_console.print("Error: operation timed out", style="bold red")
        return 1
    except (KeyboardInterrupt, EOFError):
        return 130


if __name__ == "__main__":
    sys.exit(main())
