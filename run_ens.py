#!/usr/bin/env python3
"""
run_ens.py - CLI entrypoint for ENS records.

Usage:
    python run_ens.py text get nick.eth url
    python run_ens.py text set nick.eth url https://example.com --wait
    python run_ens.py addr set nick.eth 0x... --network sepolia
    python run_ens.py recent --count 5 --primary-names
"""

import asyncio
import json
import sys
from typing import Any, Awaitable

import click

from chains.providers import close_all_providers
from core.exceptions import EnsError
from core.logging import get_logger, set_global_context, setup_logging
from naming.records import (
    get_text_record,
    set_address_record,
    set_text_record,
    set_text_record_and_wait,
    submit_address_record,
)
from naming.registrations import get_recent_registrations

logger = get_logger("ens.cli")


def _run(coro: Awaitable[Any]) -> Any:
    """Run an operation and close pooled RPC clients afterwards."""
    async def runner():
        try:
            return await coro
        finally:
            await close_all_providers()

    try:
        return asyncio.run(runner())
    except EnsError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--network",
    "-n",
    default="mainnet",
    help="Network key from config/networks.yaml",
)
@click.option(
    "--log-level",
    "-l",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON log format",
)
@click.pass_context
def cli(ctx: click.Context, network: str, log_level: str, json_logs: bool) -> None:
    """ENS text records, address records and recent registrations."""
    setup_logging(level=log_level, json_format=json_logs)
    set_global_context(service="ens-records", network=network)
    ctx.obj = {"network": network}


@cli.group()
def text() -> None:
    """Text records."""


@text.command("get")
@click.argument("name")
@click.argument("key")
@click.pass_context
def text_get(ctx: click.Context, name: str, key: str) -> None:
    """Print the value of text record KEY on NAME."""
    value = _run(get_text_record(name, key, ctx.obj["network"]))
    if value is None:
        click.echo(f"{key} is not set on {name}", err=True)
        sys.exit(2)
    click.echo(value)


@text.command("set")
@click.argument("name")
@click.argument("key")
@click.argument("value", required=False)
@click.option("--wait", is_flag=True, help="Wait for the transaction to be mined")
@click.pass_context
def text_set(ctx: click.Context, name: str, key: str, value: str | None, wait: bool) -> None:
    """Set text record KEY on NAME (omit VALUE to clear it)."""
    network = ctx.obj["network"]
    if wait:
        receipt = _run(set_text_record_and_wait(name, key, value, network))
        click.echo(json.dumps(receipt.to_dict()))
    else:
        click.echo(_run(set_text_record(name, key, value, network)))


@cli.group()
def addr() -> None:
    """Address records."""


@addr.command("set")
@click.argument("name")
@click.argument("address", required=False)
@click.option("--no-wait", is_flag=True, help="Return the hash without waiting for the receipt")
@click.pass_context
def addr_set(ctx: click.Context, name: str, address: str | None, no_wait: bool) -> None:
    """Set the address record on NAME (omit ADDRESS to clear it)."""
    network = ctx.obj["network"]
    if no_wait:
        click.echo(_run(submit_address_record(name, address, network)))
    else:
        receipt = _run(set_address_record(name, address, network))
        click.echo(json.dumps(receipt.to_dict()))


@cli.command()
@click.option("--count", "-c", default=10, type=click.IntRange(min=0), help="Number of registrations")
@click.option("--primary-names", is_flag=True, help="Resolve each owner's primary name")
@click.pass_context
def recent(ctx: click.Context, count: int, primary_names: bool) -> None:
    """List the most recent .eth registrations, newest first."""
    registrations = _run(get_recent_registrations(
        count,
        ctx.obj["network"],
        resolve_primary_names=primary_names,
    ))
    for registration in registrations:
        click.echo(json.dumps(registration.to_dict()))


if __name__ == "__main__":
    cli()
