#!/usr/bin/env python3
"""
strategy/jobs/run_arb.py - CLI entrypoint for the fee-tier arbitrage engine.

Usage:
    python -m strategy.jobs.run_arb price --tier 500
    python -m strategy.jobs.run_arb price --tier 3000 --rpc-url https://arb1.arbitrum.io/rpc
    python -m strategy.jobs.run_arb price --tier 3000 --live
    python -m strategy.jobs.run_arb execute --amount-wei 1000000000000000000000

Without --rpc-url or --live everything runs against the paper venue
seeded from the `paper:` config section. Logs go to stderr; results go to stdout.
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from chains.providers import RPCProvider
from config import build_arbitrage_config, configured_rpc_urls, load_arbitrage_settings
from core.constants import V3_FEE_TIERS
from core.exceptions import PoolNotFoundError, TierArbError
from core.logging import get_logger, set_global_context, setup_logging
from core.math import wei_to_human
from core.models import ArbitrageConfig
from dex.adapters.paper import build_paper_venue
from dex.adapters.uniswap_v3 import UniswapV3Reader
from dex.price_feed import PriceFeed
from execution.engine import ArbitrageEngine

logger = get_logger("tierarb.cli")

EXIT_ERROR = 1
EXIT_POOL_NOT_FOUND = 2


def _paper_engine(config: ArbitrageConfig, settings: dict) -> ArbitrageEngine:
    holder = settings.get("holder") or config.controller
    venue = build_paper_venue(holder, config.token_in, config.token_out, settings.get("paper") or {})
    return ArbitrageEngine(config, venue)


async def _live_price(config: ArbitrageConfig, settings: dict, rpc_urls: list[str], fee_tier: int) -> int:
    holder = settings.get("holder") or config.controller
    async with RPCProvider(chain_id=config.chain_id, rpc_urls=rpc_urls) as provider:
        reader = UniswapV3Reader(provider, config.pool_registry, holder)
        feed = PriceFeed(reader, reader, config.token_in, config.token_out)
        price_value = await feed.get_price(fee_tier)
        logger.debug(
            "Live price",
            extra={"context": {
                "fee_tier": fee_tier,
                "price": price_value,
                "endpoint": provider.last_endpoint,
            }},
        )
        return price_value


@click.group()
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to arbitrage YAML (default: config/arbitrage.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON log format",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str, json_logs: bool) -> None:
    """TIERARB two-fee-tier arbitrage."""
    setup_logging(level=log_level, json_output=json_logs)
    set_global_context(service="tierarb", version="0.1.0")

    try:
        settings = load_arbitrage_settings(config_path)
        config = build_arbitrage_config(settings)
    except (TierArbError, FileNotFoundError) as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_ERROR)

    ctx.obj = {"config": config, "settings": settings}


@cli.command()
@click.option("--tier", "-t", required=True, type=int, help=f"Fee tier (standard: {V3_FEE_TIERS})")
@click.option(
    "--rpc-url",
    "rpc_urls",
    multiple=True,
    help="Query a live Uniswap V3 factory through this RPC (repeatable for failover)",
)
@click.option(
    "--live",
    is_flag=True,
    help="Query the live factory through the configured rpc_urls",
)
@click.pass_context
def price(ctx: click.Context, tier: int, rpc_urls: tuple[str, ...], live: bool) -> None:
    """Print the normalized price of the pair at a fee tier."""
    config: ArbitrageConfig = ctx.obj["config"]
    settings: dict = ctx.obj["settings"]

    try:
        if rpc_urls or live:
            urls = list(rpc_urls) or configured_rpc_urls(settings)
            value = asyncio.run(_live_price(config, settings, urls, tier))
        else:
            value = asyncio.run(_paper_engine(config, settings).get_price(tier))
    except PoolNotFoundError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_POOL_NOT_FOUND)
    except TierArbError as e:
        click.echo(str(e), err=True)
        sys.exit(EXIT_ERROR)

    click.echo(str(value))


@cli.command()
@click.option("--amount-wei", "-a", required=True, type=int, help="Leg-1 input in token_in wei")
@click.option("--caller", default=None, help="Invoking identity (default: configured controller)")
@click.pass_context
def execute(ctx: click.Context, amount_wei: int, caller: str | None) -> None:
    """Run one arbitrage cycle on the paper venue and print the outcome."""
    config: ArbitrageConfig = ctx.obj["config"]
    settings: dict = ctx.obj["settings"]

    try:
        engine = _paper_engine(config, settings)
        outcome = asyncio.run(
            engine.execute_arbitrage(caller or config.controller, amount_wei)
        )
    except TierArbError as e:
        logger.error(
            f"Cycle aborted: {e}",
            extra={"context": e.to_dict()},
        )
        click.echo(str(e), err=True)
        sys.exit(EXIT_ERROR)

    logger.info(
        "Cycle finished",
        extra={"context": {
            "status": outcome.status.value,
            "amount_in": str(wei_to_human(outcome.amount_in, config.token_in.decimals)),
            "amount_out": str(wei_to_human(outcome.amount_out, config.token_in.decimals)),
            "symbol": config.token_in.symbol,
        }},
    )
    click.echo(json.dumps(outcome.to_dict(), indent=2))


if __name__ == "__main__":
    cli()
