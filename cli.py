#!/usr/bin/env python3
"""Simple CLI for checking the gold price feed and POI contracts from a public node"""

import argparse
import asyncio
from datetime import datetime, timezone
from typing import Optional

from goldpeg.config import settings
from goldpeg.core.chains import ChainRegistry
from goldpeg.core.contracts import ChainReader, ContractGateway
from goldpeg.core.errors import GoldpegError
from goldpeg.core.pricing import PriceFeedAggregator, PricePoller, PriceQuote
from goldpeg.logging_config import setup_logging
from goldpeg.providers import HttpRpcProvider
from goldpeg.services import TokenService


def print_quote(quote: PriceQuote) -> None:
    observed = datetime.fromtimestamp(quote.observed_at_millis / 1000, tz=timezone.utc)
    stale_indicator = "⚠️ " if quote.is_stale else "🟢"
    print(f"{stale_indicator} Gold: {quote.display_price} / gram")
    print(f"   Raw:      {quote.amount_per_gram:f}")
    print(f"   Source:   {quote.source.label}")
    print(f"   Observed: {observed.isoformat()}")


async def cli_price(chain_id: int, watch: bool = False) -> None:
    """Fetch the gold price once, or keep polling until interrupted"""
    async with HttpRpcProvider.for_chain(chain_id) as provider:
        reader = ChainReader(provider)
        aggregator = PriceFeedAggregator()

        if not watch:
            print_quote(await aggregator.fetch_price(reader))
            return

        poller = PricePoller(aggregator, lambda: reader)
        poller.on_quote(print_quote)
        print(f"🔄 Polling every {poller.interval_seconds:g}s (Ctrl+C to stop)")
        async with poller:
            await asyncio.Event().wait()


async def cli_dashboard(address: str, chain_id: int) -> None:
    async with HttpRpcProvider.for_chain(chain_id) as provider:
        snapshot = await TokenService().get_dashboard(address, ChainReader(provider))
    print(f"\nAccount:      {snapshot.account}")
    print(f"POI Balance:  {snapshot.poi_balance}")
    print(f"Gold Price:   {snapshot.gold_price_display}")
    print(f"Total Supply: {snapshot.total_supply_display}")


def cli_chains() -> None:
    registry = ChainRegistry()
    target = registry.target.chain_id
    for chain in registry:
        marker = "*" if chain.chain_id == target else " "
        print(f"{marker} {chain.chain_id:>6}  {chain.name:<20} {chain.native_currency.symbol:<6} {', '.join(chain.rpc_urls)}")


def cli_contracts() -> None:
    gateway = ContractGateway()
    for name, address in settings.contract_addresses.items():
        status = "✅" if gateway.is_configured(name) else "❌ not configured"
        print(f"{name:<18} {address} {status}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gold-pegged token client CLI")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    price_parser = subparsers.add_parser("price", help="Fetch the gold price per gram")
    price_parser.add_argument("--chain-id", type=int, default=settings.chain_id, help="Chain to read from")
    price_parser.add_argument("--watch", action="store_true", help="Keep polling on the configured interval")

    dashboard_parser = subparsers.add_parser("dashboard", help="POI balance, gold price and supply")
    dashboard_parser.add_argument("address", help="Wallet address")
    dashboard_parser.add_argument("--chain-id", type=int, default=settings.chain_id, help="Chain to read from")

    subparsers.add_parser("chains", help="List supported chains")
    subparsers.add_parser("contracts", help="Show configured contract addresses")

    return parser


async def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "price":
            await cli_price(args.chain_id, args.watch)
        elif args.command == "dashboard":
            await cli_dashboard(args.address, args.chain_id)
        elif args.command == "chains":
            cli_chains()
        elif args.command == "contracts":
            cli_contracts()
    except GoldpegError as exc:
        print(f"❌ {exc.message}")
        return 1
    return 0


def run() -> None:
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        raise SystemExit(130)


if __name__ == "__main__":
    run()
