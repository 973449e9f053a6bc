"""CLI entry point.

Usage:
    python -m techsignal signal bitcoin
    python -m techsignal signal avalanche-2 --timeframe both
    python -m techsignal logs --address 0xabc... --topic 0xddf2... --limit 5
"""

import argparse
import asyncio
import logging
import sys

import orjson

from techsignal.clients import CoinGeckoRestClient, EvmRpcClient
from techsignal.config import get_settings
from techsignal.core.models import LogFilter, Timeframe
from techsignal.services import TechnicalAnalyzer, get_recent_logs_chunked


def parse_topic(value: str) -> str | list[str] | None:
    """Parse one topic position: "null"/"*" for any, comma list for OR."""
    if value.lower() in ("null", "none", "*", ""):
        return None
    parts = [p.strip() for p in value.split(",") if p.strip()]
    return parts[0] if len(parts) == 1 else parts


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Technical indicator signals and recent EVM logs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m techsignal signal bitcoin --timeframe 1h
  python -m techsignal signal avalanche-2 --timeframe both
  python -m techsignal logs --address 0xB97E... --topic 0xddf2... --limit 10
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    signal_parser = subparsers.add_parser("signal", help="Compute MA/RSI/MACD signal")
    signal_parser.add_argument("asset_id", help="CoinGecko coin id (e.g., bitcoin)")
    signal_parser.add_argument(
        "--timeframe", "-t",
        choices=["1h", "4h", "both"],
        default=settings.default_timeframe.value,
        help=f"Bar size (default: {settings.default_timeframe.value})",
    )

    logs_parser = subparsers.add_parser("logs", help="Fetch recent logs in block windows")
    logs_parser.add_argument("--rpc-url", default=settings.rpc_url, help="JSON-RPC endpoint")
    logs_parser.add_argument("--address", default=None, help="Contract address")
    logs_parser.add_argument(
        "--topic",
        action="append",
        type=parse_topic,
        default=[],
        help="Topic filter by position; repeat per position, 'null' for any",
    )
    logs_parser.add_argument("--to-block", type=int, default=None, help="Newest block (default: latest)")
    logs_parser.add_argument("--chunk-size", type=int, default=settings.log_chunk_size)
    logs_parser.add_argument("--limit", type=int, default=settings.log_limit)
    logs_parser.add_argument("--max-chunks", type=int, default=settings.log_max_chunks)

    return parser.parse_args(argv)


def _print_json(data) -> None:
    print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


async def cmd_signal(args: argparse.Namespace) -> None:
    """Compute and print technical signals."""
    settings = get_settings()
    async with CoinGeckoRestClient.from_settings(settings) as client:
        analyzer = TechnicalAnalyzer(client, settings)
        if args.timeframe == "both":
            results = await analyzer.compute_signals(args.asset_id)
            _print_json({tf.value: r.model_dump(mode="json") for tf, r in results.items()})
        else:
            result = await analyzer.compute_signal(args.asset_id, Timeframe(args.timeframe))
            _print_json(result.model_dump(mode="json"))


async def cmd_logs(args: argparse.Namespace) -> None:
    """Fetch and print recent logs."""
    settings = get_settings()
    log_filter = LogFilter(address=args.address, topics=args.topic)
    async with EvmRpcClient(args.rpc_url, timeout=settings.request_timeout) as client:
        logs = await get_recent_logs_chunked(
            client,
            log_filter,
            to_block=args.to_block,
            chunk_size=args.chunk_size,
            limit=args.limit,
            max_chunks=args.max_chunks,
        )
    _print_json([log.model_dump(mode="json") for log in logs])


async def run(args: argparse.Namespace) -> None:
    if args.command == "signal":
        await cmd_signal(args)
    elif args.command == "logs":
        await cmd_logs(args)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
