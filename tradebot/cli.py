"""Command line entry point for running the trading controller."""

import argparse
import signal
import sys
import threading
from pathlib import Path
from typing import Optional

import structlog

from .config.loader import ConfigLoader
from .controller import TradingController
from .errors import ConfigurationError, ExchangeError
from .exchange.upbit import UpbitClient
from .logging.config import configure_logging

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tradebot",
        description="Run the indicator-driven trading controller against Upbit."
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding tradebot.yaml and .env")
    parser.add_argument("--interval", type=float, default=None,
                        help="Seconds between evaluation cycles")
    parser.add_argument("--market", default=None,
                        help="Market code to trade, e.g. KRW-BTC")
    parser.add_argument("--log-level", default=None,
                        help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--json-logs", action="store_true",
                        help="Emit JSON log lines")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true",
                      help="Run a single evaluation cycle and exit")
    mode.add_argument("--list-markets", action="store_true",
                      help="Print markets without warning flags and exit")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.interval is not None:
        overrides.setdefault("controller", {})["interval_seconds"] = args.interval
    if args.market:
        overrides.setdefault("exchange", {})["market"] = args.market
    if args.log_level:
        overrides.setdefault("logging", {})["level"] = args.log_level
    if args.json_logs:
        overrides.setdefault("logging", {})["format_json"] = True
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    """Run the CLI; returns the process exit status."""
    args = build_parser().parse_args(argv)
    loader = ConfigLoader.create(args.config_dir)

    try:
        config = loader.load_config(_cli_overrides(args))
    except ConfigurationError as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 2

    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        log_file=config.logging.log_file,
    )

    if args.list_markets:
        client = UpbitClient.from_config(config.exchange)
        try:
            markets = client.fetch_markets(safe_only=True)
        except ExchangeError as e:
            logger.error("Failed to fetch markets", error=str(e))
            return 1
        for market in markets:
            print(f"{market.market}\t{market.korean_name}\t{market.english_name}")
        return 0

    try:
        credentials = loader.load_credentials()
    except ConfigurationError as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 2

    client = UpbitClient.from_config(config.exchange, credentials)
    controller = TradingController(client, config)

    if args.once:
        result = controller.run_cycle()
        print(result.outcome.value)
        return 0

    shutdown = threading.Event()

    def _handle_signal(signum, _frame):
        logger.info("Shutdown signal received", signal=signum)
        shutdown.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    controller.start(config.controller.interval_seconds)
    try:
        while not shutdown.wait(1.0):
            pass
    finally:
        controller.stop()
        controller.join(timeout=config.exchange.timeout_seconds + 1)

    return 0


if __name__ == "__main__":
    sys.exit(main())
