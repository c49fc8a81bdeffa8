"""Entry point for the order-dashboard Textual app."""

from __future__ import annotations

import argparse
import logging

from order_dashboard.api_client import OrderApiClient
from order_dashboard.config import API_ENDPOINT, REQUEST_TIMEOUT_SECONDS
from order_dashboard.dashboard_app import OrderDashboardApp
from order_dashboard.logging_config import VALID_LEVELS, setup_logging
from order_dashboard.sample_data import SampleOrderSource
from order_dashboard.store import OrderSource, OrderStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="order-dashboard",
        description="Track restaurant orders and sales from the terminal.",
    )
    parser.add_argument("--endpoint", default=API_ENDPOINT, help="Backend script URL")
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT_SECONDS,
        help="Request timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("--demo", action="store_true", help="Use generated sample orders instead of the backend")
    parser.add_argument("--log-level", choices=VALID_LEVELS, default=None, help="Override LOG_LEVEL")
    return parser


def build_source(args: argparse.Namespace) -> OrderSource:
    if args.demo:
        return SampleOrderSource()
    return OrderApiClient(endpoint=args.endpoint, timeout=args.timeout)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    logger.info("Starting order dashboard (demo=%s)", args.demo)
    OrderDashboardApp(OrderStore(build_source(args))).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
