# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import re
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from reaper.app import reap_metrics
from reaper.config import (
    ConfigurationError,
    configure_logging,
    get_circonus_config,
    get_consul_config,
    get_nomad_config,
)
from reaper.config.circonus import DEFAULT_CIRCONUS_APP_NAME
from reaper.domain.reconciliation import ExclusionRules, Mode, ReconcileOptions

from .report import format_summary

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^\S+$")


def _token(value: str) -> str:
    if not _TOKEN_RE.match(value):
        raise argparse.ArgumentTypeError(f"Invalid hostname: {value!r}")
    return value


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Deactivate Circonus checks and metrics for hosts and allocations that are gone"
    )
    parser.add_argument(
        "--mode",
        required=True,
        choices=[mode.value for mode in Mode],
        help="Mode to operate in",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not make any actual changes",
    )
    parser.add_argument(
        "--query",
        type=str,
        help="Circonus search query of metrics to disable (query mode)",
    )
    parser.add_argument(
        "--exclude-target",
        type=_token,
        action="append",
        default=[],
        help="Target to exclude (may be set more than once)",
    )
    parser.add_argument(
        "--exclude-regexp",
        type=_token,
        action="append",
        default=[],
        help="Regexp for targets to exclude (may be set more than once)",
    )
    parser.add_argument(
        "--prefix-search",
        action="store_true",
        help="Match check bundle hosts by prefix instead of exactly",
    )
    parser.add_argument(
        "--circonus-api-key",
        type=str,
        help="Circonus API Key (defaults to CIRCONUS_API_KEY)",
    )
    parser.add_argument(
        "--circonus-app-name",
        type=str,
        default=DEFAULT_CIRCONUS_APP_NAME,
        help="Application name shown in the Circonus API Token UI (default: %(default)s)",
    )
    parser.add_argument(
        "--circonus-url",
        type=str,
        help="URL for the Circonus API (defaults to CIRCONUS_API_URL)",
    )
    parser.add_argument(
        "--consul-addr",
        type=str,
        help="Consul agent address (defaults to CONSUL_HTTP_ADDR, then 127.0.0.1:8500)",
    )
    parser.add_argument(
        "--nomad-addr",
        type=str,
        help="Nomad agent address (defaults to NOMAD_ADDR, then http://127.0.0.1:4646)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-host tracing at DEBUG level",
    )
    return parser.parse_args(list(argv))


def _build_options(args: argparse.Namespace) -> ReconcileOptions:
    mode = Mode.parse(args.mode)
    if mode is Mode.QUERY and not (args.query or "").strip():
        raise ConfigurationError("--query is required in query mode")
    return ReconcileOptions(
        mode=mode,
        dry_run=args.dry_run,
        exclusions=ExclusionRules.from_strings(args.exclude_target, args.exclude_regexp),
        metric_query=args.query,
        prefix_search=args.prefix_search,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        options = _build_options(parsed_args)
        circonus = get_circonus_config(
            api_key=parsed_args.circonus_api_key,
            app_name=parsed_args.circonus_app_name,
            api_url=parsed_args.circonus_url,
        )
        consul = get_consul_config(address=parsed_args.consul_addr)
        nomad = get_nomad_config(address=parsed_args.nomad_addr)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)

    try:
        stats = reap_metrics(options, circonus=circonus, consul=consul, nomad=nomad)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)

    print(format_summary(stats, dry_run=options.dry_run))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
