"""Command line entrypoint for the LiftLog web app."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from liftlog.core.config import AppConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LiftLog workout tracker web UI")
    parser.add_argument("--host", default=None, help="Host bind for the web UI")
    parser.add_argument("--port", type=int, default=None, help="Port for the web UI")
    parser.add_argument(
        "--site-url",
        default=None,
        help="Public base URL used in magic-link redirects (default: $LIFTLOG_SITE_URL)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level, e.g. DEBUG or INFO (default: $LIFTLOG_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--debug-sim-auth",
        action="store_true",
        help="Simulate the magic-link provider (links are logged, no email is sent)",
    )
    return parser


def load_config(args: argparse.Namespace, environ: dict[str, str] | None = None) -> AppConfig:
    config = AppConfig.from_env(os.environ if environ is None else environ)
    return config.with_overrides(
        host=args.host,
        port=args.port,
        site_url=args.site_url.rstrip("/") if args.site_url else None,
        log_level=args.log_level.upper() if args.log_level else None,
        simulate_auth=True if args.debug_sim_auth else None,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args)

    try:
        configure_logging(config.log_level)
        config.validate()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if config.simulate_auth:
        logger.info("Simulated auth enabled; magic links are written to the log")

    from liftlog.ui.web_app import run_web_ui

    return run_web_ui(config)


if __name__ == "__main__":
    raise SystemExit(main())
