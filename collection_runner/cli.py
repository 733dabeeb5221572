"""
Command line entry point.

Usage:
    collection-runner path/to/collection.json [--env-file .env] [--json]

Exit codes: 0 when every request succeeded, 1 when any request failed,
2 when the collection or configuration is invalid.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from .config import Settings, load_environment
from .exceptions import ConfigurationError, RunnerError
from .schemas.report import BatchReport
from .services.batch_runner import run_batch
from .services.collection_parser import load_collection
from .services.report_formatter import format_report
from .services.transport import HttpxTransport, create_client


EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collection-runner",
        description="Run every request of a Postman collection concurrently.",
    )
    parser.add_argument("collection", help="Path to the collection JSON file")
    parser.add_argument("--env-file", help="Dotenv file with placeholder values (default: .env)")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument(
        "--allow-http-errors",
        action="store_true",
        help="Report 4xx/5xx responses as successes instead of failures",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Apply command line overrides on top of environment settings."""
    settings = Settings.from_environ()
    overrides: dict = {}
    if args.env_file:
        overrides["env_file"] = args.env_file
    if args.timeout is not None:
        if args.timeout <= 0:
            raise ConfigurationError("--timeout must be positive")
        overrides["request_timeout"] = args.timeout
    if args.allow_http_errors:
        overrides["fail_on_http_error"] = False
    return settings.model_copy(update=overrides) if overrides else settings


async def run_collection_file(path: str, settings: Settings) -> tuple[str | None, BatchReport]:
    """Parse a collection file and run it on a fresh HTTP client."""
    environment = load_environment(settings.env_file)
    parsed = load_collection(path, environment)

    async with create_client(settings) as client:
        transport = HttpxTransport(client, fail_on_http_error=settings.fail_on_http_error)
        report = await run_batch(
            parsed.requests,
            parsed.info.auth,
            transport,
            baseline_headers=settings.baseline_headers,
        )
    return parsed.info.name, report


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = resolve_settings(args)
        collection_name, report = asyncio.run(run_collection_file(args.collection, settings))
    except RunnerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report, collection_name))

    return EXIT_OK if report.summary.failure_count == 0 else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
