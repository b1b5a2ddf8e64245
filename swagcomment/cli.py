"""
Command line entry point.

Usage:
    swagcomment
    swagcomment --handlers ./internal/api/http/wx-api/handler \\
        --router ./internal/api/http/wx-api/router.go \\
        --types "./internal/api/http/wx-api/types/*.go,./pkg/types/*.go" \\
        --api-prefix /wx-api --concurrency 8
    swagcomment --silent
    swagcomment --dry-run --log-format json
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from swagcomment.__version__ import get_version
from swagcomment.config import resolve_config
from swagcomment.exceptions import ConfigurationError, DiscoveryError
from swagcomment.logging_config import configure_logging
from swagcomment.orchestrator import FileStats, SwaggerGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="swagcomment",
        description=(
            "Automatically generates Swagger comments for Go handler methods. "
            "Extracts parameter types from request structs when available."
        ),
    )
    parser.add_argument("--handlers", dest="handler_dir", help="Directory containing handler files")
    parser.add_argument("--router", dest="router_file", help="Router file path")
    parser.add_argument(
        "--types",
        dest="types_paths",
        help="Comma-separated list of glob patterns for type definition files",
    )
    parser.add_argument(
        "--handler-pattern", dest="handler_pattern", help="Pattern to match handler files"
    )
    parser.add_argument("--security", dest="security_scheme", help="Security scheme name")
    parser.add_argument("--api-prefix", dest="api_prefix", help="API prefix for paths")
    parser.add_argument(
        "--concurrency", type=int, help="Number of concurrent workers (default: CPU count)"
    )
    parser.add_argument(
        "--authorized-group", help="Router group identifier for authenticated routes"
    )
    parser.add_argument("--public-group", help="Router group identifier for public routes")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", dest="verbose", action="store_true", default=None, help="Enable verbose output"
    )
    verbosity.add_argument(
        "--silent",
        dest="verbose",
        action="store_false",
        default=None,
        help="Silent mode (no output except errors)",
    )

    parser.add_argument("--config", type=Path, help="Path to a .swagcomment.yaml file")
    parser.add_argument(
        "--dry-run", action="store_true", default=None, help="Show changes without writing"
    )
    parser.add_argument(
        "--log-format", choices=("text", "json"), default=None, help="Log output format"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def format_summary(total: FileStats) -> str:
    """Render the end-of-run summary block."""
    rule = "=" * 38
    return "\n".join(
        [
            rule,
            "Swagger Comment Generation Complete!",
            rule,
            f"Total methods examined:  {total.total}",
            f"Handler methods found:   {total.handlers}",
            f"Already commented:       {total.already_documented}",
            f"New comments added:      {total.newly_documented}",
            f"Total documentation:     {total.documented}/{total.handlers} ({total.coverage:.1f}%)",
        ]
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(
            config_path=args.config,
            handler_dir=args.handler_dir,
            router_file=args.router_file,
            types_paths=args.types_paths,
            handler_pattern=args.handler_pattern,
            security_scheme=args.security_scheme,
            api_prefix=args.api_prefix,
            concurrency=args.concurrency,
            authorized_group=args.authorized_group,
            public_group=args.public_group,
            verbose=args.verbose,
            dry_run=args.dry_run,
        )
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    json_output = None if args.log_format is None else args.log_format == "json"
    configure_logging(level="INFO" if config.verbose else "ERROR", json_output=json_output)

    try:
        report = SwaggerGenerator(config).run()
    except DiscoveryError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print(f"Current working directory: {os.getcwd()}", file=sys.stderr)
        return 1

    if report.failed:
        print(
            f"Completed with {report.failed} errors and {report.succeeded} successful files",
            file=sys.stderr,
        )
    print(format_summary(report.total))
    return 0


if __name__ == "__main__":
    sys.exit(main())
