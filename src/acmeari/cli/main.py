"""acmeari command-line entry point.

Usage::

    acmeari cert.pem [more.pem ...]
    acmeari --acme https://acme.example/directory -v cert.pem
    acmeari -c ari.yaml --timeout 10 cert.pem
    acmeari --inspect cert.pem
    python -m acmeari cert.pem
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

log = logging.getLogger(__name__)


def _get_version() -> str:
    from acmeari import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="acmeari",
        description="Query ACME Renewal Information (ARI) for PEM certificates.",
    )
    parser.add_argument(
        "certificates",
        nargs="*",
        metavar="CERT",
        help="PEM file holding an end-entity certificate (first block is used).",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        default=None,
        help="Path to an optional configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--acme",
        metavar="URL",
        default=None,
        help="ACME directory URL (overrides acme.directory_url).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging on stderr.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        default=None,
        help="Socket timeout for each HTTP request (overrides http.timeout_seconds).",
    )
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default=None,
        help="Diagnostic log format (overrides logging.format).",
    )
    parser.add_argument(
        "--inspect",
        action="store_true",
        default=False,
        help="Print the certificate identifier components without contacting the server.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    print(f"acmeari: error: {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments, loads config, runs the command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    # -- bootstrap logging early (basic stderr until config is loaded) ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # -- load & validate config ---
    from acmeari.config import AriConfig, ConfigValidationError

    if args.config is not None and not Path(args.config).is_file():
        _print_error(f"configuration file not found: {args.config}")
        sys.exit(1)

    try:
        config = AriConfig(config_file=args.config)
        settings = config.settings.with_overrides(
            directory_url=args.acme,
            timeout_seconds=args.timeout,
            log_format=args.log_format,
        )
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)

    # -- replace bootstrap logging with the configured handlers ---
    from acmeari.logging import configure_logging

    configure_logging(settings.logging, verbose=args.verbose)

    if not args.certificates:
        log.error("must provide at least one PEM certificate to process")
        sys.exit(1)

    # -- dispatch ---
    if args.inspect:
        from acmeari.cli.commands.inspect import run_inspect

        code = run_inspect(args.certificates)
    else:
        from acmeari.cli.commands.check import run_check

        code = run_check(settings, args.certificates)

    sys.exit(code)
