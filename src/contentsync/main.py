from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from contentsync.app import generate_mapping, run_operation
from contentsync.config import configure_logging, load_config_file
from contentsync.domain.reconciliation import parse_equality_filter
from contentsync.domain.types import Operation

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise table rows with Contentful entries",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including ignored publish/unpublish rejections",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for operation in Operation:
        sub = subparsers.add_parser(
            operation.value,
            help=f"{operation.value.capitalize()} entries for the selected rows",
        )
        _add_common_arguments(sub)
        sub.add_argument(
            "where",
            nargs="?",
            help="Optional equality filter on one column, e.g. contentlang=de-DE",
        )
        sub.add_argument(
            "--delete-locale",
            type=str,
            help="Delete table rows of this locale (within the filter) before syncing",
        )

    mapping = subparsers.add_parser("map", help="Generate a stub mapping file")
    _add_common_arguments(mapping)

    return parser.parse_args(list(argv))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("mapping", type=str, help="Path of the column to field mapping file")
    parser.add_argument("config", type=str, help="Path of the dotenv configuration file")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    where: tuple[str, str] | None = None
    try:
        if parsed_args.command != "map" and parsed_args.where:
            where = parse_equality_filter(parsed_args.where)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        load_config_file(parsed_args.config)
        if parsed_args.command == "map":
            generate_mapping(mapping_path=parsed_args.mapping)
        else:
            result = run_operation(
                Operation(parsed_args.command),
                mapping_path=parsed_args.mapping,
                where=where,
                delete_locale=parsed_args.delete_locale,
            )
            if not result.ok:
                log.error("%s group(s) failed to %s", result.failed, result.operation)
                sys.exit(1)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    log.info("done")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
