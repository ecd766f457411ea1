"""
Command line entry point for oavalidator.
"""

from __future__ import annotations

import argparse
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import pydantic

from oavalidator import ValidationErrorSeverity, ValidatorOptions, validate
from oavalidator.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oavalidator",
        description="oavalidator CLI.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the installed oavalidator version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug records to stderr.",
    )
    parser.add_argument(
        "--log-level",
        help="Log level for stderr records (overrides OAVALIDATOR_LOG_LEVEL).",
    )
    subparsers = parser.add_subparsers(dest="command")
    check = subparsers.add_parser(
        "validate",
        help="Validate one JSON document, list of documents or RPDE feed page.",
    )
    source = check.add_mutually_exclusive_group()
    source.add_argument(
        "--file",
        help="Path of the JSON document to validate ('-' for stdin).",
    )
    source.add_argument(
        "--json",
        help="JSON document to validate (string).",
    )
    check.add_argument(
        "--type",
        help="Model type of the root document, overriding its own type.",
    )
    check.add_argument(
        "--spec-version",
        help="Specification version used to load models.",
    )
    check.add_argument(
        "--validation-mode",
        help="Feed or booking-flow mode, e.g. OpenData or C1Request.",
    )
    check.add_argument(
        "--data-model-path",
        help="Directory of published JSON model definitions.",
    )
    check.add_argument(
        "--rpde-item-limit",
        type=int,
        help="Maximum number of updated RPDE items to validate.",
    )
    check.add_argument(
        "--remote-fetch",
        action="store_true",
        help="Allow fetching extension contexts over HTTP.",
    )
    check.add_argument(
        "--fail-on",
        choices=[severity.value for severity in ValidationErrorSeverity],
        help="Exit with status 1 if any diagnostic has this severity.",
    )
    return parser


def _read_document(parser: argparse.ArgumentParser, args: argparse.Namespace):
    try:
        if args.json is not None:
            return json.loads(args.json)
        if args.file == "-":
            return json.load(sys.stdin)
        return json.loads(Path(args.file).read_text(encoding="utf-8"))
    except OSError as exc:
        parser.error(f"Failed to read --file: {exc}")
    except json.JSONDecodeError as exc:
        parser.error(f"Failed to parse JSON: {exc}")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        try:
            print(version("oavalidator"))
        except PackageNotFoundError:
            print("oavalidator (not installed)")
        return 0

    configure_logging("DEBUG" if args.verbose else args.log_level)

    if args.command == "validate":
        if args.file is None and args.json is None:
            parser.error("validate requires --file or --json")
        document = _read_document(parser, args)

        raw_options = {
            "type": args.type,
            "active_spec_version": args.spec_version,
            "validation_mode": args.validation_mode,
            "data_model_path": args.data_model_path,
            "rpde_item_limit": args.rpde_item_limit,
            "remote_fetch_enabled": args.remote_fetch,
        }
        try:
            options = ValidatorOptions.model_validate(
                {key: value for key, value in raw_options.items() if value is not None}
            )
        except pydantic.ValidationError as exc:
            parser.error(f"Invalid options: {exc}")

        errors = validate(document, options)
        print(json.dumps([error.model_dump(mode="json") for error in errors], ensure_ascii=False, indent=2))
        if args.fail_on and any(error.severity.value == args.fail_on for error in errors):
            return 1
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
