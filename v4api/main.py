"""Entry point: kinds | schema <kind> | validate <kind> [path]."""

import argparse
import json
import sys
from pathlib import Path

from v4api.contracts.codec import WIRE_KINDS, ContractError, dumps, kind_for, loads
from v4api.contracts.search_v4 import SearchResponse
from v4api.core.config import config
from v4api.core.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="v4api", description="Inspect and validate search contract payloads."
    )
    sub = parser.add_subparsers(dest="mode", required=True)

    sub.add_parser("kinds", help="List the top-level wire kinds")

    schema = sub.add_parser("schema", help="Print the JSON schema of a kind")
    schema.add_argument("kind")

    validate = sub.add_parser("validate", help="Decode a payload and print its wire form")
    validate.add_argument("kind")
    validate.add_argument("path", nargs="?", default="", help="JSON file; stdin when omitted")
    validate.add_argument(
        "--strict",
        action="store_true",
        help="Reject keys that are not part of the contract",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    for problem in config.validate():
        logger.warning(problem)
    indent = config.json_indent or None

    if args.mode == "kinds":
        for name in WIRE_KINDS:
            print(name)
        return 0

    try:
        model_cls = kind_for(args.kind)
    except ContractError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.mode == "schema":
        print(json.dumps(model_cls.model_json_schema(by_alias=True), indent=indent))
        return 0

    if args.path:
        try:
            text = Path(args.path).read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot read %s", args.path, exception=exc)
            print(f"Error: cannot read {args.path}: {exc.strerror or exc}", file=sys.stderr)
            return 2
    else:
        text = sys.stdin.read()

    try:
        model = loads(model_cls, text, forbid_unknown=True if args.strict else None)
    except ContractError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        for err in exc.errors:
            print(f"- {err}", file=sys.stderr)
        return 1

    if isinstance(model, SearchResponse):
        failed = logger.pool_failures(model)
        if failed:
            logger.info("%s of %s pool results failed", failed, len(model.results))
    print(dumps(model, indent=indent))
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
