from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from sheet_typer import __version__ as TOOL_VERSION
from sheet_typer.config import DEFAULT_CONFIG_PATH, load_config, write_starter_config
from sheet_typer.engine import TableSession
from sheet_typer.errors import ColumnCountMismatchError, LoadError, RaggedRowsError
from sheet_typer.loader import load_rows
from sheet_typer.report import build_profile_report, render_profile_text

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_PRECONDITION_FAILED = 3


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class SheetTyperArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True)


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )


def write_json(path: Path, payload: Any) -> None:
    if path.exists():
        raise CliError(f"Refusing to overwrite existing output: {path}", EXIT_COMMAND_ERROR)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json_dumps(payload), encoding="utf-8")


def classify_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (RaggedRowsError, ColumnCountMismatchError)):
        return EXIT_PRECONDITION_FAILED
    if isinstance(exc, (LoadError, UnicodeDecodeError)):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = SheetTyperArgumentParser(prog="sheet-typer", description="Infer column types of delimited text files.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    profile = subparsers.add_parser("profile", help="Infer column names and datatypes for a file.")
    profile.add_argument("input", help="Input file path")
    profile.add_argument(
        "--header",
        dest="header_included",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Treat the first row as column names (overrides config)",
    )
    profile.add_argument("--delimiter", help="Field delimiter; sniffed when omitted")
    profile.add_argument("--encoding", help="Text encoding; detected when omitted")
    profile.add_argument("--config", help="JSON config path")
    profile.add_argument("--output", help="Write the JSON report to this path")
    profile.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    profile.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")
    profile.add_argument("-v", "--verbose", action="store_true", help="Debug logs on stderr")

    config = subparsers.add_parser("config", help="Generate configuration.")
    config_subparsers = config.add_subparsers(dest="config_command", required=True)
    config_init = config_subparsers.add_parser("init", help="Write a starter config file.")
    config_init.add_argument("--path", default=DEFAULT_CONFIG_PATH, help="Config output path")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_profile(args: argparse.Namespace) -> int:
    configure_logging(args.verbose)
    input_path = Path(args.input)
    if not input_path.exists():
        eprint(f"File not found: {input_path}")
        return EXIT_COMMAND_ERROR

    try:
        config = load_config(args.config)
        if args.header_included is not None:
            config.header_included = args.header_included
        if args.delimiter:
            config.delimiter = args.delimiter
        if args.encoding:
            config.encoding = args.encoding

        loaded = load_rows(input_path, delimiter=config.delimiter, encoding=config.encoding)
        session = TableSession(placeholder_prefix=config.placeholder_prefix)
        session.load(loaded.dataset, loaded.had_errors)
        if config.header_included:
            session.set_header_included(True)

        report = build_profile_report(session.state, loaded, input_path)
        if args.output:
            write_json(Path(args.output), report)
        if args.json:
            print(json_dumps(report))
        else:
            emit_human(render_profile_text(report).rstrip(), quiet=args.quiet)
            if args.output:
                emit_human(f"Report written: {args.output}", quiet=args.quiet)
        if loaded.had_errors:
            emit_human("Column types were not inferred: the file has malformed rows.", quiet=args.quiet or args.json)
            return EXIT_PARSE_FAILED
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_exception(exc)


def run_config_init(args: argparse.Namespace) -> int:
    try:
        config_path = write_starter_config(args.path)
    except FileExistsError as exc:
        eprint(str(exc))
        return EXIT_COMMAND_ERROR
    emit_human(f"Config written: {config_path}")
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.command == "profile":
            return run_profile(args)
        if args.command == "config":
            if args.config_command == "init":
                return run_config_init(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
