"""
Command-line entry point: csv2json [options] <input-file>

main() returns an exit code and never exits the process itself; run() does that.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from .errors import Csv2JsonError, InputNotFoundError, ReadError, UsageError, WriteError
from .models import RecordSet
from .normalize import decode_document
from .parse import parse_csv
from .rules import INPUT_DELIMITER, LOG_LEVEL, resolve_delimiter

logger = logging.getLogger(__name__)

VALUE_OPTIONS = ("-o", "--out", "-d", "--delimiter")
FLAG_OPTIONS = ("-p", "--pretty", "-v", "--verbose")

HELP = f"""
Usage: csv2json [options] <input-file>

Options:
  -o, --out <output-file>   Output JSON file path (defaults to stdout)
  -d, --delimiter <char>    CSV delimiter (default: {INPUT_DELIMITER}; use \\t or tab for TAB)
  -p, --pretty              Pretty-print JSON output
  -v, --verbose             Log parsing details to stderr
  -h, --help                Show this help message
"""


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that reports problems as UsageError instead of exiting with code 2."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="csv2json", add_help=False, allow_abbrev=False)
    parser.add_argument("inputs", nargs="*")
    parser.add_argument("-o", "--out")
    parser.add_argument("-d", "--delimiter", default=INPUT_DELIMITER)
    parser.add_argument("-p", "--pretty", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def check_options(argv: List[str]) -> None:
    """
    Reject every dash token that is not a known option.

    argparse takes "-", "--" and "-5" as positionals; here they are unknown options.
    The value after -o or -d is skipped, so "-d -" still works.
    """
    tokens = iter(argv)
    for arg in tokens:
        if arg in VALUE_OPTIONS:
            next(tokens, None)
        elif arg in FLAG_OPTIONS:
            continue
        elif arg.startswith("-"):
            raise UsageError(f"unknown option: {arg}")


def parse_args(argv: List[str]) -> argparse.Namespace:
    check_options(argv)
    args, extras = build_parser().parse_known_args(argv)

    for arg in extras:
        if arg.startswith("-"):
            raise UsageError(f"unknown option: {arg}")
        args.inputs.append(arg)

    # last positional wins
    args.input = args.inputs[-1] if args.inputs else None
    if not args.input:
        raise UsageError("input file is required.", show_help=True)

    args.delimiter = resolve_delimiter(args.delimiter)
    return args


def read_input(path: str) -> str:
    if not os.path.isfile(path):
        if os.path.exists(path):
            raise ReadError(f"not a regular file: {path}")
        raise InputNotFoundError(path)
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise ReadError(f"cannot read {path}: {e.strerror or e}")

    text, encoding = decode_document(raw)
    logger.debug("read %d bytes from %s as %s", len(raw), path, encoding)
    return text


def write_output(payload: str, path: Optional[str], stdout: TextIO) -> None:
    if path is None:
        stdout.write(payload)
        stdout.flush()
        return
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(payload)
    except OSError as e:
        raise WriteError(f"cannot write {path}: {e.strerror or e}")


def _configure_logging(verbose: bool, stream: TextIO) -> None:
    """Route the package's log records to stream, replacing any handler from an earlier run."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)

    package_logger = logging.getLogger("csv2json")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


def main(
    argv: Optional[List[str]] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    if not argv or "-h" in argv or "--help" in argv:
        stdout.write(HELP)
        return 1 if not argv else 0

    try:
        args = parse_args(argv)
        _configure_logging(args.verbose, stderr)

        records = parse_csv(read_input(args.input), args.delimiter)
        # serialize completely before touching the destination
        payload = RecordSet(records).to_json(pretty=args.pretty) + "\n"
        write_output(payload, args.out, stdout)
    except UsageError as e:
        stderr.write(f"Error: {e}\n")
        if e.show_help:
            stdout.write(HELP)
        return e.exit_code
    except Csv2JsonError as e:
        stderr.write(f"Error: {e}\n")
        return e.exit_code
    except Exception as e:
        logger.debug("conversion failed", exc_info=True)
        stderr.write(f"Error: {e}\n")
        return 1

    logger.debug("wrote %d records to %s", len(records), args.out or "stdout")
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
