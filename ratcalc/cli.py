"""Command-line entry point: one-shot expressions or the interactive REPL."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from ratcalc.config import load_settings
from ratcalc.repl import REPL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ratcalc", description="Exact rational arithmetic calculator.")
    parser.add_argument(
        "-e", "--expr",
        action="append",
        metavar="EXPR",
        help="Evaluate EXPR and exit; may be repeated, all share one set of variables.",
    )
    parser.add_argument(
        "--structural",
        action="store_true",
        help="Print results as expression trees instead of infix text.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: WARNING, or RATCALC_LOG_LEVEL).",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not read or write the REPL history file.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(find_dotenv(usecwd=True))
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(
            display="structural" if args.structural else None,
            log_level=args.log_level,
            use_history=False if args.no_history else None,
        )
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    # Configure logging
    logging.basicConfig(
        level=settings.log_level_number(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    repl = REPL(settings)
    if not args.expr:
        repl.repl_loop()
        return 0

    status = 0
    for text in args.expr:
        try:
            ok, out = repl.evaluate_line(text)
        except EOFError:
            break
        if ok:
            print(out)
        else:
            print(out, file=sys.stderr)
            status = 1
    return status


if __name__ == '__main__':
    raise SystemExit(main())
