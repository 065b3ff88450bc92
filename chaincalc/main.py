# chaincalc/main.py

import argparse
import logging
import sys
from typing import List, Optional

from chaincalc.calculator import Calculator
from chaincalc.config import load_settings
from chaincalc.errors import CalculatorError
from chaincalc.repl import REPL, format_result

logger = logging.getLogger(__name__)


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chaincalc",
        description="Evaluate arithmetic expressions, reusing the previous answer.",
    )
    parser.add_argument(
        "-i",
        "--input",
        help="evaluates expression from command line instead of interactive mode",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="print the parsed expression tree before the result",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="logging level (default: CHAINCALC_LOG_LEVEL or WARNING)",
    )
    return parser


def run_once(expression: str, debug: bool = False) -> int:
    """Evaluate a single expression, print the outcome and return the exit code."""
    try:
        result, dump = Calculator().evaluate_with_debug(expression, debug)
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if dump is not None:
        print(dump)
    print(format_result(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    if args.log_level:
        settings = settings.model_copy(update={"log_level": args.log_level})
    configure_logging(settings.log_level)
    logger.debug("Settings: %s", settings)

    if args.input is not None:
        return run_once(args.input, args.debug)

    REPL(settings=settings, debug=args.debug).repl_loop()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
