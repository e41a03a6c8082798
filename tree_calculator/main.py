"""
Command-line entrypoint of the calculator.

Three modes:
- Evaluate the expressions given as arguments and print their results
- Evaluate a file (or archive) of expressions and write a results file next to it
- Drive a headless calculator display from the keyboard, line by line

Expressions starting with '-' must follow a '--' separator, e.g.
``tree-calculator -- -5+3``.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Literal, Optional, TextIO

from pydantic import BaseModel, Field, FilePath, ValidationError

from tree_calculator.batch.runner import BatchRunner, build_output_path, format_line
from tree_calculator.common.errors import CalculatorError
from tree_calculator.common.logger import logger, set_level
from tree_calculator.common.operations import OperationRequest, OperationResult
from tree_calculator.core.calculator import compute
from tree_calculator.display.display import Display


QUIT_COMMANDS = ("q", "quit", "exit")


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expressions : List[str]
        Expressions to evaluate directly.
    file_path : Optional[FilePath]
        Path to the file containing one expression per line.
    interactive : bool
        Whether to start the keypad loop.
    log_level : Optional[str]
        Package log level, None keeps the configured default.
    """

    expressions: List[str] = Field(default_factory=list)
    file_path: Optional[FilePath] = None
    interactive: bool = False
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None


def build_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser.

    :return: Parser for the calculator command line
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="tree-calculator",
        description="Evaluate calculator expressions such as 2+3x4 or -5+3",
    )
    parser.add_argument("expressions", nargs="*", help="Expressions to evaluate (use -- before a leading '-')")
    parser.add_argument("-f", "--file", dest="file_path", help="File or archive holding one expression per line")
    parser.add_argument("-i", "--interactive", action="store_true", help="Drive the calculator display from the keyboard")
    parser.add_argument("--log-level", type=str.upper, help="Log level, overrides $TREE_CALCULATOR_LOG_LEVEL")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param Optional[List[str]] argv: Arguments, defaults to ``sys.argv[1:]``

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cli_args = CliArgs(**vars(args))
    except ValidationError as exc:
        parser.error(str(exc))

    if not (cli_args.expressions or cli_args.file_path or cli_args.interactive):
        parser.error("nothing to do: give expressions, --file or --interactive")
    return cli_args


def evaluate_expressions(expressions: List[str], out: TextIO) -> int:
    """
    Evaluate expressions and print one result line each.

    :param List[str] expressions: Expressions to evaluate
    :param TextIO out: Stream receiving the result lines

    :return: Number of failed expressions
    :rtype: int
    """
    failures = 0
    for expr in expressions:
        outcome: OperationResult = compute(OperationRequest(expression=expr))
        if not outcome.ok:
            failures += 1
        print(format_line(outcome), file=out)
    return failures


def run_interactive(display: Display, lines: TextIO, out: TextIO) -> None:
    """
    Feed input lines to the display key by key and print the display after each line.

    Unbound keys are reported and skipped. A quit command or end of input stops the loop.

    :param Display display: Display to drive
    :param TextIO lines: Input stream
    :param TextIO out: Output stream
    """
    print(display.text, file=out)
    for line in lines:
        keys = line.rstrip("\r\n")
        if keys.strip().lower() in QUIT_COMMANDS:
            break
        for key in keys:
            try:
                display.press(key)
            except ValueError as exc:
                logger.warning(f"⌨️ {exc}")
        print(display.text, file=out)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``tree-calculator`` command.

    :param Optional[List[str]] argv: Arguments, defaults to ``sys.argv[1:]``

    :return: Exit status, 1 when any expression or the input file failed
    :rtype: int
    """
    cli_args = parse_args(argv)
    if cli_args.log_level:
        set_level(cli_args.log_level)

    failures = 0
    if cli_args.expressions:
        failures += evaluate_expressions(cli_args.expressions, sys.stdout)

    if cli_args.file_path is not None:
        input_path: Path = Path(cli_args.file_path)
        runner = BatchRunner(output_file=build_output_path(input_path))
        try:
            results = runner.run(input_path)
        except (CalculatorError, UnicodeDecodeError) as exc:
            logger.error(f"📄❌ Could not process {input_path}: {exc}")
            failures += 1
        else:
            failures += sum(1 for outcome in results if not outcome.ok)
            print(runner.output_file)

    if cli_args.interactive:
        run_interactive(Display(), sys.stdin, sys.stdout)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
