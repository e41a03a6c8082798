"""Evaluate a file of expressions and write one result line per expression."""
from pathlib import Path
from typing import List, TextIO

from pydantic import BaseModel, Field, FilePath

from tree_calculator.batch.reader import ExpressionReader
from tree_calculator.common.logger import logger
from tree_calculator.common.operations import OperationRequest, OperationResult
from tree_calculator.core.calculator import compute
from tree_calculator.display.display import format_result


def format_line(outcome: OperationResult) -> str:
    """
    Render a result as a line of the output file.

    :param OperationResult outcome: Evaluated expression

    :return: ``<expr> = <result>`` or ``<expr> -> ERROR: <message>``
    :rtype: str
    """
    if outcome.ok:
        return f"{outcome.expression} = {format_result(outcome.result)}"
    return f"{outcome.expression} -> ERROR: {outcome.error}"


def build_output_path(input_path: Path) -> Path:
    """
    Construct the output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    # Path.stem only drops the last suffix, strip every suffix from the name
    base_name = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{base_name}{suffix_safe}_results.txt")


class BatchRunner(BaseModel):
    """
    Sequential evaluator for files of expressions.

    Features:
        - Reads plain text files or archives through ExpressionReader.
        - Evaluates expressions one at a time, in file order.
        - Writes each result to disk as soon as it is computed.
        - Malformed expressions produce an ERROR line instead of aborting the run.
    """

    output_file: Path = Field(..., description="Path to write computation results")
    reader: ExpressionReader = Field(default_factory=ExpressionReader, description="Input file reader")

    @staticmethod
    def read_expressions(content: str) -> List[str]:
        """
        Split file content into expressions, dropping blank lines.

        :param str content: Raw file content

        :return: List of non-empty, stripped expression lines
        :rtype: List[str]
        """
        return [line.strip() for line in content.splitlines() if line.strip()]

    def _write_result(self, outcome: OperationResult, f_out: TextIO) -> None:
        """
        Write a single result line and flush it.

        :param OperationResult outcome: Evaluated expression
        :param TextIO f_out: Open file handle for writing results
        """
        f_out.write(format_line(outcome) + "\n")
        f_out.flush()

    def run(self, input_file: FilePath) -> List[OperationResult]:
        """
        Evaluate every expression of a file.

        Steps:
            1. Read the file or archive content.
            2. Split it into expressions.
            3. Evaluate each expression and append its result line to the output file.

        :param FilePath input_file: File or archive holding one expression per line

        :return: Results in input order
        :rtype: List[OperationResult]
        """
        expressions: List[str] = self.read_expressions(self.reader.read(input_file))
        logger.info(f"📄 Evaluating {len(expressions)} expressions from {input_file}")

        results: List[OperationResult] = []
        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expr in enumerate(expressions, start=1):
                outcome: OperationResult = compute(OperationRequest(expression=expr))
                if not outcome.ok:
                    logger.warning(f"📄❌ Line {line_number} failed: {outcome.error}")
                self._write_result(outcome, f_out)
                results.append(outcome)

        failures = sum(1 for outcome in results if not outcome.ok)
        logger.info(f"📄✅ Results written to {self.output_file} ({failures} errors)")
        return results
