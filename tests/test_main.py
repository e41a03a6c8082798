"""Test the command-line entrypoint."""
import io
from pathlib import Path

import pytest

from tree_calculator.display.display import Display
from tree_calculator.main import main, parse_args, run_interactive


def test_parse_args_expressions() -> None:
    """Positional arguments are expressions; '--' allows a leading minus."""
    cli_args = parse_args(["--", "-5+3", "2x2"])
    assert cli_args.expressions == ["-5+3", "2x2"]
    assert cli_args.file_path is None
    assert not cli_args.interactive
    assert cli_args.log_level is None


def test_parse_args_log_level_is_case_insensitive() -> None:
    """--log-level accepts lowercase level names."""
    assert parse_args(["--log-level", "warning", "1+1"]).log_level == "WARNING"


@pytest.mark.parametrize("argv", [
    [],                                   # Nothing to do
    ["--file", "does/not/exist.txt"],     # FilePath must exist
    ["--log-level", "loud", "1+1"],       # Unknown level
])
def test_parse_args_invalid(argv) -> None:
    """Invalid arguments exit through the argument parser."""
    with pytest.raises(SystemExit):
        parse_args(argv)


def test_main_expressions(capsys) -> None:
    """Expressions are printed with their results."""
    status = main(["--", "-5+3", "2+3x4", "4/0"])

    assert status == 0
    assert capsys.readouterr().out.splitlines() == ["-5+3 = -2", "2+3x4 = 14", "4/0 = inf"]


def test_main_reports_failures(capsys) -> None:
    """A malformed expression makes the exit status non-zero."""
    status = main(["1+1", "5+x3"])

    out = capsys.readouterr().out.splitlines()
    assert status == 1
    assert out[0] == "1+1 = 2"
    assert out[1].startswith("5+x3 -> ERROR:")


def test_main_file(tmp_path: Path, capsys) -> None:
    """--file writes a results file next to the input."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+2+3\n6/3\n")

    status = main(["--file", str(input_file)])

    output_file = tmp_path / "ops_txt_results.txt"
    assert status == 0
    assert capsys.readouterr().out.strip() == str(output_file)
    assert output_file.read_text().splitlines() == ["1+2+3 = 6", "6/3 = 2"]


def test_run_interactive() -> None:
    """Each input line is typed on the display, which is printed after the line."""
    lines = io.StringIO("12+3=\nx2\n=\nq\n9\n")
    out = io.StringIO()

    run_interactive(Display(), lines, out)

    assert out.getvalue().splitlines() == ["0", "15", "15x2", "30"]


def test_run_interactive_skips_unbound_keys() -> None:
    """Unbound keys are skipped without stopping the loop."""
    out = io.StringIO()

    run_interactive(Display(), io.StringIO("1?2\n"), out)

    assert out.getvalue().splitlines() == ["0", "12"]


def test_main_file_unsupported_archive(tmp_path: Path, capsys) -> None:
    """An unsupported archive is reported and gives a non-zero status."""
    input_file = tmp_path / "ops.rar"
    input_file.write_text("1+1")

    status = main(["--file", str(input_file)])

    assert status == 1
    assert capsys.readouterr().out == ""


def test_main_file_invalid_encoding(tmp_path: Path, capsys) -> None:
    """A file that is not valid UTF-8 is reported and gives a non-zero status."""
    input_file = tmp_path / "ops.txt"
    input_file.write_bytes(b"\xff\xfe1+1\n")

    status = main(["--file", str(input_file)])

    assert status == 1
    assert capsys.readouterr().out == ""
    assert not (tmp_path / "ops_txt_results.txt").exists()
