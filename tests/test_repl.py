from __future__ import annotations

import io

import pytest

from descent import repl
from descent.repl import ReplOptions, _handle_slash, _normalize, _toggle, evaluate_line
from descent.utils import debug_py_trace_enabled


def test_evaluate_line_prints_rendering() -> None:
    out, err = io.StringIO(), io.StringIO()

    evaluate_line("x = 1 + 2", ReplOptions(), out=out, err=err)

    assert out.getvalue() == "('x'id = (1i + 2i))\n"
    assert err.getvalue() == ""


def test_evaluate_line_reports_failure() -> None:
    out, err = io.StringIO(), io.StringIO()

    evaluate_line("2*-3", ReplOptions(), out=out, err=err)

    assert out.getvalue() == ""
    assert err.getvalue().startswith("Invalid syntax at line 1, col 3")


def test_evaluate_line_blank_prints_nothing() -> None:
    out, err = io.StringIO(), io.StringIO()

    evaluate_line("   ", ReplOptions(), out=out, err=err)

    assert out.getvalue() == ""
    assert err.getvalue() == ""


def test_evaluate_line_with_tree() -> None:
    out = io.StringIO()

    evaluate_line("-x", ReplOptions(show_tree=True), out=out, err=io.StringIO())

    lines = out.getvalue().splitlines()
    assert lines[0] == "(- 'x'id)"
    assert lines[1] == "minus"
    assert "identifier" in lines[2]


@pytest.mark.parametrize(
    "arg, current, expected",
    [
        pytest.param("on", False, True, id="on"),
        pytest.param("OFF", True, False, id="off-upper"),
        pytest.param("", True, False, id="flip-on"),
        pytest.param("", False, True, id="flip-off"),
        pytest.param("maybe", False, None, id="invalid"),
    ],
)
def test_toggle(arg: str, current: bool, expected) -> None:
    assert _toggle(arg, current) is expected


def test_slash_tree(capsys: pytest.CaptureFixture[str]) -> None:
    options = ReplOptions()

    assert _handle_slash("/tree on", options)
    assert options.show_tree
    assert _handle_slash("/tree", options)
    assert not options.show_tree
    assert capsys.readouterr().out == "Tree output: on\nTree output: off\n"


def test_slash_py_traceback(capsys: pytest.CaptureFixture[str]) -> None:
    assert not debug_py_trace_enabled()

    assert _handle_slash("/py-traceback on", ReplOptions())
    assert debug_py_trace_enabled()
    assert _handle_slash("/py-traceback off", ReplOptions())
    assert not debug_py_trace_enabled()
    assert "Python traceback: off" in capsys.readouterr().out


def test_slash_bad_argument(capsys: pytest.CaptureFixture[str]) -> None:
    options = ReplOptions()

    assert _handle_slash("/tree sideways", options)
    assert not options.show_tree
    assert capsys.readouterr().err == "Usage: /tree [on|off]\n"


def test_slash_unknown(capsys: pytest.CaptureFixture[str]) -> None:
    assert _handle_slash("/nope", ReplOptions())
    assert "Unknown command: /nope" in capsys.readouterr().err


def test_non_command_passes_through() -> None:
    assert not _handle_slash("x = 1", ReplOptions())


def test_normalize_strips_invisible_characters() -> None:
    assert _normalize("\u200bx =\u200d 1\r") == "x = 1"


def test_main_parses_arguments(capsys: pytest.CaptureFixture[str]) -> None:
    repl.main(["1+2", "x:"])

    captured = capsys.readouterr()
    assert captured.out == "(1i + 2i)\n"
    assert captured.err.startswith("Malformed declaration at line 1, col 3")


def test_main_tree_flag(capsys: pytest.CaptureFixture[str]) -> None:
    repl.main(["--tree", "true"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "true"
    assert lines[1].startswith("bool")
