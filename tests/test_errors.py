import pytest

from forcetool.errors import error_and_exit, exit_if_error, format_error, info


def test_format_error_adds_prefix():
    assert format_error("boom") == "ERROR: boom\n"


def test_format_error_leading_newline_drops_prefix():
    assert format_error("\nplain") == "plain\n"


def test_format_error_applies_arguments():
    line = format_error("Could not determine connection status for %s", "user")
    assert line.startswith("ERROR: Could not determine connection status for ")
    assert line.endswith("user\n")


def test_format_error_without_args_keeps_percent():
    assert "100%" in format_error("100%")


def test_error_and_exit_writes_and_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        error_and_exit("must specify tests to run")
    assert excinfo.value.code == 1
    assert capsys.readouterr().err == format_error("must specify tests to run")


def test_exit_if_error_exits_on_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        exit_if_error(RuntimeError("x"), "failed %s", "here")
    assert excinfo.value.code == 1
    assert "failed here" in capsys.readouterr().err


def test_exit_if_error_ignores_none(capsys):
    exit_if_error(None, "failed")
    assert capsys.readouterr().err == ""


def test_info_writes_to_stderr(capsys):
    info("Logged", "in")
    captured = capsys.readouterr()
    assert captured.err == "Logged in\n"
    assert captured.out == ""