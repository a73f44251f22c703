from unittest import mock

import pytest

from forcetool.desktop import open_command, open_uri


def test_windows_escapes_ampersands():
    assert open_command("http://host/?a=1&b=2", "windows") == [
        "cmd",
        "/c",
        "start",
        "http://host/?a=1^&b=2",
    ]


def test_darwin_uses_open():
    assert open_command("http://host/?a=1&b=2", "darwin") == ["open", "http://host/?a=1&b=2"]


def test_linux_platform_names_are_accepted():
    assert open_command("file.txt", "linux") == ["xdg-open", "file.txt"]
    assert open_command("file.txt", "linux2") == ["xdg-open", "file.txt"]


def test_win32_maps_to_windows():
    assert open_command("x", "win32")[:3] == ["cmd", "/c", "start"]


def test_unknown_platform_raises():
    with pytest.raises(RuntimeError, match="plan9"):
        open_command("x", "plan9")


def test_open_uri_starts_command():
    with mock.patch("forcetool.desktop.subprocess.Popen") as popen:
        result = open_uri("http://host/", "darwin")
    popen.assert_called_once_with(["open", "http://host/"])
    assert result is popen.return_value


def test_open_uri_unknown_platform_starts_nothing():
    with mock.patch("forcetool.desktop.subprocess.Popen") as popen:
        with pytest.raises(RuntimeError):
            open_uri("x", "plan9")
    assert popen.call_count == 0