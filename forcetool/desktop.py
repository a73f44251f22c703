"""Opening a URI with the desktop's default handler."""

from __future__ import annotations

import subprocess
import sys

_OPEN_COMMANDS = {
    "windows": ["cmd", "/c", "start"],
    "darwin": ["open"],
    "linux": ["xdg-open"],
}

_PLATFORM_NAMES = {"win32": "windows", "cygwin": "windows"}


def _platform_name(platform: str | None) -> str:
    name = sys.platform if platform is None else platform
    if name.startswith("linux"):
        return "linux"
    return _PLATFORM_NAMES.get(name, name)


def open_command(uri: str, platform: str | None = None) -> list[str]:
    """Return the command line that opens uri on platform (default: this one)."""
    name = _platform_name(platform)
    try:
        command = list(_OPEN_COMMANDS[name])
    except KeyError:
        raise RuntimeError(f"don't know how to open things on {name} platform") from None
    if name == "windows":
        uri = uri.replace("&", "^&")
    return [*command, uri]


def open_uri(uri: str, platform: str | None = None) -> subprocess.Popen:
    """Start the program that opens uri, without waiting for it."""
    return subprocess.Popen(open_command(uri, platform))