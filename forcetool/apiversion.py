"""The API version used for requests."""

from __future__ import annotations

import re

DEFAULT_API_VERSION_NUMBER = "55.0"

_VERSION_PATTERN = re.compile(r"[0-9]{2}\.0")

_api_version_number = DEFAULT_API_VERSION_NUMBER


def api_version() -> str:
    """Return the current API version with its "v" prefix."""
    return f"v{_api_version_number}"


def api_version_number() -> str:
    """Return the current API version number."""
    return _api_version_number


def set_api_version(version: str) -> None:
    """Set the API version; it must look like nn.0."""
    global _api_version_number
    if not isinstance(version, str) or not _VERSION_PATTERN.fullmatch(version):
        raise ValueError("apiversion must be in the form of nn.0.")
    _api_version_number = version