"""Finding scratch-org and Dev Hub logins known to the sfdx tool."""

from __future__ import annotations

import json
import os
import subprocess
from collections.abc import Iterator, Mapping
from typing import Any

ORG_LIST_COMMAND = ("sfdx", "force:org:list", "--json")


class DxAuthError(Exception):
    """A DX login could not be found or listed."""


def in_project_dir(path: str | os.PathLike[str] | None = None) -> bool:
    """Return True when path (default: the working directory) holds a .sfdx directory."""
    base = os.getcwd() if path is None else os.fspath(path)
    return os.path.exists(os.path.join(base, ".sfdx"))


def get_org_list() -> dict[str, Any]:
    """Ask sfdx for the orgs it knows and return the decoded JSON."""
    try:
        completed = subprocess.run(
            list(ORG_LIST_COMMAND), capture_output=True, text=True, check=False
        )
    except OSError as err:
        raise DxAuthError(str(err)) from err
    try:
        data = json.loads(completed.stdout)
    except json.JSONDecodeError as err:
        raise DxAuthError(str(err)) from err
    if completed.returncode != 0:
        raise DxAuthError(f"exit status {completed.returncode}")
    if not isinstance(data, dict):
        raise DxAuthError("unexpected org list output")
    return data


def _iter_auths(org_list: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    for value in org_list.values():
        if not isinstance(value, Mapping):
            continue
        for group in value.values():
            if isinstance(group, list):
                yield from (auth for auth in group if isinstance(auth, Mapping))


def _announce(auth: Mapping[str, Any]) -> None:
    if "alias" in auth:
        print(f"Getting auth for {auth.get('username')} ({auth['alias']})...")
    else:
        print(f"Getting auth for {auth.get('username')}\n...", end="")


def find_user_in_org_list(user: str, org_list: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the login whose username or alias is user."""
    for auth in _iter_auths(org_list):
        if auth.get("username") == user or auth.get("alias") == user:
            _announce(auth)
            return auth
    raise DxAuthError(f"Could not find and alias or username that matches {user}")


def find_default_users(org_list: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the logins marked as default user or default Dev Hub."""
    users = [
        auth
        for auth in _iter_auths(org_list)
        if auth.get("isDefaultUsername") is True or auth.get("isDefaultDevHubUsername") is True
    ]
    if not users:
        raise DxAuthError("Could not find a default user")
    return users


def choose_default_user(users: list[Mapping[str, Any]], in_project: bool) -> Mapping[str, Any]:
    """Pick the scratch user inside a project and the Dev Hub user elsewhere."""
    if not users:
        raise DxAuthError("No default user logins found")
    if len(users) == 1:
        chosen: Mapping[str, Any] = users[0]
    else:
        hub_user: Mapping[str, Any] = {}
        scratch_user: Mapping[str, Any] = {}
        for user in users:
            if user.get("defaultMarker") == "(D)":
                hub_user = user
            else:
                scratch_user = user
        chosen = scratch_user if in_project else hub_user
    _announce(chosen)
    return chosen


def connection_is_usable(auth: Mapping[str, Any]) -> bool:
    """Return True when the org is connected (or unknown) or the scratch org is active."""
    return (
        auth.get("connectedStatus") in ("Connected", "Unknown")
        or auth.get("status") == "Active"
    )