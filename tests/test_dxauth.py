import json
import subprocess
from unittest import mock

import pytest

from forcetool.dxauth import (
    DxAuthError,
    choose_default_user,
    connection_is_usable,
    find_default_users,
    find_user_in_org_list,
    get_org_list,
    in_project_dir,
)

HUB = {
    "username": "hub@example.com",
    "alias": "hub",
    "isDefaultDevHubUsername": True,
    "defaultMarker": "(D)",
    "connectedStatus": "Connected",
}
SCRATCH = {
    "username": "scratch@example.com",
    "isDefaultUsername": True,
    "defaultMarker": "(U)",
    "status": "Active",
}
OTHER = {"username": "other@example.com", "alias": "other"}

ORG_LIST = {
    "status": 0,
    "result": {"nonScratchOrgs": [HUB, OTHER], "scratchOrgs": [SCRATCH]},
}


def test_find_user_by_username():
    assert find_user_in_org_list("scratch@example.com", ORG_LIST) == SCRATCH


def test_find_user_by_alias(capsys):
    assert find_user_in_org_list("other", ORG_LIST) == OTHER
    assert "other@example.com (other)" in capsys.readouterr().out


def test_find_user_missing_raises():
    with pytest.raises(DxAuthError, match="nobody"):
        find_user_in_org_list("nobody", ORG_LIST)


def test_find_default_users():
    users = find_default_users(ORG_LIST)
    assert sorted(u["username"] for u in users) == ["hub@example.com", "scratch@example.com"]


def test_find_default_users_none_raises():
    with pytest.raises(DxAuthError):
        find_default_users({"status": 0, "result": {"nonScratchOrgs": [OTHER]}})


def test_choose_default_user_depends_on_project():
    assert choose_default_user([HUB, SCRATCH], in_project=True) == SCRATCH
    assert choose_default_user([HUB, SCRATCH], in_project=False) == HUB


def test_choose_single_user_ignores_project():
    assert choose_default_user([HUB], in_project=True) == HUB


def test_choose_default_user_empty_raises():
    with pytest.raises(DxAuthError):
        choose_default_user([], in_project=False)


@pytest.mark.parametrize(
    "auth, usable",
    [
        ({"connectedStatus": "Connected"}, True),
        ({"connectedStatus": "Unknown"}, True),
        ({"status": "Active"}, True),
        ({"connectedStatus": "Expired"}, False),
        ({}, False),
    ],
)
def test_connection_is_usable(auth, usable):
    assert connection_is_usable(auth) is usable


def test_in_project_dir(tmp_path):
    assert in_project_dir(tmp_path) is False
    (tmp_path / ".sfdx").mkdir()
    assert in_project_dir(tmp_path) is True


def test_get_org_list_decodes_output():
    completed = subprocess.CompletedProcess(
        args=[], returncode=0, stdout=json.dumps(ORG_LIST), stderr=""
    )
    with mock.patch("forcetool.dxauth.subprocess.run", return_value=completed) as run:
        assert get_org_list() == ORG_LIST
    assert run.call_args.args[0] == ["sfdx", "force:org:list", "--json"]


def test_get_org_list_failure_raises():
    completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="{}", stderr="")
    with mock.patch("forcetool.dxauth.subprocess.run", return_value=completed):
        with pytest.raises(DxAuthError):
            get_org_list()


def test_get_org_list_missing_tool_raises():
    with mock.patch("forcetool.dxauth.subprocess.run", side_effect=FileNotFoundError("sfdx")):
        with pytest.raises(DxAuthError, match="sfdx"):
            get_org_list()