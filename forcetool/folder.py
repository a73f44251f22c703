"""Folders and the foldered metadata (reports, dashboards, documents, email)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

FOLDER_QUERY = (
    "SELECT Id, Type, NamespacePrefix, DeveloperName from Folder "
    "Where Type in ('Dashboard', 'Document', 'Email', 'Report')"
)

Folders = dict[str, str]


def _qualified(name: str, namespace: Any) -> str:
    return name if namespace is None else f"{namespace}__{name}"


def build_folders(records: Iterable[Mapping[str, Any]]) -> dict[str, Folders]:
    """Group folder query records by type, mapping folder id to full name."""
    folders: dict[str, Folders] = {}
    for record in records:
        if record.get("DeveloperName") is None:
            continue
        name = _qualified(record["DeveloperName"], record.get("NamespacePrefix"))
        folders.setdefault(record["Type"], {})[record["Id"]] = name
    return folders


def metadata_query(metadata_type: str) -> str:
    """Return the query that lists items of a foldered metadata type."""
    if metadata_type == "Report":
        return "SELECT Id, OwnerId, DeveloperName, NamespacePrefix FROM Report"
    return (
        "SELECT Id, DeveloperName, Folder.DeveloperName, Folder.NamespacePrefix, "
        "NamespacePrefix FROM " + metadata_type
    )


def _folder_name(metadata_type: str, folders: Mapping[str, str], record: Mapping[str, Any]) -> str:
    if metadata_type == "Report":
        return folders.get(record.get("OwnerId") or "", "")
    folder = record.get("Folder")
    if not isinstance(folder, Mapping):
        return ""
    return _qualified(folder["DeveloperName"], folder.get("NamespacePrefix"))


def metadata_in_folders(
    metadata_type: str,
    folders: Mapping[str, str],
    records: Iterable[Mapping[str, Any]],
) -> list[str]:
    """List "*", every folder name, then "folder/item" for each item in a folder."""
    items = ["*", *folders.values()]
    for record in records:
        folder_name = _folder_name(metadata_type, folders, record)
        item_name = _qualified(record["DeveloperName"], record.get("NamespacePrefix"))
        if folder_name:
            items.append(f"{folder_name}/{item_name}")
    return items