"""Decoding and encoding helpers that report readable errors."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

_PREVIEW_LENGTH = 10


class MarshalError(ValueError):
    """Raised when a body cannot be decoded or an element cannot be encoded."""


def _as_text(data: bytes | bytearray | str) -> str:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8", errors="replace")
    return data


def _preview(text: str) -> str:
    return text[:_PREVIEW_LENGTH]


def _describe_json_error(err: json.JSONDecodeError, text: str) -> str:
    if err.msg == "Expecting value":
        if err.pos >= len(text):
            return "unexpected end of JSON input"
        return f"invalid character '{text[err.pos]}' looking for beginning of value"
    return str(err)


def json_unmarshal(data: bytes | str) -> Any:
    """Decode a JSON body, raising MarshalError with a preview of the input."""
    text = _as_text(data)
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        raise MarshalError(
            f"error unmarshaling json: {_describe_json_error(err, text)}. "
            f"first {_PREVIEW_LENGTH} characters: {_preview(text)}"
        ) from err


def xml_unmarshal(data: bytes | str) -> ET.Element:
    """Parse an XML body into an element, raising MarshalError on failure."""
    text = _as_text(data)
    try:
        return ET.fromstring(data)
    except ET.ParseError as err:
        reason = "EOF" if "<" not in text else str(err)
        raise MarshalError(
            f"error unmarshaling xml: {reason}. "
            f"first {_PREVIEW_LENGTH} characters: {_preview(text)}"
        ) from err


def _value_summary(value: Any) -> str:
    return "" if value is None else str(value)


def _element_summary(element: ET.Element) -> str:
    children = list(element)
    if children:
        values = " ".join(_value_summary(child.text) for child in children)
    else:
        values = _value_summary(element.text)
    return "{" + values + "}"


def xml_marshal(element: ET.Element) -> bytes:
    """Serialise an element to UTF-8 XML without a declaration."""
    try:
        return ET.tostring(element, encoding="unicode").encode("utf-8")
    except (TypeError, ValueError) as err:
        summary = f"{element.tag}({_preview(_element_summary(element))}...)"
        raise MarshalError(
            f"error marshaling xml: {err}. object summary: {summary}"
        ) from err