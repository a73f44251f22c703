"""Rendering records, metadata descriptions and bulk job details as text."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from .bulk import BatchInfo, JobInfo


class _Null:
    """Marker for a field whose value is null in a query result."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NULL"


NULL = _Null()


class _SubRecords(list):
    """Flattened child records of a relationship subquery."""


_NULL_TEXT = "(null)"

_BATCH_INFO_TEMPLATE = (
    "\n"
    "Id \t\t\t%s\n"
    "JobId \t\t\t%s\n"
    "State \t\t\t%s\n"
    "StateMessage\t\t%s\n"
    "CreatedDate \t\t%s\n"
    "SystemModstamp \t\t%s\n"
    "NumberRecordsProcessed  %d\n"
)

_JOB_INFO_TEMPLATE = (
    "\n"
    "Id\t\t\t\t%s\n"
    "State \t\t\t\t%s\n"
    "Operation\t\t\t%s\n"
    "Object \t\t\t\t%s\n"
    "Api Version \t\t\t%s\n"
    "\n"
    "Created By Id \t\t\t%s\n"
    "Created Date \t\t\t%s\n"
    "System Mod Stamp\t\t%s\n"
    "Content Type \t\t\t%s\n"
    "Concurrency Mode \t\t%s\n"
    "\n"
    "Number Batches Queued \t\t%d\n"
    "Number Batches In Progress\t%d\n"
    "Number Batches Completed \t%d\n"
    "Number Batches Failed \t\t%d\n"
    "Number Batches Total \t\t%d\n"
    "Number Records Processed \t%d\n"
    "Number Retries \t\t\t%d\n"
    "\n"
    "Number Records Failed \t\t%d\n"
    "Total Processing Time \t\t%d\n"
    "Api Active Processing Time \t%d\n"
    "Apex Processing Time \t\t%d\n"
)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    point = len(digits) + exponent
    exp = point - 1
    prefix = "-" if sign else ""
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'-' if exp < 0 else '+'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return prefix + digits + "0" * (point - len(digits))
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _go_value(value: Any) -> str:
    """Render a value the way the default text verb does for decoded JSON."""
    if value is NULL:
        return "{}"
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        inner = " ".join(f"{key}:{_go_value(value[key])}" for key in sorted(value))
        return f"map[{inner}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_go_value(item) for item in value) + "]"
    return str(value)


def flatten_force_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a record: drop "attributes", join nested fields with dots.

    Null values become NULL and relationship subqueries become lists of
    flattened child records.
    """
    flattened: dict[str, Any] = {}
    for key, value in record.items():
        if key == "attributes":
            continue
        if value is None:
            flattened[key] = NULL
        elif isinstance(value, Mapping):
            children = value.get("records")
            if children is not None:
                flattened[key] = _SubRecords(flatten_force_record(child) for child in children)
            else:
                for sub_key, sub_value in flatten_force_record(value).items():
                    flattened[f"{key}.{sub_key}"] = sub_value
        else:
            flattened[key] = value
    return flattened


def _record_columns(records: Iterable[Mapping[str, Any]]) -> list[str]:
    columns: list[str] = []
    seen: set[str] = set()
    for record in records:
        for key in sorted(record):
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def _column_lengths(records: list[Mapping[str, Any]], prefix: str) -> dict[str, int]:
    lengths = {f"{prefix}.{column}": len(column) + 2 for column in _record_columns(records)}
    for record in records:
        for column, value in record.items():
            key = f"{prefix}.{column}"
            if isinstance(value, _SubRecords):
                nested = _column_lengths(value, key)
                for nested_key, nested_length in nested.items():
                    if nested_length > lengths.get(nested_key, 0):
                        lengths[nested_key] = nested_length
                length = sum(nested.values()) + len(nested) - 1
            elif value is None or value is NULL:
                length = len(f" {_NULL_TEXT} ")
            else:
                length = len(f" {_go_value(value)} ")
            if length > lengths.get(key, 0):
                lengths[key] = length
    return lengths


def _cell(text: str, width: int) -> str:
    return " " + text.ljust(width - 2) + " "


def _record_header(columns: list[str], lengths: dict[str, int], prefix: str) -> str:
    return "|".join(_cell(column, lengths[f"{prefix}.{column}"]) for column in columns)


def _record_separator(columns: list[str], lengths: dict[str, int], prefix: str) -> str:
    return "+".join("-" * lengths[f"{prefix}.{column}"] for column in columns)


def _record_row(record: Mapping[str, Any], columns: list[str],
                lengths: dict[str, int], prefix: str) -> str:
    keys = [f"{prefix}.{column}" for column in columns]
    cells: list[list[str]] = []
    for column, key in zip(columns, keys):
        value = record.get(column)
        if isinstance(value, _SubRecords):
            text = _render(value, key, lengths).removesuffix("\n")
        elif value is NULL:
            text = _cell(_NULL_TEXT, lengths[key])
        elif value is None:
            text = _cell("", lengths[key])
        else:
            text = _cell(_go_value(value), lengths[key])
        cells.append(text.split("\n"))
    height = max([1, *(len(parts) for parts in cells)])
    rows = []
    for index in range(height):
        rows.append("|".join(
            parts[index].ljust(lengths[key]) if index < len(parts) else " " * lengths[key]
            for parts, key in zip(cells, keys)
        ))
    return "\n".join(rows)


def _has_sub_rows(records: Iterable[Mapping[str, Any]]) -> bool:
    return any(
        isinstance(value, _SubRecords) and len(value) > 0
        for record in records
        for value in record.values()
    )


def _render(records: list[Mapping[str, Any]], prefix: str, lengths: dict[str, int]) -> str:
    columns = _record_columns(records)
    separator = _record_separator(columns, lengths, prefix)
    lines = [_record_header(columns, lengths, prefix), separator]
    with_separators = _has_sub_rows(records)
    for record in records:
        lines.append(_record_row(record, columns, lengths, prefix))
        if with_separators:
            lines.append(separator)
    return "".join(line + "\n" for line in lines)


def render_force_records(records: Iterable[Mapping[str, Any]]) -> str:
    """Render query records as a text table, nesting subquery results."""
    flattened = [flatten_force_record(record) for record in records]
    return _render(flattened, "", _column_lengths(flattened, ""))


def _csv_field(value: Any) -> str:
    if value is NULL:
        return ""
    return _go_value(value).replace("<nil>", "").replace('"', '""')


def _csv_line(values: Iterable[str]) -> str:
    return '"' + '","'.join(values) + '"\n'


def render_records_csv(records: Iterable[Mapping[str, Any]]) -> str:
    """Render records as CSV; the columns are the sorted fields of the first record."""
    lines: list[str] = []
    keys: list[str] | None = None
    for record in records:
        flattened = flatten_force_record(record)
        if keys is None:
            keys = sorted(flattened)
            lines.append(_csv_line(keys))
        lines.append(_csv_line(_csv_field(flattened.get(key)) for key in keys))
    return "".join(lines)


_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_json(text: str) -> str:
    return "".join(_JSON_ESCAPES.get(ch, ch) for ch in text)


def render_records_json(records: Iterable[Mapping[str, Any]], pretty: bool = False) -> str:
    """Render each record as one JSON document per line (indented when pretty)."""
    out = []
    for record in records:
        if pretty:
            text = json.dumps(record, indent=2, sort_keys=True, ensure_ascii=False,
                              separators=(",", ": "))
        else:
            text = json.dumps(record, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
        out.append(_escape_json(text) + "\n")
    return "".join(out)


def format_query_result(records: Iterable[Mapping[str, Any]], total_size: int) -> str:
    """Render a page of query results followed by the record count."""
    records = list(records)
    table = render_force_records(records) if records else ""
    return f"{table} ({total_size} records)\n"


def format_interface_map(obj: Mapping[str, Any], indent: int = 0) -> str:
    """Render a nested mapping as indented "key: value" lines in key order."""
    pad = "  " * indent
    lines = []
    for key in sorted(obj):
        value = obj[key]
        if isinstance(value, Mapping):
            lines.append(f"{pad}{key}: \n" + format_interface_map(value, indent + 1))
        else:
            lines.append(f"{pad}{key}: {_go_value(value)}\n")
    return "".join(lines)


def format_batch_info(batch_info: BatchInfo) -> str:
    """Describe a bulk batch."""
    return _BATCH_INFO_TEMPLATE % (
        batch_info.id,
        batch_info.job_id,
        batch_info.state,
        batch_info.state_message,
        batch_info.created_date,
        batch_info.system_modstamp,
        batch_info.number_records_processed,
    )


def format_job_info(job_info: JobInfo) -> str:
    """Describe a bulk job."""
    return _JOB_INFO_TEMPLATE % (
        job_info.id,
        job_info.state,
        job_info.operation,
        job_info.object,
        job_info.api_version,
        job_info.created_by_id,
        job_info.created_date,
        job_info.system_mod_stamp,
        job_info.content_type,
        job_info.concurrency_mode,
        job_info.number_batches_queued,
        job_info.number_batches_in_progress,
        job_info.number_batches_completed,
        job_info.number_batches_failed,
        job_info.number_batches_total,
        job_info.number_records_processed,
        job_info.number_retries,
        job_info.number_records_failed,
        job_info.total_processing_time,
        job_info.api_active_processing_time,
        job_info.apex_processing_time,
    )


def format_metadata_list(metadata_objects: Iterable[Mapping[str, Any]]) -> str:
    """List metadata types by XML name with their directories and child types."""
    lines = []
    for obj in sorted(metadata_objects, key=lambda item: item.get("xmlName", "")):
        lines.append(f"{obj.get('xmlName', '')} ==> {obj.get('directoryName', '')}\n")
        lines.extend(f"\t{child}\n" for child in sorted(obj.get("childXmlNames") or []))
    return "".join(lines)


def format_list_metadata(results: Iterable[Mapping[str, Any]]) -> str:
    """List metadata components as "fullName - type", ordered by full name."""
    ordered = sorted(results, key=lambda item: item.get("fullName", ""))
    return "".join(f"{item.get('fullName', '')} - {item.get('type', '')}\n" for item in ordered)


def format_sobject_names(sobjects: Iterable[Mapping[str, Any]]) -> str:
    """List the names of sobjects in sorted order, one per line."""
    return "".join(f"{name}\n" for name in sorted(sobject["name"] for sobject in sobjects))


def format_sobject(sobject: Mapping[str, Any]) -> str:
    """Describe an sobject's fields, with picklist values and reference targets."""
    lines = []
    for field in sorted(sobject["fields"], key=lambda item: item.get("name", "")):
        name, field_type = field.get("name"), field.get("type")
        if field_type in ("picklist", "multipicklist"):
            values = ", ".join(entry["value"] for entry in field.get("picklistValues") or [])
            lines.append(f"{name}: {field_type} ({values})\n")
        elif field_type == "reference":
            refs = ", ".join(field.get("referenceTo") or [])
            lines.append(f"{name}: {field_type} ({refs})\n")
        else:
            lines.append(f"{name}: {field_type}\n")
    return "".join(lines)


_FIELD_TYPES_HELP = """
\tFIELD\t\t\t\t\t\t\t\t\t DEFAULTS
\t=========================================================================
  text/string            (length = 255)
  textarea               (length = 255)
  longtextarea           (length = 32768, visibleLines = 5)
  richtextarea           (length = 32768, visibleLines = 5)
  checkbox/bool/boolean  (defaultValue = false)
  datetime               ()
  email                  ()
  url                    ()
  float/double/currency  (precision = 16, scale = 2)
  number/int             (precision = 18, scale = 0)
  autonumber             (displayFormat = "AN {00000}", startingNumber = 0)
  geolocation            (displayLocationInDecimal = true, scale = 5)
  lookup                 (will be prompted for Object and label)
  masterdetail           (will be prompted for Object and label)
  picklist               ()

  *To create a formula field add a formula argument to the command.
  force field create <objectname> <fieldName>:text formula:'LOWER("HEY MAN")'
  """


def field_types_help() -> str:
    """Return the overview of field types and their defaults."""
    return _FIELD_TYPES_HELP + "\n"


_REQUIRED = "\x1b[31;1mrequired attributes\x1b[0m"
_OPTIONAL = "\x1b[31;1moptional attributes\x1b[0m"

_TEXT = """
  Allows users to enter any combination of letters and numbers.

    %s
      label            - defaults to name
      length           - defaults to 255
      name

    %s
      description
      helptext
      required         - defaults to false
      unique           - defaults to false
      caseSensistive   - defaults to false
      externalId       - defaults to false
      defaultValue
      formula          - defaultValue must be blask
      formulaTreatBlanksAs  - defaults to "BlankAsZero"
"""

_PICKLIST = """
   List of options to coose from

    %s
     label            - defaults to name
     name

    %s
     description
     helptext
     required         - defaults to false
     defaultValue
     picklist         - comma separated list of values
    """

_TEXTAREA = """
  Allows users to enter up to 255 characters on separate lines.

    %s
      label            - defaults to name
      name

    %s
      description
      helptext
      required         - defaults to false
      defaultValue
"""

_LONG_TEXTAREA = """
  Allows users to enter up to 32,768 characters on separate lines.

    %s
      label            - defaults to name
      length           - defaults to 32,768
      name
      visibleLines     - defaults to 3

    %s
      description
      helptext
      defaultValue
"""

_RICH_TEXTAREA = """
  Allows users to enter formatted text, add images and links. Up to 32,768 characters on separate lines.

    %s
      label            - defaults to name
      length           - defaults to 32,768
      name
      visibleLines     - defaults to 25

    %s
      description
      helptext
"""

_CHECKBOX = """
  Allows users to select a True (checked) or False (unchecked) value.

    %s
      label            - defaults to name
      name

    %s
      description
      helptext
      defaultValue     - defaults to unchecked or false
      formula          - defaultValue must be blask
      formulaTreatBlanksAs  - defaults to "BlankAsZero"
"""

_DATETIME = """
  Allows users to enter a date and time.

    %s
      label            - defaults to name
      name

    %s
      description
      helptext
      defaultValue
      required         - defaults to false
      formula          - defaultValue must be blask
      formulaTreatBlanksAs  - defaults to "BlankAsZero"
"""

_DOUBLE = """
  Allows users to enter any number. Leading zeros are removed.

    %s
      label            - defaults to name
      name
      precision        - digits left of decimal (defaults to 18)
      scale            - decimal places (defaults to 0)

    %s
      description
      helptext
      required         - defaults to false
      unique           - defaults to false
      externalId       - defaults to false
      defaultValue
      formula          - defaultValue must be blask
      formulaTreatBlanksAs  - defaults to "BlankAsZero"
"""

_CURRENCY = """
  Allows users to enter a dollar or other currency amount and automatically formats the field as a currency amount.

    %s
      label            - defaults to name
      name
      precision        - digits left of decimal (defaults to 18)
      scale            - decimal places (defaults to 0)

    %s
      description
      helptext
      required         - defaults to false
      defaultValue
      formula          - defaultValue must be blask
      formulaTreatBlanksAs  - defaults to "BlankAsZero"
"""

_AUTONUMBER = """
  A system-generated sequence number that uses a display format you define. The number is automatically incremented for each new record.

    %s
      label            - defaults to name
      name
      displayFormat    - defaults to "AN-{00000}"
      startingNumber   - defaults to 0

    %s
      description
      helptext
      externalId       - defaults to false
"""

_GEOLOCATION = """
   Allows users to define locations.

    %s
      label                       - defaults to name
      name
      DisplayLocationInDecimal    - defaults false
      scale                       - defaults to 5 (number of decimals to the right)

    %s
      description
      helptext
      required                    - defaults to false
"""

_LOOKUP = """
   Creates a relationship that links this object to another object.

    %s
      label            - defaults to name
      name
      referenceTo      - Name of related object
      relationshipName - defaults to referenceTo value

    %s
      description
      helptext
      required         - defaults to false
      relationShipLabel
"""

_MASTER_DETAIL = """
   Creates a special type of parent-child relationship between this object (the child, or "detail") and another object (the parent, or "master") where:
     The relationship field is required on all detail records.
     The ownership and sharing of a detail record are determined by the master record.
     When a user deletes the master record, all detail records are deleted.
     You can create rollup summary fields on the master record to summarize the detail records.

    %s
      label            - defaults to name
      name
      referenceTo      - Name of related object
      relationshipName - defaults to referenceTo value

    %s
      description
      helptext
      required         - defaults to false
      relationShipLabel
"""

_FIELD_DETAILS = {
    "picklist": _PICKLIST,
    "text": _TEXT,
    "string": _TEXT,
    "textarea": _TEXTAREA,
    "longtextarea": _LONG_TEXTAREA,
    "richtextarea": _RICH_TEXTAREA,
    "checkbox": _CHECKBOX,
    "bool": _CHECKBOX,
    "boolean": _CHECKBOX,
    "datetime": _DATETIME,
    "float": _DOUBLE,
    "double": _DOUBLE,
    "currency": _CURRENCY,
    "number": _DOUBLE,
    "int": _DOUBLE,
    "autonumber": _AUTONUMBER,
    "geolocation": _GEOLOCATION,
    "lookup": _LOOKUP,
    "masterdetail": _MASTER_DETAIL,
}

_UNKNOWN_FIELD_TYPE = """
  Sorry, that is not a valid field type.
"""


def field_details(field_type: str) -> str:
    """Return the help text describing the attributes of a field type."""
    template = _FIELD_DETAILS.get(field_type)
    message = _UNKNOWN_FIELD_TYPE if template is None else template % (_REQUIRED, _OPTIONAL)
    return message + "\n"