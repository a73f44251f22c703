"""Bulk API job and batch descriptions, and parsing of bulk API responses."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, BinaryIO
import xml.etree.ElementTree as ET

from .httpaux import ContentType
from .internal import MarshalError, json_unmarshal, xml_marshal, xml_unmarshal

BULK_NAMESPACE = "http://www.force.com/2009/06/asyncapi/dataload"
DEFAULT_CHUNK_SIZE = 50 * 1024 * 1024


class JobContentType(str, Enum):
    """Content types a bulk job can use."""

    CSV = "CSV"
    XML = "XML"
    JSON = "JSON"


_HTTP_CONTENT_TYPES = {
    JobContentType.CSV: ContentType.CSV,
    JobContentType.XML: ContentType.XML,
    JobContentType.JSON: ContentType.JSON,
}


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _parse_int(text: str | None, tag: str) -> int:
    value = (text or "").strip()
    try:
        return int(value)
    except ValueError as err:
        raise MarshalError(f"error unmarshaling xml: invalid integer {value!r} in <{tag}>") from err


def _values_from_element(element: ET.Element, wire_names: Mapping[str, str],
                         int_fields: set[str]) -> dict[str, Any]:
    by_tag = {tag: attr for attr, tag in wire_names.items()}
    values: dict[str, Any] = {}
    for child in element:
        tag = _local_name(child.tag)
        attr = by_tag.get(tag)
        if attr is None:
            continue
        values[attr] = _parse_int(child.text, tag) if attr in int_fields else (child.text or "")
    return values


def _values_from_mapping(obj: Mapping[str, Any], wire_names: Mapping[str, str],
                         int_fields: set[str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for attr, key in wire_names.items():
        if key not in obj or obj[key] is None:
            continue
        value = obj[key]
        values[attr] = int(value) if attr in int_fields else str(value)
    return values


def _int_fields(cls: type) -> set[str]:
    return {f.name for f in fields(cls) if f.type in ("int", int)}


@dataclass
class JobInfo:
    """A bulk API job."""

    id: str = ""
    operation: str = ""
    object: str = ""
    external_id_field_name: str = ""
    created_by_id: str = ""
    created_date: str = ""
    system_mod_stamp: str = ""
    state: str = ""
    concurrency_mode: str = ""
    content_type: str = ""
    number_batches_queued: int = 0
    number_batches_in_progress: int = 0
    number_batches_completed: int = 0
    number_batches_failed: int = 0
    number_batches_total: int = 0
    number_records_processed: int = 0
    number_retries: int = 0
    api_version: str = ""
    number_records_failed: int = 0
    total_processing_time: int = 0
    api_active_processing_time: int = 0
    apex_processing_time: int = 0

    def job_content_type(self) -> JobContentType:
        """Return the job's content type, raising ValueError when it is not one the bulk API knows."""
        try:
            return JobContentType(self.content_type)
        except ValueError:
            raise ValueError("Invalid content type for bulk API: " + self.content_type) from None

    def http_content_type(self) -> ContentType:
        """Return the HTTP content type matching the job's content type."""
        return _HTTP_CONTENT_TYPES[self.job_content_type()]

    def to_xml(self) -> bytes:
        """Encode the job as a jobInfo request document, leaving out empty fields."""
        root = ET.Element("jobInfo", {"xmlns": BULK_NAMESPACE})
        for attr, tag in _JOB_WIRE_NAMES.items():
            value = getattr(self, attr)
            if value:
                ET.SubElement(root, tag).text = str(value)
        return xml_marshal(root)

    @classmethod
    def from_xml(cls, data: bytes | str) -> JobInfo:
        """Decode a jobInfo document."""
        root = xml_unmarshal(data)
        name = _local_name(root.tag)
        if name != "jobInfo":
            raise MarshalError(f"expected element type <jobInfo> but have <{name}>")
        return cls._from_element(root)

    @classmethod
    def _from_element(cls, element: ET.Element) -> JobInfo:
        return cls(**_values_from_element(element, _JOB_WIRE_NAMES, _int_fields(cls)))


_JOB_WIRE_NAMES = {
    "id": "id",
    "operation": "operation",
    "object": "object",
    "external_id_field_name": "externalIdFieldName",
    "created_by_id": "createdById",
    "created_date": "createdDate",
    "system_mod_stamp": "systemModstamp",
    "state": "state",
    "concurrency_mode": "concurrencyMode",
    "content_type": "contentType",
    "number_batches_queued": "numberBatchesQueued",
    "number_batches_in_progress": "numberBatchesInProgress",
    "number_batches_completed": "numberBatchesCompleted",
    "number_batches_failed": "numberBatchesFailed",
    "number_batches_total": "numberBatchesTotal",
    "number_records_processed": "numberRecordsProcessed",
    "number_retries": "numberRetries",
    "api_version": "apiVersion",
    "number_records_failed": "numberRecordsFailed",
    "total_processing_time": "totalProcessingTime",
    "api_active_processing_time": "apiActiveProcessingTime",
    "apex_processing_time": "apexProcessingTime",
}


@dataclass
class BatchInfo:
    """A batch within a bulk API job."""

    id: str = ""
    job_id: str = ""
    state: str = ""
    state_message: str = ""
    created_date: str = ""
    system_modstamp: str = ""
    number_records_processed: int = 0
    number_records_failed: int = 0

    @classmethod
    def from_xml(cls, data: bytes | str) -> BatchInfo:
        """Decode a batchInfo document."""
        return cls._from_element(xml_unmarshal(data))

    @classmethod
    def from_json(cls, data: bytes | str) -> BatchInfo:
        """Decode a batch described as a JSON object."""
        obj = json_unmarshal(data)
        if not isinstance(obj, Mapping):
            raise MarshalError(
                f"error unmarshaling json: cannot unmarshal {type(obj).__name__} into BatchInfo"
            )
        return cls._from_mapping(obj)

    @classmethod
    def _from_element(cls, element: ET.Element) -> BatchInfo:
        return cls(**_values_from_element(element, _BATCH_WIRE_NAMES, _int_fields(cls)))

    @classmethod
    def _from_mapping(cls, obj: Mapping[str, Any]) -> BatchInfo:
        return cls(**_values_from_mapping(obj, _BATCH_WIRE_NAMES, _int_fields(cls)))


_BATCH_WIRE_NAMES = {
    "id": "id",
    "job_id": "jobId",
    "state": "state",
    "state_message": "stateMessage",
    "created_date": "createdDate",
    "system_modstamp": "systemModstamp",
    "number_records_processed": "numberRecordsProcessed",
    "number_records_failed": "numberRecordsFailed",
}


@dataclass
class BatchResultChunk:
    """A piece of a batch result body."""

    has_csv_header: bool
    data: bytes


def _is_json(content_type: Any) -> bool:
    value = content_type.value if isinstance(content_type, Enum) else content_type
    return value in (ContentType.JSON.value, JobContentType.JSON.value)


def parse_batch_info(data: bytes | str, content_type: Any) -> BatchInfo:
    """Decode one batch, as JSON when content_type is JSON and as XML otherwise."""
    if _is_json(content_type):
        return BatchInfo.from_json(data)
    return BatchInfo.from_xml(data)


def parse_batch_list(data: bytes | str, content_type: Any) -> list[BatchInfo]:
    """Decode a list of batches, as JSON when content_type is JSON and as XML otherwise."""
    if _is_json(content_type):
        obj = json_unmarshal(data)
        if not isinstance(obj, Mapping):
            raise MarshalError(
                f"error unmarshaling json: cannot unmarshal {type(obj).__name__} into batch list"
            )
        return [BatchInfo._from_mapping(item) for item in obj.get("batchInfo") or []]
    root = xml_unmarshal(data)
    return [
        BatchInfo._from_element(child)
        for child in root
        if _local_name(child.tag) == "batchInfo"
    ]


def parse_job_list(data: bytes | str) -> list[JobInfo]:
    """Decode a list of jobs; a single jobInfo document yields one job."""
    root = xml_unmarshal(data)
    if _local_name(root.tag) == "jobInfo":
        return [JobInfo._from_element(root)]
    return [JobInfo._from_element(child) for child in root if _local_name(child.tag) == "jobInfo"]


def bulk_url(instance_url: str, api_version: str, *args: str) -> str:
    """Build an asynchronous API URL from path segments."""
    return f"{instance_url}/services/async/{api_version}/" + "/".join(args)


def _read_full(stream: BinaryIO, size: int) -> bytes:
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        piece = stream.read(remaining)
        if not piece:
            break
        parts.append(piece)
        remaining -= len(piece)
    return b"".join(parts)


def iter_batch_result_chunks(stream: BinaryIO, content_type: str | None,
                             buffer_size: int = 0) -> Iterator[BatchResultChunk]:
    """Yield a result body in chunks of buffer_size bytes (50 MiB when buffer_size <= 1).

    Only the first chunk of a CSV body is marked as carrying the header row.
    """
    if buffer_size <= 1:
        buffer_size = DEFAULT_CHUNK_SIZE
    is_csv = "text/csv" in (content_type or "")
    first = True
    while True:
        data = _read_full(stream, buffer_size)
        if data:
            yield BatchResultChunk(has_csv_header=first and is_csv, data=data)
        if len(data) < buffer_size:
            return
        first = False