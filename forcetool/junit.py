"""Data structures for writing JUnit test reports as XML."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&#34;",
    "'": "&#39;",
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
}


def _escape(value: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def _cdata(value: str) -> str:
    if not value:
        return ""
    return "<![CDATA[" + value.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _format_float(value: float) -> str:
    value = float(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _format_timestamp(value: datetime) -> str:
    text = value.isoformat()
    offset = value.utcoffset()
    if offset is not None and not offset:
        text = text.replace("+00:00", "Z")
    return text


def _attributes(pairs: list[tuple[str, str]]) -> str:
    return "".join(f' {name}="{_escape(value)}"' for name, value in pairs)


@dataclass
class Property:
    """A name/value pair attached to a test suite."""

    name: str
    value: str

    def _xml(self) -> str:
        attrs = _attributes([("name", self.name), ("value", self.value)])
        return f"<property{attrs}></property>"


@dataclass
class _Outcome:
    message: str = ""
    type: str = ""
    value: str = ""

    _tag: ClassVar[str] = ""

    def _xml(self) -> str:
        pairs = []
        if self.message:
            pairs.append(("message", self.message))
        pairs.append(("type", self.type))
        return f"<{self._tag}{_attributes(pairs)}>{_cdata(self.value)}</{self._tag}>"


@dataclass
class JUnitError(_Outcome):
    """An error recorded for a test case."""

    _tag: ClassVar[str] = "error"


@dataclass
class Failure(_Outcome):
    """A failure recorded for a test case."""

    _tag: ClassVar[str] = "failure"


@dataclass
class TestCase:
    """A single test case within a suite."""

    __test__ = False

    name: str
    classname: str
    status: str = ""
    assertions: int = 0
    time: float = 0.0
    skipped: str = ""
    errors: list[JUnitError] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)

    def _xml(self) -> str:
        pairs = [("name", self.name), ("classname", self.classname)]
        if self.status:
            pairs.append(("status", self.status))
        if self.assertions:
            pairs.append(("assertions", str(self.assertions)))
        pairs.append(("time", _format_float(self.time)))
        parts = []
        if self.skipped:
            parts.append(f"<skipped>{_escape(self.skipped)}</skipped>")
        parts.extend(error._xml() for error in self.errors)
        parts.extend(failure._xml() for failure in self.failures)
        return f"<testcase{_attributes(pairs)}>{''.join(parts)}</testcase>"


@dataclass
class TestSuite:
    """A top-level suite of test cases."""

    __test__ = False

    name: str
    tests: int = 0
    disabled: int = 0
    errors: int = 0
    failures: int = 0
    skipped: int = 0
    time: float = 0.0
    timestamp: datetime = _ZERO_TIME
    id: int = 0
    package: str = ""
    hostname: str = ""
    properties: list[Property] = field(default_factory=list)
    test_cases: list[TestCase] = field(default_factory=list)
    system_out: str = ""
    system_err: str = ""

    def update(self) -> None:
        """Recount tests and add the cases' errors, failures and skips to the totals."""
        self.tests = len(self.test_cases)
        for case in self.test_cases:
            self.errors += len(case.errors)
            self.failures += len(case.failures)
            if case.skipped:
                self.skipped += 1

    def to_xml(self) -> str:
        """Render the suite as a JUnit XML document."""
        pairs = [("name", self.name), ("tests", str(self.tests))]
        if self.disabled:
            pairs.append(("disabled", str(self.disabled)))
        pairs += [("errors", str(self.errors)), ("failures", str(self.failures))]
        if self.skipped:
            pairs.append(("skipped", str(self.skipped)))
        pairs += [
            ("time", _format_float(self.time)),
            ("timestamp", _format_timestamp(self.timestamp)),
        ]
        if self.id:
            pairs.append(("id", str(self.id)))
        if self.package:
            pairs.append(("package", self.package))
        pairs.append(("hostname", self.hostname))

        parts = []
        if self.properties:
            inner = "".join(prop._xml() for prop in self.properties)
            parts.append(f"<properties>{inner}</properties>")
        parts.extend(case._xml() for case in self.test_cases)
        if self.system_out:
            parts.append(f"<system-out>{_escape(self.system_out)}</system-out>")
        if self.system_err:
            parts.append(f"<system-err>{_escape(self.system_err)}</system-err>")
        return f"<testsuite{_attributes(pairs)}>{''.join(parts)}</testsuite>"