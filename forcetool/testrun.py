"""Running Apex tests and summarising their results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol


class TestsNotFoundError(LookupError):
    """None of the requested test classes could be found."""

    __test__ = False


@dataclass
class TestCoverage:
    """Results and code coverage of a test run."""

    __test__ = False

    number_run: int = 0
    number_failures: int = 0
    number_locations: list[int] = field(default_factory=list)
    number_locations_not_covered: list[int] = field(default_factory=list)
    name: list[str] = field(default_factory=list)
    s_method_names: list[str] = field(default_factory=list)
    s_class_names: list[str] = field(default_factory=list)
    f_method_names: list[str] = field(default_factory=list)
    f_class_names: list[str] = field(default_factory=list)
    f_message: list[str] = field(default_factory=list)
    f_stack_trace: list[str] = field(default_factory=list)
    log: str = ""


class TestRunner(Protocol):
    """Anything able to run tests in a namespace."""

    __test__ = False

    def run_tests(self, tests: list[str], namespace: str) -> TestCoverage: ...


def run_tests(runner: TestRunner, tests: Sequence[str], namespace: str = "") -> TestCoverage:
    """Run tests with runner; raise TestsNotFoundError when nothing ran or failed."""
    tests = list(tests)
    output = runner.run_tests(tests, namespace)
    if output.number_run == 0 and output.number_failures == 0:
        raise TestsNotFoundError(f"Test classes specified not found: [{' '.join(tests)}]")
    return output


def qualify_methods(cls: str, methods: Iterable[str]) -> list[str]:
    """Prefix each method with the class name; with no methods, return the class."""
    qualified = [f"{cls}.{method}" for method in methods]
    return qualified or [cls]


def normalize_test_names(names: Iterable[str]) -> list[str]:
    """Turn "Class::method" into "Class.method" (first separator only)."""
    return [name.replace("::", ".", 1) for name in names]


def generate_results(coverage: TestCoverage) -> str:
    """Render the coverage table and pass/fail lines of a test run."""
    lines = ["Coverage:", ""]
    percent = 0
    for locations, not_covered, name in zip(
        coverage.number_locations, coverage.number_locations_not_covered, coverage.name
    ):
        # A class with no locations keeps the previous percentage, as before.
        if locations != 0:
            percent = int((float(locations) - float(not_covered)) / float(locations) * 100)
        if percent > 0:
            lines.append(f"{percent:6d}%  {name}")
    lines += ["", "", "Results:", ""]
    for class_name, method in zip(coverage.s_class_names, coverage.s_method_names):
        lines.append(f"  [PASS]  {class_name}::{method}")
    for class_name, method, message, trace in zip(
        coverage.f_class_names,
        coverage.f_method_names,
        coverage.f_message,
        coverage.f_stack_trace,
    ):
        lines.append(f"  [FAIL]  {class_name}::{method}: {message}")
        lines.append(f"    {trace}")
    lines += ["", ""]
    return "\n".join(lines)