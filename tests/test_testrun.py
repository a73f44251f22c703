import re

import pytest

from forcetool.testrun import (
    TestCoverage as Coverage,
    TestsNotFoundError as NotFound,
    generate_results,
    normalize_test_names,
    qualify_methods,
    run_tests,
)


class StubRunner:
    def __init__(self):
        self.calls = []

    def run_tests(self, tests, namespace):
        self.calls.append((tests, namespace))
        if tests[0] == "NoSuchTest":
            return Coverage(number_run=0, number_failures=0)
        if tests[0] == "Success":
            return Coverage(number_run=1, number_failures=0)
        return Coverage(number_run=1, number_failures=1)


@pytest.fixture
def stub():
    return StubRunner()


def test_run_tests_errors_when_nothing_ran(stub):
    with pytest.raises(NotFound, match="NoSuchTest"):
        run_tests(stub, ["NoSuchTest"], "")


def test_run_tests_succeeds_when_tests_pass(stub):
    result = run_tests(stub, ["Success"], "")
    assert result.number_run == 1
    assert result.number_failures == 0


def test_run_tests_succeeds_when_tests_fail(stub):
    result = run_tests(stub, ["Fail"], "ns")
    assert result.number_failures == 1
    assert stub.calls == [(["Fail"], "ns")]


def test_qualify_methods_prepends_class():
    assert qualify_methods("MyClass", ["method1", "method2"]) == [
        "MyClass.method1",
        "MyClass.method2",
    ]


def test_qualify_methods_without_methods_returns_class():
    assert qualify_methods("MyClass", []) == ["MyClass"]


def test_normalize_replaces_first_separator_only():
    assert normalize_test_names(["A::b", "C.d", "E::f::g"]) == ["A.b", "C.d", "E.f::g"]


@pytest.fixture
def results():
    return Coverage(
        number_run=5,
        number_failures=2,
        number_locations=[1, 1, 1, 1, 1],
        number_locations_not_covered=[0, 0, 1, 0, 1],
        name=["Test1", "Test2", "Test3", "Test4", "Test5"],
    )


def test_generate_results_ignores_zero_coverage(results):
    output = generate_results(results)
    assert not re.search(r"\D0%", output)
    assert "Test3" not in output
    assert "Test1" in output


def test_generate_results_lists_passes_and_failures():
    coverage = Coverage(
        s_class_names=["Good"],
        s_method_names=["works"],
        f_class_names=["Bad"],
        f_method_names=["breaks"],
        f_message=["boom"],
        f_stack_trace=["line 3"],
    )
    output = generate_results(coverage)
    assert "  [PASS]  Good::works" in output.splitlines()
    assert "  [FAIL]  Bad::breaks: boom" in output.splitlines()
    assert "    line 3" in output.splitlines()
    assert output.startswith("Coverage:\n")
    assert output.endswith("\n\n")