import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from forcetool.junit import Failure, JUnitError, Property, TestCase, TestSuite


def _suite():
    return TestSuite(
        name="apex",
        test_cases=[
            TestCase(name="ok", classname="A"),
            TestCase(name="bad", classname="A", failures=[Failure(message="m", type="t")]),
            TestCase(
                name="err",
                classname="B",
                errors=[JUnitError(type="x"), JUnitError(type="y")],
                skipped="later",
            ),
        ],
    )


def test_update_counts_cases():
    suite = _suite()
    suite.update()
    assert suite.tests == len(suite.test_cases)
    assert suite.failures == 1
    assert suite.errors == 2
    assert suite.skipped == 1


def test_update_accumulates_totals():
    suite = _suite()
    suite.update()
    first = (suite.errors, suite.failures, suite.skipped)
    suite.update()
    assert (suite.errors, suite.failures, suite.skipped) == tuple(2 * n for n in first)
    assert suite.tests == len(suite.test_cases)


def test_to_xml_round_trip_attributes():
    suite = _suite()
    suite.hostname = "host"
    suite.update()
    root = ET.fromstring(suite.to_xml())
    assert root.tag == "testsuite"
    assert root.get("name") == "apex"
    assert root.get("hostname") == "host"
    assert int(root.get("tests")) == suite.tests
    assert int(root.get("failures")) == suite.failures
    assert [case.get("name") for case in root.findall("testcase")] == ["ok", "bad", "err"]


def test_to_xml_omits_empty_optional_attributes():
    root = ET.fromstring(TestSuite(name="s").to_xml())
    for name in ("disabled", "skipped", "id", "package"):
        assert name not in root.attrib
    assert root.find("properties") is None
    assert root.find("system-out") is None


def test_to_xml_zero_timestamp():
    root = ET.fromstring(TestSuite(name="s").to_xml())
    assert root.get("timestamp") == "0001-01-01T00:00:00Z"


def test_to_xml_utc_timestamp_round_trip():
    stamp = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    root = ET.fromstring(TestSuite(name="s", timestamp=stamp).to_xml())
    parsed = datetime.fromisoformat(root.get("timestamp").replace("Z", "+00:00"))
    assert parsed == stamp
    assert root.get("timestamp").endswith("Z")


def test_to_xml_time_formatting():
    root = ET.fromstring(TestSuite(name="s", time=1.5).to_xml())
    assert float(root.get("time")) == 1.5
    whole = ET.fromstring(TestSuite(name="s", time=2.0).to_xml())
    assert whole.get("time") == "2"


def test_to_xml_cdata_preserves_value():
    value = "line <1>\nend ]]> tail & more"
    case = TestCase(name="c", classname="K", failures=[Failure(type="t", value=value)])
    root = ET.fromstring(TestSuite(name="s", test_cases=[case]).to_xml())
    failure = root.find("testcase/failure")
    assert failure.text == value
    assert "message" not in failure.attrib


def test_to_xml_properties_and_output():
    suite = TestSuite(
        name="s",
        properties=[Property(name="k", value='v "quoted"')],
        system_out="out & about",
        system_err="err",
    )
    root = ET.fromstring(suite.to_xml())
    prop = root.find("properties/property")
    assert prop.get("name") == "k"
    assert prop.get("value") == 'v "quoted"'
    assert root.findtext("system-out") == "out & about"
    assert root.findtext("system-err") == "err"


def test_to_xml_case_optional_fields():
    case = TestCase(name="c", classname="K", status="run", assertions=3, skipped="why")
    root = ET.fromstring(TestSuite(name="s", test_cases=[case]).to_xml())
    element = root.find("testcase")
    assert element.get("status") == "run"
    assert int(element.get("assertions")) == case.assertions
    assert element.findtext("skipped") == "why"