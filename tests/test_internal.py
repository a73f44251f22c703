import xml.etree.ElementTree as ET

import pytest

from forcetool.internal import MarshalError, json_unmarshal, xml_marshal, xml_unmarshal


def test_json_unmarshal_decodes_object():
    result = json_unmarshal(b'{"A": 1, "B": "2"}')
    assert result["A"] == 1
    assert result["B"] == "2"


def test_json_unmarshal_accepts_str():
    assert json_unmarshal('[1, 2]') == [1, 2]


def test_json_unmarshal_short_error_message():
    with pytest.raises(MarshalError) as excinfo:
        json_unmarshal(b"<hi />")
    assert str(excinfo.value) == (
        "error unmarshaling json: invalid character '<' looking for beginning of value. "
        "first 10 characters: <hi />"
    )


def test_json_unmarshal_long_error_message_is_truncated():
    with pytest.raises(MarshalError) as excinfo:
        json_unmarshal(b"<this is very long content />")
    assert str(excinfo.value) == (
        "error unmarshaling json: invalid character '<' looking for beginning of value. "
        "first 10 characters: <this is v"
    )


def test_xml_unmarshal_parses_children():
    element = xml_unmarshal(b"<Foo><a>1</a><b>2</b></Foo>")
    assert element.tag == "Foo"
    assert element.findtext("a") == "1"
    assert element.findtext("b") == "2"


def test_xml_unmarshal_error_message():
    with pytest.raises(MarshalError) as excinfo:
        xml_unmarshal(b'{"a": 1}')
    assert str(excinfo.value) == 'error unmarshaling xml: EOF. first 10 characters: {"a": 1}'


def test_xml_unmarshal_long_error_message_is_truncated():
    with pytest.raises(MarshalError) as excinfo:
        xml_unmarshal(b'{"actually this is long json": 1}')
    assert str(excinfo.value) == (
        'error unmarshaling xml: EOF. first 10 characters: {"actually'
    )


def _element(tag, **children):
    element = ET.Element(tag)
    for name, text in children.items():
        ET.SubElement(element, name).text = text
    return element


def test_xml_marshal_serialises_element():
    assert xml_marshal(_element("T", a="1", b="2")) == b"<T><a>1</a><b>2</b></T>"


def test_xml_marshal_round_trip():
    data = xml_marshal(_element("T", a="x & y"))
    assert xml_unmarshal(data).findtext("a") == "x & y"


def test_xml_marshal_error_with_empty_field():
    element = _element("T", b="")
    ET.SubElement(element, "c").text = object()
    with pytest.raises(MarshalError) as excinfo:
        xml_marshal(element)
    message = str(excinfo.value)
    assert message.startswith("error marshaling xml: ")
    assert "object summary: T({ " in message


def test_xml_marshal_error_summary_is_truncated():
    element = _element("T", b="this is a long field")
    ET.SubElement(element, "c").text = object()
    with pytest.raises(MarshalError) as excinfo:
        xml_marshal(element)
    message = str(excinfo.value)
    assert message.startswith("error marshaling xml: ")
    assert message.endswith(". object summary: T({this is a...)")