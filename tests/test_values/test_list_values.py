import pytest

from cmdtree.exceptions import ParseError
from cmdtree.values import EnumArray, StringArray


def test_string_array_accumulates_across_sets():
    value = StringArray()
    value.set("a,b")
    value.set("c")
    assert value.value == ["a", "b", "c"]
    assert str(value) == "a,b,c"
    assert value.type_name() == "stringArray"


def test_string_array_honors_quotes():
    value = StringArray()
    value.set('"a,b",c')
    assert value.value == ["a,b", "c"]
    assert str(value) == '"a,b",c'


def test_preset_is_replaced_by_the_first_set():
    """A default followed by explicit values yields only the explicit values."""
    value = StringArray()
    value.preset("x,y")
    assert value.value == ["x", "y"]
    value.set("z")
    value.set("w")
    assert value.value == ["z", "w"]


def test_preset_twice_keeps_only_the_last():
    value = StringArray()
    value.preset("x")
    value.preset("y")
    assert value.value == ["y"]


def test_enum_array_checks_every_item():
    value = EnumArray(["read", "write"])
    value.set("read,WRITE")
    assert value.value == ["read", "WRITE"]
    assert value.choice_text() == "[read|write]"
    assert value.type_name() == "enumArray"


def test_enum_array_rejects_unknown_item():
    value = EnumArray(["read", "write"])
    with pytest.raises(ParseError, match="invalid choice: exec"):
        value.set("read,exec")
    assert value.value == []
