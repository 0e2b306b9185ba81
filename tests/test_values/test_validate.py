import pytest

from cmdtree.exceptions import ParseError, ValidationError
from cmdtree.protocols import NoOptDefaulter
from cmdtree.values import Bool, Int64, Validate


def positive(value):
    if value.value <= 0:
        return "must be positive"
    return None


def test_validate_accepts_valid_input():
    value = Validate(Int64(), positive)
    value.set("5")
    assert value.value == 5
    assert str(value) == "5"
    assert value.type_name() == "int64"


def test_validate_rejects_with_message():
    value = Validate(Int64(), positive)
    with pytest.raises(ValidationError, match="must be positive"):
        value.set("-1")


def test_validate_rejects_with_value_error():
    def no_thirteen(value):
        if value.value == 13:
            raise ValueError("unlucky")

    with pytest.raises(ValidationError, match="unlucky"):
        Validate(Int64(), no_thirteen).set("13")


def test_validate_propagates_conversion_errors():
    with pytest.raises(ParseError):
        Validate(Int64(), positive).set("abc")


def test_validate_forwards_no_opt_default():
    assert Validate(Bool(), lambda value: None).no_opt_default() == "true"
    assert Validate(Int64(), positive).no_opt_default() == ""
    assert isinstance(Validate(Bool(), lambda value: None), NoOptDefaulter)
