import pytest

from cmdtree.context import RunContext
from cmdtree.signals import CancelSignal


def test_child_is_cancelled_with_its_parent():
    parent = RunContext()
    child = parent.child()
    parent.cancel("shutting down")
    assert child.cancelled
    with pytest.raises(CancelSignal):
        child.raise_if_cancelled()


def test_cancelling_a_child_leaves_the_parent_alone():
    parent = RunContext()
    child = parent.child()
    child.cancel()
    assert child.cancelled
    assert not parent.cancelled
    parent.raise_if_cancelled()


def test_values_are_inherited():
    root = RunContext().with_value("user", "ann")
    child = root.with_value("request", 7).child()
    assert child.get("user") == "ann"
    assert child.get("request") == 7
    assert child.get("missing", "fallback") == "fallback"
    assert root.get("request") is None


def test_cancel_keeps_the_first_reason():
    context = RunContext()
    context.cancel("first")
    context.cancel("second")
    assert context.reason == "first"
