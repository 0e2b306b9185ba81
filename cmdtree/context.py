# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Cancellable run context threaded through an `Invocation`.

`RunContext` carries cancellation state and request-scoped values from the
host into handlers and middleware. Contexts form a tree: cancelling a context
cancels every context derived from it, while a child can be cancelled without
affecting its parent.

The invocation engine runs each handler inside a child context and cancels
that child once the run ends, so work started by a handler can observe that
its command has finished.

Only handlers and middleware consult the context. Command resolution and
argument binding never check it.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from cmdtree.signals import CancelSignal


class RunContext(BaseModel):
    """
    Cancellation and key/value scope for one command run.

    Attributes:
        parent (RunContext | None): The context this one was derived from.
        values (dict[str, Any]): Values stored directly on this context.
        reason (str): Why the context was cancelled, once it is.

    Methods:
        child(): Derive a context that is cancelled along with this one.
        with_value(key, value): Derive a context carrying an extra value.
        get(key, default): Look a value up on this context or its ancestors.
        cancel(reason): Cancel this context and its descendants.
        raise_if_cancelled(): Raise `CancelSignal` if the context is cancelled.
    """

    parent: RunContext | None = None
    values: dict[str, Any] = Field(default_factory=dict)
    reason: str = ""

    _cancelled: bool = PrivateAttr(default=False)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self.parent.cancelled if self.parent else False

    def child(self) -> RunContext:
        return RunContext(parent=self)

    def with_value(self, key: str, value: Any) -> RunContext:
        return RunContext(parent=self, values={key: value})

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.values:
            return self.values[key]
        if self.parent is not None:
            return self.parent.get(key, default)
        return default

    def cancel(self, reason: str = "context cancelled") -> None:
        if not self._cancelled:
            self._cancelled = True
            self.reason = reason

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise CancelSignal(self._cancel_reason())

    def _cancel_reason(self) -> str:
        if self._cancelled:
            return self.reason
        return self.parent._cancel_reason() if self.parent else ""

    def __str__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"<RunContext {state} | values: {sorted(self.values)}>"
