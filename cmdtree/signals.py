# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals used internally by cmdtree.

These signals interrupt or redirect a run (displaying help, honoring a
cancelled context) without being treated as traditional exceptions.

All signals inherit from `FlowSignal`, which is a subclass of `BaseException`
to ensure they bypass standard `except Exception` blocks, including the
`HandlerError` wrapping done by the invocation engine.

Signals:
- HelpSignal: Render help for the current command instead of failing.
- CancelSignal: The run context was cancelled.
"""


class FlowSignal(BaseException):
    """Base class for all flow control signals in cmdtree.

    These are not errors. They're used to control flow from inside handlers
    and middleware.
    """


class HelpSignal(FlowSignal):
    """Raised to display help information for the current command."""

    def __init__(self, message: str = "Help signal received."):
        super().__init__(message)


class CancelSignal(FlowSignal):
    """Raised to cancel the current command."""

    def __init__(self, message: str = "Cancel signal received."):
        super().__init__(message)
