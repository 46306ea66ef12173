"""Renderer error types.

Parse failures at the JSON boundary are plain ValueError; these cover events
that parsed (or were built directly) but cannot be rendered.
"""


class RenderError(Exception):
    """Base class for renderer failures."""


class ContractViolationError(RenderError):
    """An event broke an invariant its producer guarantees.

    Raised instead of rendering a blank or placeholder value.
    """


class UnsupportedEventError(RenderError):
    """No renderer is registered for the event or content class."""

    def __init__(self, obj: object):
        self.kind = type(obj).__name__
        super().__init__(f"No renderer for {self.kind}")
