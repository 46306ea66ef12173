"""chatline — render Matrix room events as terminal chat lines."""

from chatline.errors import ContractViolationError, RenderError, UnsupportedEventError
from chatline.event_types import parse_event
from chatline.render import render, resolve_body, resolve_url

__all__ = [
    "ContractViolationError",
    "RenderError",
    "UnsupportedEventError",
    "parse_event",
    "render",
    "resolve_body",
    "resolve_url",
]
