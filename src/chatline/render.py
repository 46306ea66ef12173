"""Render room events as single chat lines.

// [LAW:single-enforcer] render() is the only place event classes map to text.
// [LAW:dataflow-not-control-flow] Dispatch is two lookup tables, one keyed by
//   event class and one by content class.

Line format: "<sender>\\t<content>". Membership lines are a plain sentence with
no TAB, and server notices use the fixed sender token "SERVER".
"""

from collections.abc import Callable
from typing import Protocol

from chatline.errors import ContractViolationError, UnsupportedEventError
from chatline.event_types import (
    AudioContent,
    EmoteContent,
    EncryptedEvent,
    EncryptedFile,
    FileContent,
    ImageContent,
    LocationContent,
    MediaContent,
    MemberEvent,
    MembershipState,
    MessageContent,
    MessageEvent,
    NoticeContent,
    RoomEvent,
    ServerNoticeContent,
    TextContent,
    VideoContent,
)

UNDECRYPTABLE_TEXT = "Unable to decrypt message"
SERVER_SENDER = "SERVER"

MEMBERSHIP_VERBS: dict[MembershipState, str] = {
    MembershipState.JOIN: "joined",
    MembershipState.LEAVE: "left",
    MembershipState.BAN: "banned",
    MembershipState.INVITE: "invited",
    MembershipState.KNOCK: "knocked on",
}


# ─── Capabilities ─────────────────────────────────────────────────────────────


class HasFormattedBody(Protocol):
    """Content with a plain body and an optional richer rendition."""

    @property
    def body(self) -> str: ...

    @property
    def formatted_body(self) -> str | None: ...


class HasUrlOrFile(Protocol):
    """Content that references an attachment by plain or encrypted URL."""

    @property
    def url(self) -> str | None: ...

    @property
    def file(self) -> EncryptedFile | None: ...


def resolve_body(content: HasFormattedBody) -> str:
    """Return the formatted body if present, else the plain body."""
    if content.formatted_body is not None:
        return content.formatted_body
    return content.body


def resolve_url(content: HasUrlOrFile) -> str:
    """Return the plain URL if present, else the encrypted file's URL.

    Raises:
        ContractViolationError: If neither is present
    """
    if content.url is not None:
        return content.url
    if content.file is not None:
        return content.file.url
    raise ContractViolationError(
        f"{type(content).__name__} has neither url nor file"
    )


# ─── Event renderers ──────────────────────────────────────────────────────────


def render(event: RoomEvent, displayname: str) -> str:
    """Render an event as one chat line.

    The displayname is passed in because it depends on room state the event
    does not carry.

    Raises:
        UnsupportedEventError: If the event (or its content) has no renderer
        ContractViolationError: If a media event has no locator
    """
    renderer = EVENT_RENDERERS.get(type(event))
    if renderer is None:
        raise UnsupportedEventError(event)
    return renderer(event, displayname)


def _render_encrypted(event: EncryptedEvent, displayname: str) -> str:
    return f"{displayname}\t{UNDECRYPTABLE_TEXT}"


def _render_member(event: MemberEvent, displayname: str) -> str:
    verb = MEMBERSHIP_VERBS[event.membership]
    return f"{displayname} ({event.state_key}) has {verb} the room"


def _render_message(event: MessageEvent, displayname: str) -> str:
    renderer = MESSAGE_RENDERERS.get(type(event.content))
    if renderer is None:
        raise UnsupportedEventError(event.content)
    return renderer(event.content, displayname)


# ─── Message content renderers ────────────────────────────────────────────────


def _render_body(content: HasFormattedBody, displayname: str) -> str:
    return f"{displayname}\t{resolve_body(content)}"


def _render_media(content: MediaContent, displayname: str) -> str:
    return f"{displayname}\t{content.body}: {resolve_url(content)}"


def _render_location(content: LocationContent, displayname: str) -> str:
    return f"{displayname}\t{content.body}: {content.geo_uri}"


def _render_server_notice(content: ServerNoticeContent, _displayname: str) -> str:
    return f"{SERVER_SENDER}\t{content.body}"


# [LAW:one-source-of-truth] Every concrete class needs an entry here;
# tests/test_render.py checks the tables against the class hierarchy.
EVENT_RENDERERS: dict[type[RoomEvent], Callable[..., str]] = {
    EncryptedEvent: _render_encrypted,
    MemberEvent: _render_member,
    MessageEvent: _render_message,
}

MESSAGE_RENDERERS: dict[type[MessageContent], Callable[..., str]] = {
    TextContent: _render_body,
    EmoteContent: _render_body,
    NoticeContent: _render_body,
    AudioContent: _render_media,
    FileContent: _render_media,
    ImageContent: _render_media,
    VideoContent: _render_media,
    LocationContent: _render_location,
    ServerNoticeContent: _render_server_notice,
}
