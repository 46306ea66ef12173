"""Type-safe room event model for chatline.

// [LAW:one-source-of-truth] The class IS the type — no event_type string field.
// [LAW:single-enforcer] parse_event is the sole Matrix JSON validation boundary.

Every value here is a frozen dataclass. The renderer only reads them.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum


# ─── Type alias for JSON-parsed dicts ─────────────────────────────────────────

JsonDict = dict[str, object]


# ─── Enums ────────────────────────────────────────────────────────────────────


class MembershipState(Enum):
    """A user's membership in a room after an m.room.member event."""

    JOIN = "join"
    LEAVE = "leave"
    BAN = "ban"
    INVITE = "invite"
    KNOCK = "knock"


# ─── Value types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EncryptedFile:
    """Encryption metadata for an attachment. `url` points at the ciphertext."""

    url: str
    key: dict = field(default_factory=dict)
    iv: str = ""
    hashes: dict[str, str] = field(default_factory=dict)
    v: str = "v2"


# ─── Message content hierarchy ────────────────────────────────────────────────
# // [LAW:one-source-of-truth] Shared fields live on the intermediate bases,
# // so each kind is declared by name only.


@dataclass(frozen=True)
class MessageContent:
    """Base class for all m.room.message content kinds."""


@dataclass(frozen=True)
class FormattedBodyContent(MessageContent):
    """Content with a mandatory plain body and an optional formatted body."""

    body: str
    formatted_body: str | None = None
    format: str | None = None


@dataclass(frozen=True)
class MediaContent(MessageContent):
    """Content that references an attachment, either plain or encrypted.

    Exactly one of `url` / `file` is present in well-formed events.
    """

    body: str
    url: str | None = None
    file: EncryptedFile | None = None
    info: dict = field(default_factory=dict)


@dataclass(frozen=True)
class TextContent(FormattedBodyContent):
    """m.text"""


@dataclass(frozen=True)
class EmoteContent(FormattedBodyContent):
    """m.emote"""


@dataclass(frozen=True)
class NoticeContent(FormattedBodyContent):
    """m.notice"""


@dataclass(frozen=True)
class AudioContent(MediaContent):
    """m.audio"""


@dataclass(frozen=True)
class FileContent(MediaContent):
    """m.file"""


@dataclass(frozen=True)
class ImageContent(MediaContent):
    """m.image"""


@dataclass(frozen=True)
class VideoContent(MediaContent):
    """m.video"""


@dataclass(frozen=True)
class LocationContent(MessageContent):
    """m.location"""

    body: str
    geo_uri: str


@dataclass(frozen=True)
class ServerNoticeContent(MessageContent):
    """m.server_notice — sent by the homeserver, not by a user."""

    body: str
    server_notice_type: str = ""
    admin_contact: str | None = None
    limit_type: str | None = None


# ─── Room event hierarchy ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class RoomEvent:
    """Base class for all room events.

    // [LAW:one-source-of-truth] Envelope metadata is defined once here and
    // inherited by every event type.
    """

    event_id: str = field(default="", kw_only=True)
    sender: str = field(default="", kw_only=True)
    room_id: str = field(default="", kw_only=True)
    origin_server_ts: int = field(default=0, kw_only=True)


@dataclass(frozen=True)
class EncryptedEvent(RoomEvent):
    """m.room.encrypted. The payload is opaque; nothing here decrypts it."""

    algorithm: str = ""
    ciphertext: object = None


@dataclass(frozen=True)
class MemberEvent(RoomEvent):
    """m.room.member. `state_key` is the user whose membership changed."""

    state_key: str
    membership: MembershipState
    displayname: str | None = None


@dataclass(frozen=True)
class MessageEvent(RoomEvent):
    """m.room.message."""

    content: MessageContent


# ─── Parse boundary ──────────────────────────────────────────────────────────
# // [LAW:single-enforcer] Single parse boundary for Matrix event JSON.


def _str(v: object) -> str:
    """Narrow object to str."""
    if isinstance(v, str):
        return v
    return str(v)


def _int(v: object) -> int:
    """Narrow object to int. JSON numbers may arrive as floats."""
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        if not math.isfinite(v):
            raise ValueError(f"Expected a finite number, got {v!r}")
        return int(v)
    return int(str(v))


def _opt_str(v: object) -> str | None:
    if v is None:
        return None
    return _str(v)


def _dict(v: object) -> dict:
    return v if isinstance(v, dict) else {}


def _text(raw: dict, key: str, where: str) -> str:
    """Required string field. Rendered fields are never coerced with str()."""
    if key not in raw:
        raise ValueError(f"{where} has no {key}")
    v = raw[key]
    if not isinstance(v, str):
        raise ValueError(f"{where} {key} must be a string, got {type(v).__name__}")
    return v


def _opt_text(raw: dict, key: str, where: str) -> str | None:
    if raw.get(key) is None:
        return None
    return _text(raw, key, where)


def parse_event(raw: dict[str, object]) -> RoomEvent:
    """Parse a raw Matrix client-server event dict into a typed RoomEvent.

    Args:
        raw: The decoded JSON of a single room event

    Returns:
        Typed RoomEvent subclass

    Raises:
        ValueError: If the event type or msgtype is unknown, or a required
            field is missing
    """
    event_type = _str(raw.get("type", ""))
    handler = _EVENT_PARSERS.get(event_type)
    if handler is None:
        raise ValueError(f"Unknown event type: {event_type!r}")
    return handler(raw, _envelope(raw))


def _envelope(raw: dict[str, object]) -> dict[str, object]:
    return {
        "event_id": _str(raw.get("event_id", "")),
        "sender": _str(raw.get("sender", "")),
        "room_id": _str(raw.get("room_id", "")),
        "origin_server_ts": _int(raw.get("origin_server_ts", 0)),
    }


def _require_body(content: dict) -> str:
    return _text(content, "body", "Message content")


def _parse_encrypted(raw: dict[str, object], envelope: dict) -> EncryptedEvent:
    content = _dict(raw.get("content"))
    return EncryptedEvent(
        algorithm=_str(content.get("algorithm", "")),
        ciphertext=content.get("ciphertext"),
        **envelope,
    )


def _parse_member(raw: dict[str, object], envelope: dict) -> MemberEvent:
    state_key = _text(raw, "state_key", "m.room.member event")
    content = _dict(raw.get("content"))
    membership_str = _str(content.get("membership", ""))
    try:
        membership = MembershipState(membership_str)
    except ValueError:
        raise ValueError(f"Unknown membership: {membership_str!r}") from None
    return MemberEvent(
        state_key=state_key,
        membership=membership,
        displayname=_opt_str(content.get("displayname")),
        **envelope,
    )


def _parse_message(raw: dict[str, object], envelope: dict) -> MessageEvent:
    content = _dict(raw.get("content"))
    msgtype = _str(content.get("msgtype", ""))
    handler = _CONTENT_PARSERS.get(msgtype)
    if handler is None:
        raise ValueError(f"Unknown msgtype: {msgtype!r}")
    return MessageEvent(content=handler(content), **envelope)


def _formatted(cls: type[FormattedBodyContent]) -> Callable[[dict], MessageContent]:
    def parse(content: dict) -> MessageContent:
        return cls(
            body=_require_body(content),
            formatted_body=_opt_text(content, "formatted_body", "Message content"),
            format=_opt_str(content.get("format")),
        )

    return parse


def _parse_encrypted_file(raw: object) -> EncryptedFile | None:
    if raw is None:
        return None
    file_raw = _dict(raw)
    return EncryptedFile(
        url=_text(file_raw, "url", "Encrypted file"),
        key=_dict(file_raw.get("key")),
        iv=_str(file_raw.get("iv", "")),
        hashes={_str(k): _str(v) for k, v in _dict(file_raw.get("hashes")).items()},
        v=_str(file_raw.get("v", "v2")),
    )


def _media(cls: type[MediaContent]) -> Callable[[dict], MessageContent]:
    def parse(content: dict) -> MessageContent:
        url = _opt_text(content, "url", cls.__name__)
        file = _parse_encrypted_file(content.get("file"))
        if url is None and file is None:
            raise ValueError(f"{cls.__name__} has neither url nor file")
        return cls(
            body=_require_body(content),
            url=url,
            file=file,
            info=_dict(content.get("info")),
        )

    return parse


def _parse_location(content: dict) -> LocationContent:
    return LocationContent(
        body=_require_body(content),
        geo_uri=_text(content, "geo_uri", "m.location content"),
    )


def _parse_server_notice(content: dict) -> ServerNoticeContent:
    return ServerNoticeContent(
        body=_require_body(content),
        server_notice_type=_str(content.get("server_notice_type", "")),
        admin_contact=_opt_str(content.get("admin_contact")),
        limit_type=_opt_str(content.get("limit_type")),
    )


# [LAW:dataflow-not-control-flow] Dispatch tables for event parsing
_CONTENT_PARSERS: dict[str, Callable[[dict], MessageContent]] = {
    "m.text": _formatted(TextContent),
    "m.emote": _formatted(EmoteContent),
    "m.notice": _formatted(NoticeContent),
    "m.audio": _media(AudioContent),
    "m.file": _media(FileContent),
    "m.image": _media(ImageContent),
    "m.video": _media(VideoContent),
    "m.location": _parse_location,
    "m.server_notice": _parse_server_notice,
}

_EVENT_PARSERS: dict[str, Callable[[dict[str, object], dict], RoomEvent]] = {
    "m.room.encrypted": _parse_encrypted,
    "m.room.member": _parse_member,
    "m.room.message": _parse_message,
}
