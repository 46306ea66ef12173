"""Tests for chatline.render — resolution policies, line format, dispatch coverage."""

import inspect
from dataclasses import dataclass

import pytest

from chatline.errors import ContractViolationError, RenderError, UnsupportedEventError
from chatline.event_types import (
    AudioContent,
    EmoteContent,
    EncryptedEvent,
    EncryptedFile,
    FileContent,
    ImageContent,
    LocationContent,
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
from chatline.render import (
    EVENT_RENDERERS,
    MEMBERSHIP_VERBS,
    MESSAGE_RENDERERS,
    render,
    resolve_body,
    resolve_url,
)

FORMATTED_KINDS = [TextContent, EmoteContent, NoticeContent]
MEDIA_KINDS = [AudioContent, FileContent, ImageContent, VideoContent]


def _concrete_subclasses(base: type) -> set[type]:
    """Leaf chatline classes under base (intermediate bases are skipped).

    Classes defined inside tests are ignored.
    """
    leaves = set()
    for sub in base.__subclasses__():
        if not sub.__module__.startswith("chatline."):
            continue
        children = _concrete_subclasses(sub)
        if children:
            leaves |= children
        else:
            leaves.add(sub)
    return leaves


# ─── Body resolution ─────────────────────────────────────────────────────────


class TestResolveBody:
    @pytest.mark.parametrize("cls", FORMATTED_KINDS)
    def test_plain_only(self, cls):
        assert resolve_body(cls(body="plain text")) == "plain text"

    @pytest.mark.parametrize("cls", FORMATTED_KINDS)
    def test_formatted_wins(self, cls):
        content = cls(body="plain", formatted_body="<b>bold</b> & <i>raw</i>")
        assert resolve_body(content) == "<b>bold</b> & <i>raw</i>"

    def test_empty_formatted_body_is_still_present(self):
        assert resolve_body(TextContent(body="plain", formatted_body="")) == ""

    def test_structural_capability(self):
        @dataclass
        class Foreign:
            body: str
            formatted_body: str | None

        assert resolve_body(Foreign("a", None)) == "a"
        assert resolve_body(Foreign("a", "b")) == "b"


# ─── Locator resolution ──────────────────────────────────────────────────────


class TestResolveUrl:
    @pytest.mark.parametrize("cls", MEDIA_KINDS)
    def test_url_only(self, cls):
        assert resolve_url(cls(body="x", url="mxc://example.org/plain")) == "mxc://example.org/plain"

    @pytest.mark.parametrize("cls", MEDIA_KINDS)
    def test_file_only(self, cls):
        content = cls(body="x", file=EncryptedFile(url="mxc://example.org/cipher"))
        assert resolve_url(content) == "mxc://example.org/cipher"

    def test_url_preferred_over_file(self):
        content = ImageContent(
            body="x",
            url="mxc://example.org/plain",
            file=EncryptedFile(url="mxc://example.org/cipher"),
        )
        assert resolve_url(content) == "mxc://example.org/plain"

    @pytest.mark.parametrize("cls", MEDIA_KINDS)
    def test_neither_raises(self, cls):
        with pytest.raises(ContractViolationError, match="neither url nor file"):
            resolve_url(cls(body="x"))

    def test_contract_violation_is_render_error(self):
        assert issubclass(ContractViolationError, RenderError)


# ─── Line format ─────────────────────────────────────────────────────────────


class TestRenderMember:
    def test_join(self):
        evt = MemberEvent(state_key="@bob:example.org", membership=MembershipState.JOIN)
        assert render(evt, "Bob") == "Bob (@bob:example.org) has joined the room"

    @pytest.mark.parametrize(
        "state, verb",
        [
            (MembershipState.JOIN, "joined"),
            (MembershipState.LEAVE, "left"),
            (MembershipState.BAN, "banned"),
            (MembershipState.INVITE, "invited"),
            (MembershipState.KNOCK, "knocked on"),
        ],
    )
    def test_verbs(self, state, verb):
        evt = MemberEvent(state_key="@c:x", membership=state)
        assert render(evt, "Carol") == f"Carol (@c:x) has {verb} the room"

    def test_every_state_has_a_verb(self):
        assert set(MEMBERSHIP_VERBS) == set(MembershipState)

    def test_no_tab(self):
        evt = MemberEvent(state_key="@c:x", membership=MembershipState.LEAVE)
        assert "\t" not in render(evt, "Carol")

    def test_subject_is_raw_id(self):
        evt = MemberEvent(
            state_key="@bob:example.org",
            membership=MembershipState.INVITE,
            displayname="Bobby",
        )
        assert render(evt, "Alice") == "Alice (@bob:example.org) has invited the room"


class TestRenderEncrypted:
    def test_placeholder(self):
        assert render(EncryptedEvent(), "X") == "X\tUnable to decrypt message"

    def test_payload_ignored(self):
        evt = EncryptedEvent(algorithm="m.megolm.v1.aes-sha2", ciphertext={"weird": object()})
        assert render(evt, "X") == "X\tUnable to decrypt message"


class TestRenderMessage:
    def test_text(self):
        evt = MessageEvent(content=TextContent(body="hi"))
        assert render(evt, "Alice") == "Alice\thi"

    @pytest.mark.parametrize("cls", FORMATTED_KINDS)
    def test_formatted_body_used(self, cls):
        evt = MessageEvent(content=cls(body="hi", formatted_body="<p>hi</p>"))
        assert render(evt, "Alice") == "Alice\t<p>hi</p>"

    def test_emote_not_decorated(self):
        evt = MessageEvent(content=EmoteContent(body="waves"))
        assert render(evt, "Alice") == "Alice\twaves"

    @pytest.mark.parametrize("cls", MEDIA_KINDS)
    def test_media_url(self, cls):
        evt = MessageEvent(content=cls(body="cat.png", url="mxc://example.org/cat"))
        assert render(evt, "Alice") == "Alice\tcat.png: mxc://example.org/cat"

    @pytest.mark.parametrize("cls", MEDIA_KINDS)
    def test_media_encrypted(self, cls):
        evt = MessageEvent(content=cls(body="cat.png", file=EncryptedFile(url="mxc://e/c")))
        assert render(evt, "Alice") == "Alice\tcat.png: mxc://e/c"

    def test_media_without_locator_raises(self):
        evt = MessageEvent(content=VideoContent(body="clip.mp4"))
        with pytest.raises(ContractViolationError):
            render(evt, "Alice")

    def test_location(self):
        evt = MessageEvent(content=LocationContent(body="Big Ben", geo_uri="geo:51.5008,0.1247"))
        assert render(evt, "Alice") == "Alice\tBig Ben: geo:51.5008,0.1247"

    @pytest.mark.parametrize("displayname", ["Alice", "", "SERVER", "@mallory:evil.org"])
    def test_server_notice_ignores_displayname(self, displayname):
        evt = MessageEvent(content=ServerNoticeContent(body="Maintenance at 5pm"))
        assert render(evt, displayname) == "SERVER\tMaintenance at 5pm"

    def test_idempotent(self):
        evt = MessageEvent(content=TextContent(body="hi", formatted_body="<b>hi</b>"))
        assert render(evt, "Alice") == render(evt, "Alice")


# ─── Dispatch coverage ───────────────────────────────────────────────────────


class TestDispatchCoverage:
    def test_every_event_class_registered(self):
        assert _concrete_subclasses(RoomEvent) <= set(EVENT_RENDERERS)

    def test_every_content_class_registered(self):
        assert _concrete_subclasses(MessageContent) <= set(MESSAGE_RENDERERS)

    @pytest.mark.parametrize(
        "renderer",
        sorted(set(EVENT_RENDERERS.values()) | set(MESSAGE_RENDERERS.values()), key=lambda f: f.__name__),
        ids=lambda f: f.__name__,
    )
    def test_renderers_annotated(self, renderer):
        params = list(inspect.signature(renderer).parameters.values())
        assert len(params) == 2
        assert all(p.annotation is not inspect.Parameter.empty for p in params)

    def test_unknown_event_raises(self):
        @dataclass(frozen=True)
        class TypingEvent(RoomEvent):
            user_ids: tuple = ()

        with pytest.raises(UnsupportedEventError, match="TypingEvent"):
            render(TypingEvent(), "Alice")

    def test_unknown_content_raises(self):
        @dataclass(frozen=True)
        class StickerContent(MessageContent):
            body: str = ""

        evt = MessageEvent(content=StickerContent(body="sticker"))
        with pytest.raises(UnsupportedEventError) as exc_info:
            render(evt, "Alice")
        assert exc_info.value.kind == "StickerContent"
