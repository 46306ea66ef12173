"""ChatLineApp tests using the Textual in-process harness."""

import pytest
from textual.widgets import RichLog

from chatline.tui.app import ChatLineApp

pytestmark = pytest.mark.textual

LINES = [
    "Alice\thi",
    "Bob (@bob:example.org) has joined the room",
    "SERVER\tMaintenance at 5pm",
]


async def test_initial_lines_shown():
    app = ChatLineApp(LINES, room_name="#room:example.org")
    async with app.run_test(size=(100, 30)) as pilot:
        await pilot.pause()
        assert app.rendered_lines == LINES
        assert app.sub_title == "#room:example.org"
        assert app.query_one("#chat-log", RichLog) is not None


async def test_append_line():
    app = ChatLineApp()
    async with app.run_test(size=(100, 30)) as pilot:
        await pilot.pause()
        assert app.rendered_lines == []
        app.append_line("Carol\tlate arrival")
        await pilot.pause()
        assert app.rendered_lines == ["Carol\tlate arrival"]


async def test_quit_binding():
    app = ChatLineApp(LINES)
    async with app.run_test() as pilot:
        await pilot.press("q")
        await pilot.pause()
    assert app.return_code == 0
