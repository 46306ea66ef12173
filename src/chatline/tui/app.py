"""Terminal viewer for rendered chat lines using Textual.

Displays lines from render.py in a scrolling log, styled by styling.py.
"""

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, RichLog

from chatline.styling import style_line


class ChatLineApp(App):
    """Scrollback view of a room's rendered events."""

    TITLE = "chatline"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, lines: list[str] | None = None, room_name: str = ""):
        super().__init__()
        self._initial_lines = list(lines or [])
        self.rendered_lines: list[str] = []
        if room_name:
            self.sub_title = room_name

    def compose(self) -> ComposeResult:
        yield Header()
        yield RichLog(id="chat-log", markup=False, wrap=False, auto_scroll=True)
        yield Footer()

    def on_mount(self) -> None:
        for line in self._initial_lines:
            self.append_line(line)

    def append_line(self, line: str) -> None:
        """Append one rendered line to the log."""
        self.rendered_lines.append(line)
        self.query_one("#chat-log", RichLog).write(style_line(line))
