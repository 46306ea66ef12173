"""Rich styling for rendered chat lines.

Consumes the plain lines from render.py and produces rich Text. Styling only
adds spans; `style_line(line).plain == line` always holds.
"""

from rich.style import Style
from rich.text import Text

from chatline.palette import SERVER_COLOR, sender_color
from chatline.render import SERVER_SENDER

MEMBERSHIP_STYLE = Style(dim=True, italic=True)


def sender_style(sender: str) -> Style:
    color = SERVER_COLOR if sender == SERVER_SENDER else sender_color(sender)
    return Style(color=color, bold=True)


def style_line(line: str) -> Text:
    """Style one rendered line.

    Lines with a TAB get a colored sender column. Lines without one are
    membership sentences and are dimmed as a whole.
    """
    sender, tab, content = line.partition("\t")
    if not tab:
        return Text(line, style=MEMBERSHIP_STYLE)

    text = Text()
    text.append(sender, style=sender_style(sender))
    text.append(tab)
    text.append(content)
    return text
