"""
cliopts help formatting.

Layout
- sections are rendered in order as "<name>:" followed by their lines and one
  blank line.
- every line is "  <syntax>" padded to a shared column, followed by the blurb
  word-wrapped to the remaining width; continuation lines are indented to the
  same column.
- the column is 4 + the longest syntax description over all sections. The blurb
  width is width - longest syntax, floored at `minimum` so that very long
  syntax descriptions still leave readable text (the line may then exceed `width`).

    >>> section = HelpSection("Network options").add("--port <port>", "port to listen on")
    >>> print(format_help([section]), end="")
    Network options:
      --port <port>  port to listen on
    <BLANKLINE>
"""
import re
from collections import defaultdict
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .utils import Unset, coalesce


class HelpLine(NamedTuple):
    syntax: str
    blurb: str


class HelpSection:
    """
    A named group of (syntax description, blurb) lines.

    Sections are plain caller-supplied data; the formatter only reads them.
    """
    __slots__ = ("_name", "_lines")

    def __init__(self, name, lines=(), /):
        if not isinstance(name, str):
            raise TypeError("help section name must be a string")
        self._name = name
        self._lines = []
        for line in lines:
            self.add(*line)

    @property
    def name(self):
        return self._name

    @property
    def lines(self):
        return tuple(self._lines)

    def add(self, syntax, blurb, /):
        """
        Append a line and return the section (chainable).
        """
        if not isinstance(syntax, str) or not isinstance(blurb, str):
            raise TypeError("help line syntax and blurb must be strings")
        self._lines.append(HelpLine(syntax, blurb))
        return self

    def __repr__(self):
        return "help-section(name=%r, lines=%r)" % (self._name, self.lines)


def split_by_spaces(text, /):
    """
    Split text on runs of whitespace, dropping empty pieces.
    """
    return re.findall(r"\S+", text)


def word_wrap(text, width, /):
    """
    Greedily pack the words of `text` into lines no wider than `width`.

    A word is never split or truncated: one longer than `width` sits alone on
    its own over-long line. Always returns at least one line, so blank text
    yields [""].
    """
    if width < 1:
        raise ValueError("word_wrap() width must be at least 1")

    lines = []
    current = ""
    for word in split_by_spaces(text):
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current += " " + word
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def _layout(sections, width, minimum):
    """
    Yield (section name, [(first column, wrapped line), ...]) for every section.

    The first column is the padded syntax on the first line of an entry and
    plain indentation on continuation lines.
    """
    sections = tuple(sections)
    longest = max((len(syntax) for section in sections for syntax, _ in section.lines), default=0)
    summary = max(minimum, width - longest)
    # two spaces before the syntax, two after
    indent = 4 + longest

    for section in sections:
        rows = []
        for syntax, blurb in section.lines:
            for index, part in enumerate(word_wrap(blurb, summary)):
                if index == 0:
                    rows.append((("  " + syntax).ljust(indent), part, True))
                else:
                    rows.append((" " * indent, part, False))
        yield section.name, rows


def format_help(sections, /, width=79, minimum=30):
    """
    Render help sections into a single string.

    Parameters
    - sections: iterable of HelpSection (or anything with .name and .lines of
      (syntax, blurb) pairs).
    - width: nominal total line width.
    - minimum: floor for the blurb column width.
    """
    output = []
    for name, rows in _layout(sections, width, minimum):
        output.append(name + ":\n")
        for column, part, _ in rows:
            output.append(column + part + "\n")
        output.append("\n")
    return "".join(output)


def print_help(sections, /, *, console=Unset, width=79, minimum=30, colorful=True):
    """
    Render help sections to a rich console.

    Palette keys
    - section-label, syntax, blurb

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - When colorful is False the output is exactly format_help(...).
    """
    console = coalesce(console, Console())
    styles = defaultdict(str, {
        "section-label": "bold #FFFFFF",  # Pure white headers
        "syntax": "bold #00E6FF",  # CYAN for option syntax
        "blurb": "#9CA3AF",  # Muted gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    text = Text()
    for name, rows in _layout(sections, width, minimum):
        text.append(name, styler("section-label")).append(":\n")
        for column, part, first in rows:
            if first:
                # keep the padding unstyled so underlines do not run into the gap
                syntax = column.rstrip()
                text.append(syntax, styler("syntax")).append(column[len(syntax):])
            else:
                text.append(column)
            text.append(part, styler("blurb")).append("\n")
        text.append("\n")

    console.print(text, end="", soft_wrap=True, highlight=False)


__all__ = (
    "HelpLine",
    "HelpSection",
    "split_by_spaces",
    "word_wrap",
    "format_help",
    "print_help",
)
