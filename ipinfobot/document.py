"""Styled text documents rendered to Telegram HTML."""

from __future__ import annotations

import html
from enum import Enum

from .models import GeoPoint


class Style(Enum):
    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    SPACE = "space"
    NEWLINE = "newline"


_HTML_TAGS = {
    Style.BOLD: "b",
    Style.ITALIC: "i",
    Style.CODE: "code",
}


class Document:
    """An append-only sequence of styled spans.

    Every append method returns the document itself so calls can be chained:

        Document().bold("-- Summary of ").italic("8.8.8.8").bold(" --").newline()

    Span text is escaped when rendered to HTML but is otherwise taken as-is.
    """

    def __init__(self, point: GeoPoint | None = None):
        self._spans: list[tuple[Style, str]] = []
        self.point = point

    @property
    def spans(self) -> tuple[tuple[Style, str], ...]:
        return tuple(self._spans)

    def _append(self, style: Style, text: str) -> Document:
        self._spans.append((style, text))
        return self

    def plain(self, text: str) -> Document:
        return self._append(Style.PLAIN, text)

    def bold(self, text: str) -> Document:
        return self._append(Style.BOLD, text)

    def italic(self, text: str) -> Document:
        return self._append(Style.ITALIC, text)

    def code(self, text: str) -> Document:
        return self._append(Style.CODE, text)

    def space(self) -> Document:
        return self._append(Style.SPACE, " ")

    def newline(self) -> Document:
        return self._append(Style.NEWLINE, "\n")

    def extend(self, other: Document) -> Document:
        """Append the spans of *other*; its point is ignored."""
        self._spans.extend(other._spans)
        return self

    def to_html(self) -> str:
        """Render for Telegram's ``parse_mode=HTML``."""
        parts: list[str] = []
        for style, text in self._spans:
            tag = _HTML_TAGS.get(style)
            escaped = html.escape(text, quote=False)
            parts.append(f"<{tag}>{escaped}</{tag}>" if tag else escaped)
        return "".join(parts)

    def to_plain(self) -> str:
        """Render without any markup."""
        return "".join(text for _, text in self._spans)

    def to_message(self) -> dict:
        """Build the InputTextMessageContent object Telegram expects."""
        return {"message_text": self.to_html(), "parse_mode": "HTML"}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._spans == other._spans and self.point == other.point

    def __repr__(self) -> str:
        return f"Document({self.to_plain()!r})"
