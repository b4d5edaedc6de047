import re
from dataclasses import dataclass
from html import escape

_HEADING_RE = re.compile(r"###\s?(.*)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\((http[^)]+)\)")
# Skip URLs that are followed by a closing </a> before any other tag opens.
_BARE_URL_RE = re.compile(r"(\bhttps?://[^\s<]+)(?![^<]*</a>)")

_LINK_TEMPLATE = '<a href="{href}" target="_blank" rel="noopener noreferrer">{label}</a>'


@dataclass(frozen=True)
class HtmlFragment:
    html: str

    def __str__(self) -> str:
        return self.html


def _markdown_link(match: re.Match) -> str:
    return _LINK_TEMPLATE.format(href=match.group(2), label=match.group(1))


def _bare_link(match: re.Match) -> str:
    url = match.group(1)
    return _LINK_TEMPLATE.format(href=url, label=url)


def linkify_bare_urls(html: str) -> str:
    return _BARE_URL_RE.sub(_bare_link, html)


def format_message(raw_text: str, *, escape_html: bool = True) -> HtmlFragment:
    """Rewrite lightweight markup in ``raw_text`` into an HTML fragment.

    The passes run in a fixed order: ``### heading`` and ``**bold**`` become
    ``<strong>``, ``[label](http...)`` becomes a link, then any bare
    ``http(s)://`` URL not already inside a link is wrapped. Links open in a
    new context with ``rel="noopener noreferrer"``.

    With ``escape_html`` (the default) the raw text is HTML-escaped before the
    passes, so the only tags in the output are the ones inserted here. Passing
    ``escape_html=False`` reproduces the unescaped behaviour of the original
    web client and must only be used for trusted text.
    """
    text = escape(raw_text, quote=True) if escape_html else raw_text
    text = _HEADING_RE.sub(r"<strong>\1</strong>", text)
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = _MARKDOWN_LINK_RE.sub(_markdown_link, text)
    text = linkify_bare_urls(text)
    return HtmlFragment(text)


class MessageFormatter:
    def __init__(self, *, escape_html: bool = True, keyword_replacements: dict[str, str] | None = None):
        self._escape_html = escape_html
        self._keyword_replacements = dict(keyword_replacements or {})

    def format(self, raw_text: str) -> HtmlFragment:
        for keyword, replacement in self._keyword_replacements.items():
            raw_text = raw_text.replace(keyword, replacement)
        return format_message(raw_text, escape_html=self._escape_html)
