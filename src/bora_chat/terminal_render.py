import re

from bs4 import BeautifulSoup, NavigableString

from bora_chat.message_formatter import HtmlFragment

_BOLD_ON = "\033[1m"
_BOLD_OFF = "\033[0m"


def fragment_to_text(fragment: HtmlFragment | str, *, ansi: bool = True) -> str:
    """Render a formatted message fragment as terminal text.

    Links become ``label (url)``, or just the url when the label is the url
    itself. ``<strong>`` becomes ANSI bold, or plain text without ``ansi``.
    """
    html = fragment.html if isinstance(fragment, HtmlFragment) else fragment
    soup = BeautifulSoup(f"<div>{html}</div>", "lxml")

    # Links first so a bold label keeps its url.
    for a in soup.find_all("a", href=True):
        href = a["href"]
        link_text = a.get_text(strip=True)
        if link_text and link_text != href:
            a.replace_with(f"{link_text} ({href})")
        else:
            a.replace_with(href)

    for strong in soup.find_all("strong"):
        text = strong.get_text()
        strong.replace_with(NavigableString(f"{_BOLD_ON}{text}{_BOLD_OFF}" if ansi else text))

    text = soup.get_text()
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
