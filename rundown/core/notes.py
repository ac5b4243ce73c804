"""
Rendering of story notes as HTML.
"""

import html
import re

# Relaxed URL recogniser: either an explicit scheme / ``www.`` prefix, or a
# bare host name ending in an alphabetic TLD. Matched against the raw notes,
# so ``<``, ``>`` and quotes always end a URL. Compiled patterns are safe to
# share between threads.
URL_PATTERN = re.compile(
    r"(?:[a-z][a-z0-9+.\-]*://|www\.)[^\s<>\"']+"
    r"|(?<![\w@.\-])(?:[a-z0-9](?:[a-z0-9\-]*[a-z0-9])?\.)+[a-z]{2,}(?![\w\-])"
    r"(?::\d{1,5})?(?:/[^\s<>\"']*)?",
    re.IGNORECASE,
)

SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)

TRAILING_PUNCTUATION = ".,;:!?)]}"


def _text(raw: str) -> str:
    return html.escape(raw).replace("\r\n", "\n").replace("\n", "<br>")


def _link(url: str) -> str:
    href = url if SCHEME_PATTERN.match(url) else "http://" + url
    return f'<a href="{html.escape(href)}">{html.escape(url)}</a>'


def notes_html(notes: str) -> str:
    """Escape ``notes``, keep its line breaks and turn URLs into links."""
    parts = []
    end = 0
    for match in URL_PATTERN.finditer(notes):
        url = match.group(0)
        # Sentence punctuation right after a link is not part of it.
        url = url.rstrip(TRAILING_PUNCTUATION)
        if not url:
            continue
        parts.append(_text(notes[end:match.start()]))
        parts.append(_link(url))
        end = match.start() + len(url)
    parts.append(_text(notes[end:]))
    return "".join(parts)
