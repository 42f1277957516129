"""Wiki link and citation extraction from document bodies."""

import re
from posixpath import basename

from vaultgraph.core.models import Link, LinkType


# Wiki links are [[target]] or [[target|Display Text]]. The target runs
# up to the first "]" or "|"; the display text up to the first "]".
WIKI_TARGET_RUN = re.compile(r"[^\]|]*")

# Pattern for a single key inside a citation bracket. ASCII only: a key
# stops at the first non-ASCII character.
CITATION_KEY_PATTERN = re.compile(r"@(\w[\w:.\-]*)", re.ASCII)

# Characters of surrounding text kept on each side of a match
CONTEXT_WINDOW = 30


def filename_key(relative_path: str) -> str:
    """Return the filename-fallback key for a vault-relative path.

    The key is the last path segment with a trailing ``.md`` removed.
    """
    return basename(relative_path).removesuffix(".md")


def link_context(text: str, start: int, end: int) -> str:
    """Build the context snippet around ``text[start:end]``.

    Args:
        text: Full document body.
        start: Offset where the match begins.
        end: Offset where the match ends.

    Returns:
        Up to 30 characters either side of the match, newlines collapsed,
        with ``...`` marking a truncated start or end.
    """
    window_start = max(0, start - CONTEXT_WINDOW)
    window_end = min(len(text), end + CONTEXT_WINDOW)
    snippet = text[window_start:window_end].replace("\n", " ").strip()
    if window_start > 0:
        snippet = "..." + snippet
    if window_end < len(text):
        snippet = snippet + "..."
    return snippet


def _iter_wiki_links(text: str):
    """Yield (start, end, target, display) for each wiki link, left to right.

    A start that fails to match shares its closing position with every
    later ``[[`` up to that position, so scanning resumes there and runs in
    linear time on unclosed brackets.
    """
    pos = 0
    while True:
        start = text.find("[[", pos)
        if start == -1:
            return
        target_end = WIKI_TARGET_RUN.match(text, start + 2).end()
        if target_end == len(text):
            return
        if target_end == start + 2:
            pos = start + 1
            continue

        target = text[start + 2 : target_end]
        if text[target_end] == "|":
            display_end = text.find("]", target_end + 1)
            if display_end == -1:
                return
            if display_end > target_end + 1 and text.startswith("]]", display_end):
                yield start, display_end + 2, target, text[target_end + 1 : display_end]
                pos = display_end + 2
            else:
                pos = display_end
        elif text.startswith("]]", target_end):
            yield start, target_end + 2, target, None
            pos = target_end + 2
        else:
            pos = target_end


def _iter_citation_brackets(text: str):
    """Yield (start, end, content) for brackets that may hold citations.

    A bracket qualifies when its content has an ``@`` before its last
    character, as in ``[@key]``, ``[@a; @b]`` or ``[see @key, p. 4]``. The
    bracket opens at the first ``[`` after the previous ``]``.
    """
    pos = 0
    while True:
        start = text.find("[", pos)
        if start == -1:
            return
        close = text.find("]", start + 1)
        if close == -1:
            return
        content = text[start + 1 : close]
        if "@" in content[:-1]:
            yield start, close + 1, content
        pos = close + 1


def parse_wiki_links(text: str) -> list[Link]:
    """Extract all wiki links from text, in document order.

    Backslash-escaped brackets are not special: ``\\[[a]]`` still contains
    ``[[a]]``. Nested links close at the first ``]]``, so
    ``[[outer[[inner]]outer]]`` yields a single link to ``outer[[inner``.
    Links inside code fences are parsed like any other text.

    Args:
        text: Document body.

    Returns:
        List of wikilink ``Link`` objects. Targets are trimmed and may be
        empty.
    """
    links = []
    for start, end, target, display_text in _iter_wiki_links(text):
        if display_text is not None:
            display_text = display_text.strip()
        links.append(
            Link(
                target_id=target.strip(),
                display_text=display_text,
                context=link_context(text, start, end),
                link_type=LinkType.WIKILINK,
            )
        )
    return links


def parse_citations(text: str) -> list[Link]:
    """Extract Pandoc-style citation keys from text.

    Brackets containing ``mailto:`` and brackets that open a Markdown link
    (``[...](``) are ignored. Each key is reported once, at its first
    occurrence; all keys from one bracket share that bracket's context.

    Args:
        text: Document body.

    Returns:
        List of citation ``Link`` objects keyed by citation key.
    """
    links = []
    seen: set[str] = set()

    for start, end, content in _iter_citation_brackets(text):
        if "mailto:" in content.lower():
            continue
        if text[end : end + 1] == "(":
            continue

        context = link_context(text, start, end)
        for key_match in CITATION_KEY_PATTERN.finditer(content):
            key = key_match.group(1)
            if key in seen:
                continue
            seen.add(key)
            links.append(
                Link(target_id=key, context=context, link_type=LinkType.CITATION)
            )

    return links
