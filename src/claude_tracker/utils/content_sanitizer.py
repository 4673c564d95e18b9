"""Flatten and clean message content, and count what the human typed."""

import re

# Assistant text kept per message, in characters
MAX_ASSISTANT_CHARS = 5000
ELLIPSIS = "..."

_TAG_RE = re.compile(r"<[^>]*>?|>")


def strip_markup(text: str) -> str:
    """Remove anything that looks like a markup tag.

    Text between tags is kept. An unterminated ``<`` drops the rest of
    the text and a stray ``>`` is dropped on its own.
    """
    if not text:
        return ""
    return _TAG_RE.sub("", text)


def extract_raw_text(content) -> str:
    """Join every text block, preserving newlines."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    texts.append(text)
        return "\n".join(texts)
    return ""


def extract_display_text(content) -> str:
    """First text block as a single whitespace-collapsed line."""
    if isinstance(content, str):
        return " ".join(content.split())
    if isinstance(content, list):
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    return " ".join(text.split())
    return ""


def count_lines(text: str) -> int:
    if not text:
        return 0
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return len(lines)


def count_human_contribution(text: str) -> tuple[int, int, int]:
    """Return (lines, words, chars) typed by the user, ignoring markup."""
    stripped = strip_markup(text).strip()
    if not stripped:
        return 0, 0, 0
    lines = sum(1 for line in stripped.split("\n") if line.strip())
    return lines, len(stripped.split()), len(stripped)


def truncate_assistant_text(text: str, limit: int = MAX_ASSISTANT_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text
