from __future__ import annotations

import re
from urllib.parse import urlparse

# Opening fences may carry a language tag (```html, ```json).
_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?")
_TAG_RE = re.compile(r"<[^>]+>")


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


def strip_code_fences(text: str) -> str:
    """Remove every markdown fence marker and trim surrounding whitespace.

    Only the ``` markers (and an optional language tag right after them) are
    removed; the text between fences is kept.
    """
    return _FENCE_RE.sub("", text).strip()


def extract_json_array(text: str) -> str:
    """Return the outermost `[...]` span of fence-stripped text, or the text itself."""
    cleaned = strip_code_fences(text)
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start >= 0 and end > start:
        return cleaned[start : end + 1]
    return cleaned


def strip_tags(html: str) -> str:
    """Drop markup and collapse whitespace."""
    return re.sub(r"\s+", " ", _TAG_RE.sub(" ", html)).strip()


def truncate(text: str, max_length: int, marker: str = "\n...[truncated]") -> str:
    """Trim text to max_length characters, appending a marker when cut."""
    if max_length < 0 or len(text) <= max_length:
        return text
    return text[:max_length] + marker
