"""Front matter block extraction, decoding and in-place rewriting.

A front matter block is a line "---", YAML, and another line "---" at the
very start of a note. Rewriting replaces only that block; the body after the
closing delimiter is kept byte-for-byte.
"""

import re
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

# Leading ---/--- block; the closing delimiter must end its line
FRONTMATTER_PATTERN = re.compile(r"^---\n(.*?)\n---(?=\n|\Z)", re.DOTALL)

_handler = YAMLHandler()


def extract_block(text: str) -> re.Match[str] | None:
    """Match the leading front matter block, if any."""
    return FRONTMATTER_PATTERN.match(text)


def decode(text: str) -> dict[str, Any] | None:
    """Parse the front matter of a note.

    Returns None when there is no block, the YAML is invalid (including
    values the loader cannot construct), or it does not decode to a mapping. An empty block decodes to {}.
    """
    match = extract_block(text)
    if match is None:
        return None
    try:
        data = _handler.load(match.group(1))
    except (yaml.YAMLError, ValueError, TypeError):
        # SafeLoader raises plain ValueError for bad timestamps and !!int tags
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        return None
    return data


def encode(metadata: dict[str, Any]) -> str:
    """Serialize a mapping as a ---/--- block, keeping key order."""
    body = _handler.export(metadata, sort_keys=False)
    return f"---\n{body}\n---"


def rewrite(text: str, metadata: dict[str, Any]) -> str:
    """Replace the leading front matter block of `text` with `metadata`.

    Raises ValueError if `text` has no front matter block.
    """
    match = extract_block(text)
    if match is None:
        raise ValueError("document has no front matter block")
    return encode(metadata) + text[match.end():]


def first_text(metadata: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    """Return the first usable value among `keys`, coerced to a string.

    Scalars use their string form, sequences join their scalar items with
    ", ", and mappings are ignored. None and empty strings fall through to
    the next key.
    """
    for key in keys:
        text = coerce_text(metadata.get(key))
        if text:
            return text
    return None


def coerce_text(value: Any) -> str | None:
    """Coerce a decoded YAML value to a string, or None if it has no text form."""
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, (list, tuple)):
        items = [coerce_text(item) for item in value]
        return ", ".join(item for item in items if item) or None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
