"""Filename derivation for downloaded cover images."""

import posixpath
import re
from urllib.parse import SplitResult, urlsplit

DEFAULT_EXTENSION = ".jpg"

# Characters illegal in common filesystems
ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')
# "#" breaks YAML values and wiki links
HASH_CHARS = re.compile(r"#")
WHITESPACE_RUN = re.compile(r"\s+")

# Used only when the image reference is not an absolute URL
IMAGE_SUFFIX_PATTERN = re.compile(r"\.(jpg|jpeg|png|gif|webp|bmp)(?:\?|$)", re.IGNORECASE)

# Checked in order; first substring found in the content type wins
MIME_EXTENSIONS: list[tuple[tuple[str, ...], str]] = [
    (("jpeg", "jpg"), ".jpg"),
    (("png",), ".png"),
    (("gif",), ".gif"),
    (("webp",), ".webp"),
    (("bmp",), ".bmp"),
]


def sanitize_filename(name: str) -> str:
    """Strip characters that are unsafe in filenames or front matter."""
    name = ILLEGAL_FILENAME_CHARS.sub("", name)
    name = HASH_CHARS.sub("", name)
    name = WHITESPACE_RUN.sub(" ", name)
    return name.strip()


def derive_base_name(title: str, author: str | None = None) -> str:
    """Build "title-author" (or just "title") and sanitize it.

    May return an empty string; callers decide what to do with that.
    """
    raw = f"{title}-{author}" if author else title
    return sanitize_filename(raw)


def _parse_absolute(url: str) -> SplitResult | None:
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme:
        return None
    return parts


def extension_from_url(url: str) -> str | None:
    """Extension from the URL path, or from a known image suffix if the URL is not absolute."""
    parts = _parse_absolute(url)
    if parts is None:
        match = IMAGE_SUFFIX_PATTERN.search(url)
        return "." + match.group(1) if match else None

    last_segment = posixpath.basename(parts.path)
    if "." not in last_segment:
        return None
    suffix = last_segment.rsplit(".", 1)[1]
    return "." + suffix if suffix else None


def extension_from_mime(content_type: str | None) -> str | None:
    """Map a content type like "image/png; charset=..." to an extension."""
    if not content_type:
        return None
    lowered = content_type.lower()
    for needles, extension in MIME_EXTENSIONS:
        if any(needle in lowered for needle in needles):
            return extension
    return None


def infer_extension(image_url: str, content_type: str | None = None) -> str:
    """Pick an extension for a downloaded image.

    Priority: URL path suffix, then content type, then DEFAULT_EXTENSION.
    """
    return extension_from_url(image_url) or extension_from_mime(content_type) or DEFAULT_EXTENSION
