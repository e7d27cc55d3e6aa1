"""Vault access: front matter codec and document store."""

from .frontmatter import decode, encode, rewrite, first_text
from .store import VaultStore, normalize_path

__all__ = [
    "decode",
    "encode",
    "rewrite",
    "first_text",
    "VaultStore",
    "normalize_path",
]
