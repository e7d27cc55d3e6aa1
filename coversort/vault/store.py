"""Local-directory document store for a vault.

All paths passed in are vault-relative and "/"-separated. Paths that would
resolve outside the vault are rejected with ValueError.
"""

import re
import unicodedata
from pathlib import Path

_SEPARATOR_RUN = re.compile(r"/+")


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path.

    Backslashes become "/", repeated separators collapse, leading and
    trailing separators are dropped, non-breaking spaces become spaces,
    and the result is NFC-normalized.
    """
    path = path.replace("\\", "/").replace("\u00a0", " ").replace("\u202f", " ")
    path = _SEPARATOR_RUN.sub("/", path).strip("/")
    return unicodedata.normalize("NFC", path)


class VaultStore:
    """Read/write access to files inside a vault directory."""

    def __init__(self, root: Path):
        self.root = root.resolve()

    def resolve(self, path: str) -> Path:
        """Absolute path for a vault-relative path."""
        rel = normalize_path(path)
        full = (self.root / rel).resolve() if rel else self.root
        if full != self.root and self.root not in full.parents:
            raise ValueError(f"Path escapes vault: {path}")
        return full

    def relative(self, path: Path) -> str:
        """Vault-relative "/" path for an absolute path inside the vault."""
        rel = path.resolve().relative_to(self.root)
        return str(rel).replace("\\", "/")

    def read_text(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def write_text(self, path: str, text: str) -> None:
        # newline="" keeps line endings exactly as given
        with self.resolve(path).open("w", encoding="utf-8", newline="") as f:
            f.write(text)

    def write_binary(self, path: str, data: bytes) -> None:
        """Create a new binary file. Raises FileExistsError if one is already there."""
        with self.resolve(path).open("xb") as f:
            f.write(data)

    def delete_entry(self, path: str) -> None:
        self.resolve(path).unlink()

    def create_folder(self, path: str) -> None:
        """Create a folder and its parents. An existing folder is not an error."""
        self.resolve(path).mkdir(parents=True, exist_ok=True)

    def exists(self, path: str) -> Path | None:
        full = self.resolve(path)
        return full if full.exists() else None

    def list_all_folders(self) -> list[str]:
        """Every non-hidden folder in the vault, vault-relative, sorted."""
        folders = []
        for p in self.root.rglob("*"):
            if not p.is_dir():
                continue
            rel = p.relative_to(self.root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            folders.append(str(rel).replace("\\", "/"))
        return sorted(folders)
