"""
Cover sorter pipeline.

For a newly created note:
- decode its front matter
- pick a folder from the source link's domain
- download the cover image into that folder under a name built from the
  title (and author)
- point the note's `image` field at the local file

Runs stop at the first failure and leave the note as it was. Nothing is
raised to the caller; the outcome is returned as a SortResult and logged.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Callable

from .config import RuleStore
from .fetcher import FetchError, Fetcher
from .models import ErrorKind, PipelineError, SortResult, TargetAsset
from .naming import derive_base_name, infer_extension, sanitize_filename
from .rules import match_rule, normalize_domain
from .vault import frontmatter
from .vault.store import VaultStore, normalize_path

logger = logging.getLogger(__name__)

NOTE_EXTENSIONS = {".md"}

# Front matter keys, checked in order
LINK_KEYS = ("Link", "link", "url")
IMAGE_KEYS = ("image", "Image", "cover")
TITLE_KEYS = ("title", "Title")
AUTHOR_KEYS = ("author", "Author")

# Key rewritten to point at the local copy
LOCAL_IMAGE_KEY = "image"

FALLBACK_BASE_NAME = "cover"


def local_reference(file_name: str) -> str:
    """Wiki link to a file inside the vault."""
    return f"[[{file_name}]]"


def compose_target(folder: str, base_name: str, extension: str) -> TargetAsset:
    """Build the target for a downloaded image."""
    folder = normalize_path(folder) if folder else ""
    file_name = f"{base_name}{extension}"
    full_path = normalize_path(f"{folder}/{file_name}" if folder else file_name)
    return TargetAsset(base_name=base_name, extension=extension, folder=folder, full_path=full_path)


class CoverSorter:
    """Download and re-link cover images for new notes."""

    def __init__(
        self,
        store: VaultStore,
        rules: RuleStore,
        fetcher: Fetcher,
        on_result: Callable[[SortResult], None] | None = None,
    ):
        """
        Args:
            store: Document store for the vault
            rules: Domain -> folder rules
            fetcher: Transport used to download images
            on_result: Called with every result except "not applicable"
        """
        self.store = store
        self.rules = rules
        self.fetcher = fetcher
        self.on_result = on_result

    @staticmethod
    def is_eligible(note_path: str) -> bool:
        """Only markdown notes are processed."""
        return PurePosixPath(note_path).suffix.lower() in NOTE_EXTENSIONS

    def on_document_created(self, path: Path | str) -> SortResult:
        """Entry point for file-creation events.

        `path` may be absolute (inside the vault) or vault-relative.
        """
        if isinstance(path, Path) and path.is_absolute():
            note_path = self.store.relative(path)
        else:
            note_path = normalize_path(str(path))

        if not self.is_eligible(note_path):
            return self._finish(SortResult(
                note_path=note_path,
                error=PipelineError(ErrorKind.NOT_APPLICABLE, "not a markdown note"),
            ))
        return self.process(note_path)

    def process(self, note_path: str) -> SortResult:
        """Run the pipeline over one note. Never raises for pipeline failures."""
        result = SortResult(note_path=note_path)

        def abandon(kind: ErrorKind, message: str, **context) -> SortResult:
            result.error = PipelineError(kind, message, {"note": note_path, **context})
            return self._finish(result)

        # 1. read
        try:
            text = self.store.read_text(note_path)
        except (OSError, ValueError) as e:
            return abandon(ErrorKind.STORAGE_ERROR, f"could not read note: {e}")

        # 2. decode front matter
        if frontmatter.extract_block(text) is None:
            return abandon(ErrorKind.NOT_APPLICABLE, "no front matter")
        data = frontmatter.decode(text)
        if data is None:
            return abandon(ErrorKind.PARSE_ERROR, "front matter is not a valid YAML mapping")

        # 3. image reference
        image_url = frontmatter.first_text(data, IMAGE_KEYS)
        if not image_url:
            return abandon(ErrorKind.NOT_APPLICABLE, "no image in front matter")
        result.image_url = image_url

        # 4-5. folder from the source link's domain
        link = frontmatter.first_text(data, LINK_KEYS) or ""
        domain = normalize_domain(link)
        rule = match_rule(domain, self.rules.get())
        folder = rule.folder if rule else ""
        logger.debug("%s: domain=%r rule=%r folder=%r", note_path, domain, rule, folder)

        # 6. base name
        stem = PurePosixPath(note_path).stem
        title = frontmatter.first_text(data, TITLE_KEYS) or stem
        author = frontmatter.first_text(data, AUTHOR_KEYS) or ""
        base_name = derive_base_name(title, author) or sanitize_filename(stem) or FALLBACK_BASE_NAME

        # 7. download
        fetched = self.fetcher.fetch(image_url)
        if isinstance(fetched, FetchError):
            return abandon(
                ErrorKind.NETWORK_ERROR,
                f"download failed: {fetched.describe()}",
                url=image_url,
                status=fetched.status,
            )

        # 8-9. target path
        extension = infer_extension(image_url, fetched.content_type)
        target = compose_target(folder, base_name, extension)
        result.target = target

        # 10. folder
        if target.folder:
            try:
                self.store.create_folder(target.folder)
            except (OSError, ValueError) as e:
                return abandon(ErrorKind.STORAGE_ERROR, f"could not create folder: {e}", folder=target.folder)

        # 11. last write wins
        try:
            if self.store.exists(target.full_path) is not None:
                logger.info("Replacing existing file %s", target.full_path)
                self.store.delete_entry(target.full_path)
        except (OSError, ValueError) as e:
            return abandon(ErrorKind.STORAGE_ERROR, f"could not replace existing file: {e}", path=target.full_path)

        # 12. write image
        try:
            self.store.write_binary(target.full_path, fetched.data)
        except (OSError, ValueError) as e:
            return abandon(ErrorKind.STORAGE_ERROR, f"could not save image: {e}", path=target.full_path)
        result.bytes_written = len(fetched.data)

        # 13-14. point the note at the local copy
        data[LOCAL_IMAGE_KEY] = local_reference(target.file_name)
        try:
            self.store.write_text(note_path, frontmatter.rewrite(text, data))
        except (OSError, ValueError) as e:
            return abandon(ErrorKind.STORAGE_ERROR, f"could not update note: {e}", path=note_path)

        return self._finish(result)

    def _finish(self, result: SortResult) -> SortResult:
        error = result.error
        if error is None:
            logger.info(
                "Sorted cover for %s -> %s (%d bytes)",
                result.note_path,
                result.target.full_path if result.target else "?",
                result.bytes_written,
            )
        elif error.kind == ErrorKind.NOT_APPLICABLE:
            logger.debug("Skipping %s: %s", result.note_path, error.message)
            return result
        elif error.kind == ErrorKind.STORAGE_ERROR:
            logger.error("%s: %s %s", result.note_path, error.message, error.context)
        else:
            logger.warning("%s: %s %s", result.note_path, error.message, error.context)

        if self.on_result is not None:
            try:
                self.on_result(result)
            except OSError:
                logger.exception("Could not record result for %s", result.note_path)
        return result
