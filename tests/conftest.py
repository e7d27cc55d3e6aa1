"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from coversort.config import RuleStore
from coversort.fetcher import FetchedResource, FetchError
from coversort.models import Rule
from coversort.sorter import CoverSorter
from coversort.vault.store import VaultStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeFetcher:
    """Serves canned responses by URL and records every request."""

    def __init__(self, responses: dict[str, FetchedResource | FetchError] | None = None):
        self.responses = dict(responses or {})
        self.requests: list[str] = []

    def fetch(self, url: str) -> FetchedResource | FetchError:
        self.requests.append(url)
        return self.responses.get(url, FetchError(url=url, status=404, reason="Not Found"))


def write_note(vault: Path, rel: str, frontmatter_lines: list[str], body: str = "\n# Body\n\nText.\n") -> Path:
    """Write a note with a ---/--- block and return its path."""
    path = vault / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(["---", *frontmatter_lines, "---"]) + body, encoding="utf-8")
    return path


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


@pytest.fixture
def store(vault_path: Path) -> VaultStore:
    return VaultStore(vault_path)


@pytest.fixture
def rule_store(vault_path: Path) -> RuleStore:
    rules = RuleStore.for_vault(vault_path)
    rules.replace([Rule(domain="medium.com", folder="Clippings/Images")])
    return rules


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(
        {"https://cdn.x/pic.png": FetchedResource(data=PNG_BYTES, content_type="image/png")}
    )


@pytest.fixture
def sorter(store: VaultStore, rule_store: RuleStore, fetcher: FakeFetcher) -> CoverSorter:
    return CoverSorter(store=store, rules=rule_store, fetcher=fetcher)
