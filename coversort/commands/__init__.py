"""Command implementations for the coversort CLI."""

from __future__ import annotations

from pathlib import Path

from ..config import RuleStore, default_config_path
from ..fetcher import HttpFetcher
from ..models import SortResult
from ..sort_log import log_sort
from ..sorter import CoverSorter
from ..vault.store import VaultStore


def build_sorter(vault_path: Path, config_path: Path | None = None, *, record: bool = True) -> CoverSorter:
    """Wire a CoverSorter to the vault on disk, its rule file and urllib.

    With `record`, every non-trivial result is appended to the sort log.
    """
    rules = RuleStore(config_path or default_config_path(vault_path))
    rules.load()

    def on_result(result: SortResult) -> None:
        log_sort(vault_path, result)

    return CoverSorter(
        store=VaultStore(vault_path),
        rules=rules,
        fetcher=HttpFetcher(),
        on_result=on_result if record else None,
    )
