"""Watch command - sort cover images of new notes as they appear."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.text import Text

from ..models import SortResult
from ..sort_log import format_sort_record, record_from_result
from ..watcher import SETTLE_SECONDS, run_watch_loop
from . import build_sorter


def run_watch(
    vault_path: Path,
    *,
    config_path: Path | None = None,
    settle_seconds: float = SETTLE_SECONDS,
) -> None:
    """
    Watch the vault for new notes and sort their cover images.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    sorter = build_sorter(vault_path, config_path)
    rules = sorter.rules.get()

    console.print(f"[bold]Watching[/bold] {vault_path}")
    console.print(f"  Rules: {len(rules)}")
    console.print(f"  Settle delay: {settle_seconds:.1f}s")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    sorted_count = 0
    failed_count = 0

    def on_result(result: SortResult) -> None:
        nonlocal sorted_count, failed_count
        if result.not_applicable:
            return
        if result.ok:
            sorted_count += 1
        else:
            failed_count += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        console.print(Text.assemble((timestamp, "dim"), " ", format_sort_record(record_from_result(result))))

    try:
        run_watch_loop(
            vault_path=vault_path,
            sorter=sorter,
            settle_seconds=settle_seconds,
            on_result=on_result,
        )
    except KeyboardInterrupt:
        pass

    console.print()
    console.print(f"[bold]Stopped.[/bold] Sorted {sorted_count} covers, {failed_count} failed.")
