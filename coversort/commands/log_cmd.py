"""Log command - show past pipeline runs."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from ..sort_log import format_sort_record, read_sort_log


def run_log(vault_path: Path, *, last_n: int | None = None, output_json: bool = False) -> int:
    """
    Print sort log entries, oldest first.

    Returns the number of entries displayed.
    """
    console = Console()
    records = read_sort_log(vault_path, last_n=last_n)

    if output_json:
        print(json.dumps([r.to_dict() for r in records], indent=2))
        return len(records)

    if not records:
        console.print("[dim]No covers sorted yet.[/dim]")
        return 0

    for record in records:
        console.print(f"[dim]{record.timestamp[:19].replace('T', ' ')}[/dim]")
        console.print(format_sort_record(record), markup=False, highlight=False)
        console.print()

    return len(records)
