"""Sort command - run the pipeline by hand over existing notes."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..sort_log import format_sort_record, record_from_result
from ..sorter import CoverSorter
from . import build_sorter


def resolve_note(vault_path: Path, note: Path) -> str | None:
    """Vault-relative path for a note given on the command line.

    Relative paths are tried against the working directory first, then
    against the vault. Returns None for paths outside the vault.
    """
    vault = vault_path.resolve()
    candidates = [note] if note.is_absolute() else [Path.cwd() / note, vault / note]
    for candidate in candidates:
        full = candidate.resolve()
        if not full.exists():
            continue
        try:
            return str(full.relative_to(vault)).replace("\\", "/")
        except ValueError:
            continue
    return None


def run_sort(
    vault_path: Path,
    notes: list[Path],
    *,
    config_path: Path | None = None,
    sorter: CoverSorter | None = None,
) -> int:
    """
    Process each note once, without a settle delay.

    Returns 1 if any note is missing or failed for a reason other than
    having nothing to sort, else 0.
    """
    console = Console()
    sorter = sorter or build_sorter(vault_path, config_path)

    exit_code = 0
    for note in notes:
        note_path = resolve_note(vault_path, note)
        if note_path is None:
            console.print(f"[red]Not a note in this vault:[/red] {escape(str(note))}", highlight=False)
            exit_code = 1
            continue

        result = sorter.on_document_created(note_path)
        if result.not_applicable:
            console.print(f"[dim]- {escape(result.note_path)}: {result.error.message}[/dim]", highlight=False)
            continue
        if not result.ok:
            exit_code = 1
        console.print(format_sort_record(record_from_result(result)), markup=False, highlight=False)

    return exit_code
