"""Rules commands - view and edit the domain -> folder rules."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import RuleStore
from ..rules import WWW_PREFIX, normalize_domain
from ..vault.store import VaultStore, normalize_path


def clean_domain(raw: str) -> str:
    """Accept "medium.com", "www.medium.com" or a full URL; return the bare host."""
    raw = raw.strip().lower()
    if "://" in raw:
        return normalize_domain(raw)
    return WWW_PREFIX.sub("", raw.split("/", 1)[0])


def clean_folder(raw: str) -> str:
    return normalize_path(raw.strip()) if raw.strip() else ""


def _warn_missing_folder(console: Console, vault: VaultStore | None, folder: str) -> None:
    if vault is None or not folder:
        return
    if folder not in vault.list_all_folders():
        console.print(f"[yellow]Folder '{escape(folder)}' does not exist yet; it will be created on first use.[/yellow]")


def run_rules_list(store: RuleStore) -> int:
    """Print rules in priority order. Returns the number of rules."""
    console = Console()
    rules = store.get()

    if not rules:
        console.print("[dim]No rules configured. Images will be saved to the vault root.[/dim]")
        return 0

    table = Table(title="Domain rules (first match wins)")
    table.add_column("#", justify="right")
    table.add_column("Domain", style="bold")
    table.add_column("Image folder")

    for i, rule in enumerate(rules, start=1):
        table.add_row(str(i), escape(rule.domain or "(empty)"), escape(rule.folder or "/ (vault root)"))

    console.print(table)
    return len(rules)


def run_rules_add(store: RuleStore, domain: str, folder: str = "", vault: VaultStore | None = None) -> int:
    """Append a rule. Returns 0 on success, 1 on bad input."""
    console = Console()
    cleaned = clean_domain(domain)
    if not cleaned:
        console.print(f"[red]Not a usable domain:[/red] {escape(domain)}")
        return 1

    rule = store.add(cleaned, clean_folder(folder))
    console.print(f"Added rule {len(store.get())}: [bold]{escape(rule.domain)}[/bold] -> {escape(rule.folder or '/')}")
    _warn_missing_folder(console, vault, rule.folder)
    return 0


def run_rules_remove(store: RuleStore, number: int) -> int:
    """Delete the rule shown as `number` (1-based) by `rules list`."""
    console = Console()
    try:
        rule = store.remove(number - 1)
    except IndexError:
        console.print(f"[red]No rule #{number}[/red] ({len(store.get())} rules)")
        return 1
    console.print(f"Removed rule #{number}: {escape(rule.domain)} -> {escape(rule.folder or '/')}")
    return 0


def run_rules_set(
    store: RuleStore,
    number: int,
    *,
    domain: str | None = None,
    folder: str | None = None,
    vault: VaultStore | None = None,
) -> int:
    """Edit the domain and/or folder of rule `number` (1-based)."""
    console = Console()
    if domain is not None:
        domain = clean_domain(domain)
        if not domain:
            console.print("[red]Not a usable domain.[/red]")
            return 1
    if folder is not None:
        folder = clean_folder(folder)

    try:
        rule = store.update(number - 1, domain=domain, folder=folder)
    except IndexError:
        console.print(f"[red]No rule #{number}[/red] ({len(store.get())} rules)")
        return 1

    console.print(f"Rule #{number}: [bold]{escape(rule.domain)}[/bold] -> {escape(rule.folder or '/')}")
    if folder is not None:
        _warn_missing_folder(console, vault, rule.folder)
    return 0


def run_rules_folders(vault: VaultStore) -> int:
    """List vault folders usable as rule targets. Returns the count."""
    console = Console()
    folders = vault.list_all_folders()
    if not folders:
        console.print("[dim]No folders in vault.[/dim]")
        return 0
    for folder in folders:
        console.print(folder, markup=False, highlight=False)
    return len(folders)
