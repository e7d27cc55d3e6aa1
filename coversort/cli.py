"""CLI entrypoint for coversort."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import RuleStore, default_config_path


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_rules(ctx: click.Context) -> RuleStore:
    store = RuleStore(ctx.obj["config"])
    try:
        store.load()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    return store


@click.group()
@click.version_option(__version__, prog_name="coversort")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the vault directory (defaults to the current directory)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Rule file (defaults to <vault>/.coversort/config.json)",
)
@click.option("--verbose", is_flag=True, help="Log every decision, including skipped notes")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, config_path: Path | None, verbose: bool) -> None:
    """coversort - download note cover images into per-domain vault folders.

    New notes whose front matter has an `image` URL get the image saved
    locally, named after the note's title and author, and the front matter
    re-pointed at the local copy.
    """
    ctx.ensure_object(dict)
    if vault is None:
        vault = Path.cwd()

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    vault = vault.resolve()
    ctx.obj["vault"] = vault
    ctx.obj["config"] = config_path or default_config_path(vault)
    _configure_logging(verbose)


@cli.command()
@click.option(
    "--settle",
    "settle_seconds",
    type=float,
    default=0.3,
    show_default=True,
    help="Seconds a new note must sit before it is read",
)
@click.pass_context
def watch(ctx: click.Context, settle_seconds: float) -> None:
    """Watch the vault and sort covers of newly created notes.

    Runs until interrupted (Ctrl+C). Existing notes and edits are ignored.

    Examples:

        coversort watch

        coversort --vault ~/Notes watch --settle 1
    """
    from .commands.watch_cmd import run_watch

    _load_rules(ctx)
    run_watch(ctx.obj["vault"], config_path=ctx.obj["config"], settle_seconds=settle_seconds)


@cli.command()
@click.argument("notes", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.pass_context
def sort(ctx: click.Context, notes: tuple[Path, ...]) -> None:
    """Sort the cover image of existing NOTES now.

    Use this to retry a note whose download failed.
    """
    from .commands import build_sorter
    from .commands.sort_cmd import run_sort

    _load_rules(ctx)
    sorter = build_sorter(ctx.obj["vault"], ctx.obj["config"])
    sys.exit(run_sort(ctx.obj["vault"], list(notes), sorter=sorter))


# -----------------------------------------------------------------------------
# Rule editing
# -----------------------------------------------------------------------------


@cli.group()
def rules() -> None:
    """View and edit domain -> folder rules.

    Rules are checked in order; the first whose domain equals the note's
    source domain (or is a parent of it) decides the image folder.
    """
    pass


@rules.command("list")
@click.pass_context
def rules_list(ctx: click.Context) -> None:
    """List rules in priority order."""
    from .commands.rules_cmd import run_rules_list

    run_rules_list(_load_rules(ctx))


@rules.command("add")
@click.argument("domain")
@click.argument("folder", required=False, default="")
@click.pass_context
def rules_add(ctx: click.Context, domain: str, folder: str) -> None:
    """Add a rule sending images from DOMAIN to FOLDER (vault root if omitted).

    Examples:

        coversort rules add medium.com Clippings/Images

        coversort rules add https://www.nytimes.com/ News/Covers
    """
    from .commands.rules_cmd import run_rules_add
    from .vault.store import VaultStore

    sys.exit(run_rules_add(_load_rules(ctx), domain, folder, vault=VaultStore(ctx.obj["vault"])))


@rules.command("remove")
@click.argument("number", type=int)
@click.pass_context
def rules_remove(ctx: click.Context, number: int) -> None:
    """Delete rule NUMBER (as shown by `rules list`)."""
    from .commands.rules_cmd import run_rules_remove

    sys.exit(run_rules_remove(_load_rules(ctx), number))


@rules.command("set")
@click.argument("number", type=int)
@click.option("--domain", default=None, help="New domain")
@click.option("--folder", default=None, help="New image folder ('' for vault root)")
@click.pass_context
def rules_set(ctx: click.Context, number: int, domain: str | None, folder: str | None) -> None:
    """Change the domain and/or folder of rule NUMBER."""
    from .commands.rules_cmd import run_rules_set
    from .vault.store import VaultStore

    if domain is None and folder is None:
        raise click.UsageError("Nothing to change; pass --domain and/or --folder.")

    sys.exit(
        run_rules_set(
            _load_rules(ctx),
            number,
            domain=domain,
            folder=folder,
            vault=VaultStore(ctx.obj["vault"]),
        )
    )


@rules.command("folders")
@click.pass_context
def rules_folders(ctx: click.Context) -> None:
    """List vault folders that can be used as rule targets."""
    from .commands.rules_cmd import run_rules_folders
    from .vault.store import VaultStore

    run_rules_folders(VaultStore(ctx.obj["vault"]))


# -----------------------------------------------------------------------------
# Sort log
# -----------------------------------------------------------------------------


@cli.command("log")
@click.option("--last", "last_n", type=int, default=None, help="Show only the last N runs")
@click.option("--json", "output_json", is_flag=True, help="Output records as JSON")
@click.pass_context
def log_(ctx: click.Context, last_n: int | None, output_json: bool) -> None:
    """Show downloads and failures recorded by previous runs."""
    from .commands.log_cmd import run_log

    run_log(ctx.obj["vault"], last_n=last_n, output_json=output_json)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
