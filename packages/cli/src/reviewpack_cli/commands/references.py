"""references command - wizard step 4: pick reference documents from the catalog."""

from __future__ import annotations

from functools import partial
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from reviewpack_core.errors import InputError
from reviewpack_core.local.files import read_file
from reviewpack_core.references import load_reference_contents
from reviewpack_core.runlog import RunLog
from reviewpack_store import models as keys

console = Console()


@click.command("references")
@click.argument("ids", nargs=-1)
@click.option("--list", "list_only", is_flag=True, help="List the reference catalog and exit.")
@click.pass_context
def references_cmd(ctx, ids: tuple[str, ...], list_only: bool):
    """Select reference documents (schema, business context, coding standards) by catalog id.

    Catalog entries come from the `references` section of .reviewpack.yml;
    their paths are relative to the config file. Running with no ids clears
    the selection.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]
    catalog = config.reference_catalog()

    if list_only:
        if not catalog:
            console.print("[yellow]No reference files configured. Add them under `references` in .reviewpack.yml.[/yellow]")
            return
        table = Table(title="Reference Files", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="bold")
        table.add_column("Type")
        table.add_column("Name")
        table.add_column("Path", style="dim")
        for entry in catalog.values():
            table.add_row(entry.id, entry.type, entry.name, entry.path)
        console.print(table)
        return

    base_dir = str(Path(ctx.obj["config_path"]).resolve().parent)
    reader = partial(read_file, allowed_roots=[*config.allowed_paths, base_dir])
    log = RunLog()
    try:
        contents = load_reference_contents(ids, catalog, reader, log, base_dir=base_dir)
    except InputError as e:
        raise click.ClickException(str(e))

    store.save_json(keys.REFERENCE_CONTENTS, contents)
    if contents:
        console.print(f"[green]Saved {len(contents)} reference file(s):[/green] {', '.join(contents)}")
    else:
        console.print("[dim]No reference files selected.[/dim]")
    console.print("Next: [bold]reviewpack submit[/bold]")
