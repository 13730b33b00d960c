"""files command - wizard step 3: concatenate local source files."""

from __future__ import annotations

from functools import partial
from pathlib import Path

import click
from rich.console import Console
from rich.tree import Tree

from reviewpack_core.errors import InputError
from reviewpack_core.local.files import concatenate_files, expand_paths, read_file, read_tree
from reviewpack_core.runlog import RunLog
from reviewpack_cli.handoff import load_pull_requests
from reviewpack_store import models as keys

console = Console()


@click.command("files")
@click.argument("paths", nargs=-1)
@click.option("--tree", "tree_dir", default=None, help="Print the directory tree under DIR and exit.")
@click.option(
    "--changed",
    is_flag=True,
    help="Also include the files changed by the stored pull requests, resolved under each repo's local_path.",
)
@click.option("--include-binary", is_flag=True, help="Do not skip non-code files (images, lock files, ...).")
@click.pass_context
def files_cmd(ctx, paths: tuple[str, ...], tree_dir: str | None, changed: bool, include_binary: bool):
    """Concatenate PATHS (files or directories) into the review context.

    Directories are expanded recursively, minus the `exclude` patterns from
    .reviewpack.yml. Only paths under `allowed_paths` may be read.
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]

    if tree_dir is not None:
        try:
            nodes = read_tree(tree_dir, config.allowed_paths)
        except InputError as e:
            raise click.ClickException(str(e))
        tree = Tree(f"[bold]{tree_dir}[/bold]")
        _add_nodes(tree, nodes)
        console.print(tree)
        return

    selected = list(paths)
    if changed:
        selected.extend(_changed_files(store, config))
    if not selected:
        raise click.UsageError("Please select at least one file")

    log = RunLog()
    reader = partial(read_file, allowed_roots=config.allowed_paths)
    try:
        blob = concatenate_files(expand_paths(selected, config.exclude), reader, log, include_binary=include_binary)
    except InputError as e:
        raise click.ClickException(str(e))

    store.save_json(keys.CONCATENATED_FILES, blob)

    for entry in log.filter(level="warn"):
        console.print(f"[yellow]{entry.message}[/yellow] [dim]{entry.details or ''}[/dim]")
    console.print(f"[green]Concatenated files saved[/green] ({len(blob):,} characters)")
    console.print("Next: [bold]reviewpack references[/bold] or [bold]reviewpack submit[/bold]")


def _add_nodes(branch: Tree, nodes) -> None:
    for node in nodes:
        if node.is_directory:
            _add_nodes(branch.add(f"[bold blue]{node.name}/[/bold blue]"), node.children or [])
        else:
            branch.add(node.name)


def _changed_files(store, config) -> list[str]:
    """Local paths of files touched by the stored PRs, skipping removed ones."""
    found = []
    for key, pr in load_pull_requests(store).items():
        repo_config = config.repos.get(key)
        if repo_config is None or not repo_config.local_path:
            console.print(f"[yellow]No local_path configured for {key}; skipping its changed files.[/yellow]")
            continue
        for change in pr.changed_files:
            if change.status == "removed":
                continue
            local = Path(repo_config.local_path) / change.filename
            if local.is_file():
                found.append(local.as_posix())
    return found
