"""CLI entry point for reviewpack.

Commands follow the wizard order; each step reads the hand-off state that
earlier steps stored and writes its own:
  tickets     - fetch Jira tickets
  prs         - fetch GitHub pull requests (one per configured repository)
  files       - concatenate local source files (or show a directory tree)
  references  - select reference documents from the catalog
  submit      - build the prompt and generate the review
  results     - display, print or download the generated review
  init        - write a starter .reviewpack.yml
  reset       - clear all hand-off state
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from reviewpack_cli.commands.files import files_cmd
from reviewpack_cli.commands.init import init_cmd
from reviewpack_cli.commands.prs import prs_cmd
from reviewpack_cli.commands.references import references_cmd
from reviewpack_cli.commands.reset import reset_cmd
from reviewpack_cli.commands.results import results_cmd
from reviewpack_cli.commands.submit import submit_cmd
from reviewpack_cli.commands.tickets import tickets_cmd

console = Console()


def _build_store(config):
    """Instantiate the configured hand-off store.

    Store selection hierarchy:
      store: sqlite → SQLiteStore (store_path or .reviewpack.db)
      store: memory → MemoryStore (state dies with the process)
      (default)     → FileStore   (store_path or .reviewpack/state.json)

    This factory lives in cli.py so neither reviewpack_core nor
    reviewpack_store know about the CLI config format.
    """
    store_type = config.store

    if store_type == "sqlite":
        from reviewpack_store.sqlite import SQLiteStore

        return SQLiteStore(db_path=config.store_path or ".reviewpack.db")

    if store_type == "memory":
        from reviewpack_store.memory import MemoryStore

        return MemoryStore()

    from reviewpack_store.file import DEFAULT_PATH, FileStore

    return FileStore(path=config.store_path or DEFAULT_PATH)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewpack"),
    prog_name="reviewpack",
)
@click.option(
    "--config",
    "config_path",
    default=".reviewpack.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEWPACK_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Assemble Jira, GitHub and source context into a full LLM code review."""
    from reviewpack_core.config import load_config
    from reviewpack_core.errors import ConfigurationError

    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    _configure_logging("DEBUG" if verbose else config.log_level)

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.obj["config_path"] = config_path
    ctx.call_on_close(store.close)


main.add_command(tickets_cmd)
main.add_command(prs_cmd)
main.add_command(files_cmd)
main.add_command(references_cmd)
main.add_command(submit_cmd)
main.add_command(results_cmd)
main.add_command(init_cmd)
main.add_command(reset_cmd)
