"""submit command - wizard step 5: build the prompt and generate the review."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from reviewpack_core.errors import ConfigurationError
from reviewpack_core.prompt import build_prompt, reinforce_sections
from reviewpack_core.runlog import RunLog
from reviewpack_cli.handoff import load_review_request
from reviewpack_store import models as keys

console = Console()

_LEVEL_STYLES = {"debug": "dim", "info": "cyan", "warn": "yellow", "error": "bold red"}


@click.command("submit")
@click.option("--preview", is_flag=True, help="Print the assembled prompt and exit without calling the model.")
@click.option("--show-log", is_flag=True, help="Print the run log after generation.")
@click.pass_context
def submit_cmd(ctx, preview: bool, show_log: bool):
    """Generate the code review from everything gathered so far.

    Requires `reviewpack files`; tickets, PRs and references are optional
    and replaced by placeholders when absent.

    \b
    Required environment variables (depending on provider):
      GEMINI_API_KEY     for provider: gemini (default)
      ANTHROPIC_API_KEY  for provider: anthropic
      OPENAI_API_KEY     for provider: openai
    """
    from reviewpack_core.reviewer import run_review

    config = ctx.obj["config"]
    store = ctx.obj["store"]
    log = RunLog()

    request = load_review_request(store, config, log)

    if preview:
        click.echo(reinforce_sections(build_prompt(request)))
        return

    try:
        with console.status(f"Generating review with [bold]{config.provider}[/bold]..."):
            outcome = run_review(request, config, log)
    except (ConfigurationError, ImportError) as e:
        raise click.UsageError(str(e))
    finally:
        if show_log:
            _print_log(log)

    if not outcome.result.success:
        raise click.ClickException(f"Failed to generate review: {outcome.result.error}")

    store.save_json(keys.REVIEW_RESULT, outcome.review.to_dict())
    console.print(f"[green]Review generated[/green] by [bold]{outcome.model}[/bold] at {outcome.generated_at}")
    console.print("Next: [bold]reviewpack results[/bold]")


def _print_log(log: RunLog) -> None:
    table = Table(title="Run Log", show_header=True, header_style="bold cyan")
    table.add_column("Time", style="dim", width=12)
    table.add_column("Level", width=6)
    table.add_column("Category", width=10)
    table.add_column("Message")
    table.add_column("Details", style="dim", max_width=60)
    for entry in log.entries:
        style = _LEVEL_STYLES[entry.level]
        table.add_row(
            entry.timestamp.strftime("%H:%M:%S.%f")[:-3],
            f"[{style}]{entry.level.upper()}[/{style}]",
            entry.category,
            entry.message,
            entry.details or "",
        )
    console.print(table)
