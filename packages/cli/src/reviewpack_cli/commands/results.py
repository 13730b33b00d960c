"""results command - wizard step 6: display or download the generated review."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from reviewpack_core.sections import SECTION_TITLES, parse_sections
from reviewpack_cli.handoff import require_review

console = Console()


def download_filename(now: datetime | None = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"code-review-{stamp}.md"


@click.command("results")
@click.option("--raw", is_flag=True, help="Print the review text as returned by the model.")
@click.option("--download", is_flag=True, help="Save the review as code-review-<timestamp>.md.")
@click.option("--output", "output_path", default=None, help="Save the review to PATH (implies --download).")
@click.pass_context
def results_cmd(ctx, raw: bool, download: bool, output_path: str | None):
    """Show the generated review split into its sections."""
    review = require_review(ctx.obj["store"])

    if download or output_path:
        path = Path(output_path or download_filename())
        path.write_text(review.review, encoding="utf-8")
        console.print(f"[green]Review saved to {path}[/green]")
        return

    if raw:
        click.echo(review.review)
        return

    sections = parse_sections(review.review)
    if not any(getattr(sections, name).strip() for name in SECTION_TITLES):
        console.print("[yellow]No recognised sections found; showing the raw review.[/yellow]")
        console.print(Markdown(review.review))
        return

    for name, title in SECTION_TITLES.items():
        body = getattr(sections, name)
        console.print(
            Panel(
                Markdown(body) if body.strip() else "[dim]Nothing reported.[/dim]",
                title=f"[bold]{title}[/bold]",
                title_align="left",
                border_style="red" if name == "critical_issues" else "cyan",
            )
        )
