import click
from rich.console import Console

console = Console()


@click.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_context
def reset_cmd(ctx, yes: bool):
    """Clear all stored wizard state (tickets, PRs, files, references, review)."""
    if not yes:
        click.confirm("Clear all stored review state?", abort=True)
    ctx.obj["store"].clear()
    console.print("[green]Review state cleared.[/green]")
