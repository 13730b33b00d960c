"""init command - interactive setup wizard.

Writes .reviewpack.yml with the provider, the hand-off store and the
GitHub repositories whose PRs will be reviewed. Credentials are never
written to the file; the wizard only names the environment variables
to export.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import click
import yaml
from rich.console import Console

from reviewpack_core.config import PROVIDERS, ReviewPackConfig

console = Console()


@click.command("init")
@click.option("--repo", default=None, help="GitHub repository (owner/name). Auto-detected from git remote.")
@click.pass_context
def init_cmd(ctx, repo: str | None):
    """Create .reviewpack.yml for this project."""
    config_path = Path(ctx.obj["config_path"])
    console.print("\n[bold cyan]reviewpack init[/bold cyan] - setup wizard\n")

    # --- Detect repo from git remote ---
    if repo is None:
        repo = _detect_repo_from_git()
        if repo:
            console.print(f"[dim]Detected repository: {repo}[/dim]")
        else:
            repo = click.prompt("GitHub repository (owner/name)")
    if "/" not in repo:
        raise click.BadParameter(f"Expected owner/name, got {repo!r}.", param_hint="--repo")

    repo_key = click.prompt("Key for this repository", default="backend")
    owner, name = repo.split("/", 1)
    repos = {repo_key: {"owner": owner, "name": name, "local_path": ".", "description": repo_key.capitalize()}}

    while click.confirm("Add another repository (e.g. frontend)?", default=False):
        key = click.prompt("Repository key")
        slug = click.prompt("GitHub repository (owner/name)")
        if "/" not in slug:
            console.print(f"[yellow]Skipping {slug!r}: expected owner/name.[/yellow]")
            continue
        other_owner, other_name = slug.split("/", 1)
        local_path = click.prompt("Local checkout path", default=f"../{other_name}")
        repos[key] = {"owner": other_owner, "name": other_name, "local_path": local_path, "description": key.capitalize()}

    # --- Choose provider ---
    provider = click.prompt("AI provider", type=click.Choice(list(PROVIDERS)), default="gemini")

    # --- Choose store backend ---
    console.print("\nHand-off store:")
    console.print("  [bold]file[/bold]    - JSON file under .reviewpack/ (default)")
    console.print("  [bold]sqlite[/bold]  - local SQLite database")
    console.print("  [bold]memory[/bold]  - nothing persisted between commands")
    store_type = click.prompt("Store backend", type=click.Choice(["file", "sqlite", "memory"]), default="file")

    config: dict = {"provider": provider, "store": store_type, "repos": repos}
    if store_type == "sqlite":
        db_path = click.prompt("SQLite database path", default=".reviewpack.db")
        if db_path != ".reviewpack.db":
            config["store_path"] = db_path

    _write_config(config_path, config)
    console.print(f"[green]Created {config_path}[/green]")

    console.print(
        f"\n[yellow]Export [bold]{ReviewPackConfig.api_key_env(provider)}[/bold], GITHUB_TOKEN and "
        "JIRA_URL / JIRA_EMAIL / JIRA_API_TOKEN before running the wizard.[/yellow]"
    )
    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Start a review with: [bold]reviewpack tickets <KEY-123>[/bold]")


def _detect_repo_from_git() -> str | None:
    """Try to detect the GitHub repo slug from the git remote URL."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        # https://github.com/owner/repo.git  →  owner/repo
        # git@github.com:owner/repo.git      →  owner/repo
        if "github.com" not in url:
            return None
        slug = url.split("github.com")[-1].lstrip("/:").removesuffix(".git")
        return slug if "/" in slug else None
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None


def _write_config(path: Path, config: dict) -> None:
    """Write or update the config file, preserving any existing keys."""
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))
