"""prs command - wizard step 2: fetch pull requests for the configured repositories."""

from __future__ import annotations

import click
import requests
from github import GithubException
from rich.console import Console

from reviewpack_core.errors import ReviewPackError
from reviewpack_core.gh.pull_request import fetch_pull_requests, get_pull_requests, get_repo
from reviewpack_core.runlog import RunLog
from reviewpack_cli.handoff import save_pull_requests

console = Console()


def _parse_selection(value: str) -> tuple[str, int]:
    key, sep, number = value.partition("=")
    if not sep or not key.strip() or not number.strip().isdigit():
        raise click.BadParameter(f"Expected <repo>=<number>, got {value!r}.", param_hint="--pr")
    return key.strip(), int(number)


@click.command("prs")
@click.option(
    "--pr",
    "pr_options",
    multiple=True,
    help="Repository key and PR number, e.g. --pr backend=42. Repeat for several repositories. "
    "Omit to choose interactively from open PRs.",
)
@click.pass_context
def prs_cmd(ctx, pr_options: tuple[str, ...]):
    """Fetch GitHub pull request details.

    Repository keys come from the `repos` section of .reviewpack.yml. All
    selected PRs are fetched concurrently; any failure aborts the step.

    \b
    Required environment variables:
      GITHUB_TOKEN    GitHub personal access token (or use gh CLI)
    """
    from reviewpack_cli.auth import resolve_github_token

    config = ctx.obj["config"]
    store = ctx.obj["store"]

    token = resolve_github_token(config.github_token)
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )

    if pr_options:
        requested = dict(_parse_selection(v) for v in pr_options)
    else:
        requested = _prompt_for_prs(config, token)

    selections = {}
    for key, number in requested.items():
        repo_config = config.repos.get(key)
        if repo_config is None or not repo_config.owner or not repo_config.name:
            raise click.UsageError(f"No repository configured for {key!r}. Add it under `repos` in .reviewpack.yml.")
        selections[key] = (repo_config, number)

    log = RunLog()
    try:
        prs = fetch_pull_requests(token, selections, log)
    except ReviewPackError as e:
        raise click.ClickException(str(e))

    save_pull_requests(store, prs)

    for key, pr in prs.items():
        console.print(
            f"  [bold]{key}[/bold]  #{pr.number} {pr.title}  "
            f"[dim]({len(pr.changed_files)} file(s), {len(pr.commits)} commit(s))[/dim]"
        )
    console.print("Next: [bold]reviewpack files <paths>[/bold]")


def _prompt_for_prs(config, token: str) -> dict[str, int]:
    """List open PRs per configured repository and ask which to review."""
    requested: dict[str, int] = {}
    for key, repo_config in config.repos.items():
        if not repo_config.owner or not repo_config.name:
            continue
        label = key[:1].upper() + key[1:]
        try:
            open_prs = list(get_pull_requests(get_repo(repo_config.slug, token=token)))
        except GithubException as e:
            raise click.ClickException(f"{label} PR Error: Failed to list open pull requests ({e.status})")
        except requests.RequestException as e:
            raise click.ClickException(f"{label} PR Error: Failed to list open pull requests: {e}")
        if not open_prs:
            console.print(f"[yellow]No open pull requests in {repo_config.slug}.[/yellow]")
            continue
        console.print(f"\nOpen pull requests in [bold]{repo_config.slug}[/bold] ({key}):")
        for pr in open_prs:
            console.print(f"  [bold]#{pr.number}[/bold]  {pr.title}")
        number = click.prompt(f"PR number for {key} (blank to skip)", default="", show_default=False)
        if number.strip():
            if not number.strip().isdigit():
                raise click.BadParameter(f"Not a PR number: {number!r}")
            requested[key] = int(number)
    return requested
