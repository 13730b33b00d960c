"""tickets command - wizard step 1: fetch Jira tickets."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from reviewpack_core.errors import ConfigurationError, ReviewPackError
from reviewpack_core.jira.tickets import JiraClient, fetch_tickets, parse_ticket_numbers
from reviewpack_core.runlog import RunLog
from reviewpack_cli.handoff import save_tickets

console = Console()


@click.command("tickets")
@click.argument("ticket_numbers", nargs=-1, required=True)
@click.pass_context
def tickets_cmd(ctx, ticket_numbers: tuple[str, ...]):
    """Fetch Jira tickets, e.g. `reviewpack tickets PROJ-1,PROJ-2`.

    Tickets that fail to load are kept as error placeholders; the step only
    fails when none of them could be fetched.

    \b
    Required environment variables:
      JIRA_URL        Base URL of the Jira instance
      JIRA_EMAIL      Account email used for basic auth
      JIRA_API_TOKEN  Jira API token
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]
    numbers = parse_ticket_numbers(",".join(ticket_numbers))

    try:
        client = JiraClient(config.jira_url, config.jira_email, config.jira_api_token)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    log = RunLog()
    try:
        tickets = fetch_tickets(client, numbers, log)
    except ReviewPackError as e:
        raise click.ClickException(str(e))

    save_tickets(store, tickets)

    table = Table(title="Jira Tickets", show_header=True, header_style="bold cyan")
    table.add_column("Key", style="bold", width=14)
    table.add_column("Summary", max_width=70)
    for t in tickets:
        style = "red" if t.is_placeholder else "white"
        table.add_row(t.key, f"[{style}]{t.summary}[/{style}]")
    console.print(table)

    failed = sum(1 for t in tickets if t.is_placeholder)
    if failed:
        console.print(f"[yellow]{failed} ticket(s) could not be fetched and were kept as placeholders.[/yellow]")
    console.print("Next: [bold]reviewpack prs --pr <repo>=<number>[/bold]")
