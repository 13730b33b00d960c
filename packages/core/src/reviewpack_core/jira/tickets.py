"""Jira ticket fetching with per-ticket failure tolerance.

A ticket that cannot be fetched is replaced by an inline placeholder record
so the remaining tickets still reach the prompt. The batch only fails when
every requested ticket failed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import requests

from reviewpack_core.errors import ConfigurationError, FormatError, InputError, TransportError
from reviewpack_core.models import TicketRecord
from reviewpack_core.runlog import RunLog, format_error

_MAX_WORKERS = 8


def parse_ticket_numbers(text: str) -> list[str]:
    """Split a comma-separated ticket list, trimming blanks."""
    return [t.strip() for t in text.split(",") if t.strip()]


class JiraClient:
    def __init__(self, base_url: str | None, email: str | None, api_token: str | None, timeout: float = 30):
        if not base_url or not api_token:
            raise ConfigurationError("Missing required Jira settings: set JIRA_URL and JIRA_API_TOKEN.")
        self.base_url = base_url.rstrip("/")
        self.auth = (email or "", api_token)
        self.timeout = timeout

    def get_ticket(self, key: str) -> TicketRecord:
        try:
            response = requests.get(
                f"{self.base_url}/rest/api/2/issue/{key}",
                auth=self.auth,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Jira request failed: {e}") from e

        if not response.ok:
            raise TransportError(f"Failed to fetch Jira ticket details ({response.status_code} {response.reason})")

        try:
            data = response.json()
            return TicketRecord(
                key=data["key"],
                summary=data["fields"]["summary"],
                description=data["fields"].get("description") or "",
            )
        except (ValueError, KeyError, TypeError) as e:
            raise FormatError(f"Unexpected Jira response for {key}") from e


def placeholder_ticket(key: str, error: BaseException) -> TicketRecord:
    return TicketRecord(
        key=key,
        summary=f"Error fetching ticket {key}",
        description=f"Failed to fetch this ticket: {format_error(error)}",
    )


def fetch_tickets(client: JiraClient, ticket_numbers: list[str], log: RunLog) -> list[TicketRecord]:
    """Fetch tickets concurrently, preserving the requested order."""
    if not ticket_numbers:
        raise InputError("Please enter at least one ticket number")

    log.info("Jira", f"Fetching {len(ticket_numbers)} Jira tickets", ", ".join(ticket_numbers))

    def _fetch_one(key: str) -> TicketRecord:
        try:
            ticket = client.get_ticket(key)
        except (TransportError, FormatError) as e:
            log.error("Jira", f"Failed to fetch ticket {key}", format_error(e))
            return placeholder_ticket(key, e)
        log.info("Jira", f"Successfully fetched ticket {key}", f"Summary: {ticket.summary[:50]}...")
        return ticket

    with ThreadPoolExecutor(max_workers=min(_MAX_WORKERS, len(ticket_numbers))) as pool:
        tickets = list(pool.map(_fetch_one, ticket_numbers))

    valid = [t for t in tickets if not t.is_placeholder]
    if not valid:
        raise TransportError("Failed to fetch any valid tickets. Check your Jira credentials and ticket numbers.")

    log.info("Jira", f"Completed fetching {len(valid)} valid tickets out of {len(ticket_numbers)} requested")
    return tickets
