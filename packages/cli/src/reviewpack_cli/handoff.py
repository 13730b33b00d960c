"""Translate between stored hand-off JSON and core records.

Optional data that is missing or malformed is treated as "no prior step
data". Data a step cannot run without raises a UsageError naming the
earlier step to re-run.
"""

from __future__ import annotations

import click

from reviewpack_core.config import ReviewPackConfig
from reviewpack_core.models import GeneratedReview, PullRequestRecord, ReviewRequest, TicketRecord
from reviewpack_core.references import resolve_reference_documents
from reviewpack_core.runlog import RunLog
from reviewpack_store import models as keys
from reviewpack_store.base import BaseStore


def save_tickets(store: BaseStore, tickets: list[TicketRecord]) -> None:
    store.save_json(keys.JIRA_TICKETS, [t.to_dict() for t in tickets])


def save_pull_requests(store: BaseStore, prs: dict[str, PullRequestRecord]) -> None:
    store.save_json(keys.GITHUB_PRS, {key: pr.to_dict() for key, pr in prs.items()})


def load_pull_requests(store: BaseStore) -> dict[str, PullRequestRecord]:
    data = store.load_json(keys.GITHUB_PRS)
    if not isinstance(data, dict):
        return {}
    return ReviewRequest.from_handoff(pull_requests=data).pull_requests


def require_concatenated_files(store: BaseStore) -> str:
    files = store.load_json(keys.CONCATENATED_FILES)
    if not files:
        raise click.UsageError("No concatenated files found. Run `reviewpack files` first.")
    return files if isinstance(files, str) else str(files)


def require_review(store: BaseStore) -> GeneratedReview:
    data = store.load_json(keys.REVIEW_RESULT)
    if not isinstance(data, dict) or "review" not in data:
        raise click.UsageError("No review data found. Run `reviewpack submit` first.")
    return GeneratedReview.from_dict(data)


def load_review_request(store: BaseStore, config: ReviewPackConfig, log: RunLog) -> ReviewRequest:
    """Gather every step's output into one request for the generator."""
    concatenated_files = require_concatenated_files(store)
    log.info("Submit", "Found concatenated files", f"{len(concatenated_files)} characters")

    tickets = store.load_json(keys.JIRA_TICKETS)
    prs = store.load_json(keys.GITHUB_PRS)
    contents = store.load_json(keys.REFERENCE_CONTENTS)

    request = ReviewRequest.from_handoff(
        tickets=tickets if isinstance(tickets, (list, dict)) else None,
        pull_requests=prs if isinstance(prs, dict) else None,
        concatenated_files=concatenated_files,
        reference_files=resolve_reference_documents(
            contents if isinstance(contents, dict) else {}, config.reference_catalog()
        ),
    )

    if request.tickets:
        log.info("Submit", "Loaded Jira ticket data", ", ".join(t.key for t in request.tickets))
    else:
        log.warn("Submit", "No Jira ticket data found")
    if request.pull_requests:
        log.info("Submit", "Loaded GitHub PR data", f"Repos: {', '.join(request.pull_requests)}")
    else:
        log.warn("Submit", "No GitHub PR data found")
    if request.reference_files:
        log.info("Submit", "Loaded reference contents", f"{len(request.reference_files)} files")
    else:
        log.warn("Submit", "No reference contents found")

    return request
