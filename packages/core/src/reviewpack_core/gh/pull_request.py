from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import datetime

import requests
from github import Github, GithubException

from reviewpack_core.config import RepoConfig
from reviewpack_core.errors import InputError, TransportError
from reviewpack_core.models import (
    CommentInfo,
    CommitInfo,
    FileChange,
    PullRequestRecord,
    RepoRef,
    ReviewInfo,
)
from reviewpack_core.runlog import RunLog


def get_repo(repo_name: str, token: str):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_pull_requests(repo, state: str = "open"):
    return repo.get_pulls(state=state)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def _login(user) -> str | None:
    return user.login if user is not None else None


def to_pull_request_record(pr, owner: str, name: str) -> PullRequestRecord:
    """Map a PyGithub PullRequest (plus its files, commits, comments and reviews) onto a record."""
    commits = []
    for c in pr.get_commits():
        git_author = c.commit.author
        commits.append(
            CommitInfo(
                sha=c.sha,
                message=c.commit.message,
                author=git_author.name if git_author is not None else None,
                date=_iso(git_author.date) if git_author is not None else None,
            )
        )

    return PullRequestRecord(
        number=pr.number,
        title=pr.title,
        description=pr.body or "",
        repo=RepoRef(owner=owner, name=name),
        changed_files=[
            FileChange(
                filename=f.filename,
                status=f.status,
                patch=f.patch,
                additions=f.additions,
                deletions=f.deletions,
                changes=f.changes,
            )
            for f in pr.get_files()
        ],
        author=_login(pr.user),
        created_at=_iso(pr.created_at),
        updated_at=_iso(pr.updated_at),
        is_merged=pr.merged_at is not None,
        merged_at=_iso(pr.merged_at),
        mergeable=pr.mergeable,
        labels=[label.name for label in pr.labels],
        commits=commits,
        review_comments=[
            CommentInfo(
                id=c.id,
                body=c.body,
                path=c.path,
                position=c.position,
                author=_login(c.user),
                created_at=_iso(c.created_at),
            )
            for c in pr.get_review_comments()
        ],
        reviews=[
            ReviewInfo(
                id=r.id,
                state=r.state,
                author=_login(r.user),
                body=r.body,
                submitted_at=_iso(r.submitted_at),
            )
            for r in pr.get_reviews()
        ],
    )


def fetch_pull_request(token: str, repo_config: RepoConfig, pr_number: int) -> PullRequestRecord:
    try:
        repo = get_repo(repo_config.slug, token=token)
        return to_pull_request_record(get_pull(repo, pr_number), repo_config.owner, repo_config.name)
    except GithubException as e:
        raise TransportError(f"Failed to fetch GitHub pull request details ({e.status})") from e
    except requests.RequestException as e:
        raise TransportError(f"Failed to fetch GitHub pull request details: {e}") from e


def fetch_pull_requests(
    token: str,
    selections: dict[str, tuple[RepoConfig, int]],
    log: RunLog,
) -> dict[str, PullRequestRecord]:
    """Fetch one PR per selected repository concurrently.

    Unlike tickets, PR failures are not tolerated individually: the first
    failure cancels the outstanding fetches and aborts the batch.
    """
    if not selections:
        raise InputError("Please select at least one PR to review")

    results: dict[str, PullRequestRecord] = {}
    with ThreadPoolExecutor(max_workers=len(selections)) as pool:
        futures = {}
        for key, (repo_config, number) in selections.items():
            log.info("GitHub", f"Fetching {key} PR #{number}", repo_config.slug)
            futures[pool.submit(fetch_pull_request, token, repo_config, number)] = key

        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in done:
            key = futures[future]
            error = future.exception()
            if error is not None:
                for other in pending:
                    other.cancel()
                label = key[:1].upper() + key[1:]
                log.error("GitHub", f"{label} PR fetch failed", str(error))
                raise TransportError(f"{label} PR Error: {error}") from error
            results[key] = future.result()

    log.info("GitHub", f"Fetched {len(results)} pull request(s)", ", ".join(results))
    return {key: results[key] for key in selections}
