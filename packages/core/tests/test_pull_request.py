"""Tests for GitHub pull request fetching."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from github import GithubException

from reviewpack_core.config import RepoConfig
from reviewpack_core.errors import InputError, TransportError
from reviewpack_core.gh.pull_request import (
    fetch_pull_request,
    fetch_pull_requests,
    get_pull,
    get_pull_requests,
    to_pull_request_record,
)
from reviewpack_core.models import PullRequestRecord, RepoRef
from reviewpack_core.runlog import RunLog

BACKEND = RepoConfig(owner="acme", name="api")
FRONTEND = RepoConfig(owner="acme", name="web")


def _label(name):
    label = MagicMock()
    label.name = name
    return label


def _make_pr(merged_at=None):
    pr = MagicMock()
    pr.number = 42
    pr.title = "Fix login"
    pr.body = None
    pr.user.login = "alice"
    pr.created_at = datetime(2024, 1, 1, 12, 0, 0)
    pr.updated_at = datetime(2024, 1, 2, 8, 30, 0)
    pr.merged_at = merged_at
    pr.mergeable = True
    pr.labels = [_label("bug")]

    changed = MagicMock(filename="src/auth.py", status="modified", patch="@@ -1 +1 @@", additions=2, deletions=1, changes=3)
    pr.get_files.return_value = [changed]

    commit = MagicMock(sha="abcdef1234")
    commit.commit.message = "Fix login"
    commit.commit.author.name = "Alice"
    commit.commit.author.date = datetime(2024, 1, 1, 11, 0, 0)
    pr.get_commits.return_value = [commit]

    comment = MagicMock(id=5, body="nit", path="src/auth.py", position=3, created_at=datetime(2024, 1, 1, 13, 0, 0))
    comment.user.login = "bob"
    pr.get_review_comments.return_value = [comment]

    review = MagicMock(id=9, state="APPROVED", body="LGTM", submitted_at=None)
    review.user = None
    pr.get_reviews.return_value = [review]
    return pr


def _record(number=1):
    return PullRequestRecord(number=number, title="t", description="", repo=RepoRef(owner="acme", name="api"))


class TestHelpers:
    def test_get_pull_delegates(self):
        repo = MagicMock()
        get_pull(repo, 7)
        repo.get_pull.assert_called_once_with(7)

    def test_get_pull_requests_defaults_to_open(self):
        repo = MagicMock()
        get_pull_requests(repo)
        repo.get_pulls.assert_called_once_with(state="open")


class TestToPullRequestRecord:
    def test_maps_all_fields(self):
        record = to_pull_request_record(_make_pr(), "acme", "api")
        assert record.number == 42
        assert record.description == ""
        assert record.repo == RepoRef(owner="acme", name="api")
        assert record.author == "alice"
        assert record.created_at == "2024-01-01T12:00:00Z"
        assert record.is_merged is False
        assert record.merged_at is None
        assert record.labels == ["bug"]
        assert record.changed_files[0].filename == "src/auth.py"
        assert record.changed_files[0].additions == 2
        assert record.commits[0].author == "Alice"
        assert record.commits[0].date == "2024-01-01T11:00:00Z"
        assert record.review_comments[0].author == "bob"
        assert record.reviews[0].author is None

    def test_merged_pr(self):
        record = to_pull_request_record(_make_pr(merged_at=datetime(2024, 1, 3)), "acme", "api")
        assert record.is_merged is True
        assert record.merged_at == "2024-01-03T00:00:00Z"


class TestFetchPullRequest:
    def test_github_error_becomes_transport_error(self, mocker):
        mocker.patch(
            "reviewpack_core.gh.pull_request.get_repo",
            side_effect=GithubException(404, {"message": "Not Found"}, None),
        )
        with pytest.raises(TransportError, match="404"):
            fetch_pull_request("tok", BACKEND, 1)

    def test_returns_record(self, mocker):
        repo = MagicMock()
        repo.get_pull.return_value = _make_pr()
        mock_get_repo = mocker.patch("reviewpack_core.gh.pull_request.get_repo", return_value=repo)
        record = fetch_pull_request("tok", BACKEND, 42)
        mock_get_repo.assert_called_once_with("acme/api", token="tok")
        assert record.title == "Fix login"


class TestFetchPullRequests:
    def test_empty_selection(self):
        with pytest.raises(InputError, match="Please select at least one PR to review"):
            fetch_pull_requests("tok", {}, RunLog())

    def test_fetches_every_selection_in_order(self, mocker):
        mocker.patch(
            "reviewpack_core.gh.pull_request.fetch_pull_request",
            side_effect=lambda token, repo_config, number: _record(number),
        )
        prs = fetch_pull_requests("tok", {"frontend": (FRONTEND, 1), "backend": (BACKEND, 2)}, RunLog())
        assert list(prs) == ["frontend", "backend"]
        assert prs["backend"].number == 2

    def test_any_failure_aborts_batch(self, mocker):
        def _fetch(token, repo_config, number):
            if repo_config is BACKEND:
                raise TransportError("Failed to fetch GitHub pull request details (404)")
            return _record(number)

        mocker.patch("reviewpack_core.gh.pull_request.fetch_pull_request", side_effect=_fetch)
        log = RunLog()
        with pytest.raises(TransportError) as exc_info:
            fetch_pull_requests("tok", {"frontend": (FRONTEND, 1), "backend": (BACKEND, 2)}, log)
        assert str(exc_info.value) == "Backend PR Error: Failed to fetch GitHub pull request details (404)"
        assert log.filter(level="error")
