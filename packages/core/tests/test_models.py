"""Tests for pipeline records and the hand-off boundary coercions."""

from reviewpack_core.models import (
    FileNode,
    GeneratedReview,
    PullRequestRecord,
    ReferenceDocument,
    ReviewRequest,
    ReviewResult,
    TicketRecord,
)
from reviewpack_core.prompt import format_tickets

PR_DICT = {
    "number": 12,
    "title": "Add search",
    "description": "",
    "repo": {"owner": "acme", "name": "app"},
    "changedFiles": [{"filename": "src/search.ts", "status": "added", "additions": 40, "deletions": 0}],
    "isMerged": False,
    "mergeable": True,
    "labels": ["feature"],
    "commits": [{"sha": "1234567890", "message": "Add search", "author": "alice", "date": "2024-01-01T00:00:00Z"}],
    "reviews": [{"id": 9, "state": "APPROVED", "author": "bob", "submittedAt": "2024-01-02T00:00:00Z"}],
}


class TestTicketRecord:
    def test_placeholder_detection(self):
        assert TicketRecord(key="X-1", summary="Error fetching ticket X-1").is_placeholder
        assert not TicketRecord(key="X-1", summary="Fix bug").is_placeholder

    def test_from_dict_tolerates_missing_description(self):
        ticket = TicketRecord.from_dict({"key": "X-1", "summary": "Fix", "description": None})
        assert ticket.description == ""


class TestPullRequestRecord:
    def test_round_trip_uses_camel_case(self):
        pr = PullRequestRecord.from_dict(PR_DICT)
        assert pr.changed_files[0].additions == 40
        assert pr.reviews[0].submitted_at == "2024-01-02T00:00:00Z"
        d = pr.to_dict()
        assert d["changedFiles"][0]["filename"] == "src/search.ts"
        assert d["isMerged"] is False
        assert d["commits"][0]["sha"] == "1234567890"
        assert d["reviewComments"] == []

    def test_from_dict_defaults(self):
        pr = PullRequestRecord.from_dict({"number": 1, "title": "t"})
        assert pr.repo.owner == ""
        assert pr.changed_files == []
        assert pr.mergeable is None


class TestReviewResult:
    def test_success_envelope(self):
        assert ReviewResult(success=True, data="text").to_dict() == {"success": True, "data": "text"}

    def test_failure_envelope_omits_error_type(self):
        result = ReviewResult(success=False, error="boom", error_type="TransportError")
        assert result.to_dict() == {"success": False, "error": "boom"}


class TestGeneratedReview:
    def test_dead_fields_default_empty(self):
        assert GeneratedReview(review="r").to_dict() == {"review": "r", "suggestions": [], "score": 0}


class TestFileNode:
    def test_to_dict_nests_children(self):
        node = FileNode(
            id="/p/src", name="src", is_directory=True, children=[FileNode(id="/p/src/a.py", name="a.py", is_directory=False)]
        )
        assert node.to_dict() == {
            "id": "/p/src",
            "name": "src",
            "isDirectory": True,
            "children": [{"id": "/p/src/a.py", "name": "a.py", "isDirectory": False}],
        }


class TestReviewRequestFromHandoff:
    def test_all_absent_is_empty_request(self):
        assert ReviewRequest.from_handoff() == ReviewRequest()

    def test_single_ticket_becomes_list(self):
        request = ReviewRequest.from_handoff(tickets={"key": "X-1", "summary": "s", "description": "d"})
        assert request.tickets == [TicketRecord(key="X-1", summary="s", description="d")]

    def test_lone_pr_keyed_as_default(self):
        request = ReviewRequest.from_handoff(pull_requests=PR_DICT)
        assert list(request.pull_requests) == ["default"]
        assert request.pull_requests["default"].number == 12

    def test_pr_map_drops_empty_entries(self):
        request = ReviewRequest.from_handoff(pull_requests={"frontend": PR_DICT, "backend": None})
        assert list(request.pull_requests) == ["frontend"]

    def test_non_string_files_are_stringified(self):
        assert ReviewRequest.from_handoff(concatenated_files=123).concatenated_files == "123"
        assert ReviewRequest.from_handoff(concatenated_files=None).concatenated_files == ""

    def test_single_reference_becomes_list(self):
        request = ReviewRequest.from_handoff(reference_files={"type": "schema", "name": "DB", "content": "x"})
        assert request.reference_files == [ReferenceDocument(type="schema", name="DB", content="x")]

    def test_records_pass_through(self):
        ticket = TicketRecord(key="X-1", summary="s")
        assert ReviewRequest.from_handoff(tickets=[ticket]).tickets == [ticket]

    def test_falsy_values_mean_none(self):
        request = ReviewRequest.from_handoff(tickets={}, pull_requests="", reference_files="")
        assert request == ReviewRequest()
        assert format_tickets(request.tickets) == "{}"

    def test_empty_ticket_entries_are_skipped(self):
        request = ReviewRequest.from_handoff(tickets=[{}, {"key": "X-1"}, None])
        assert [t.key for t in request.tickets] == ["X-1"]

    def test_non_mapping_references_are_ignored(self):
        assert ReviewRequest.from_handoff(reference_files="schema.sql").reference_files == []
        request = ReviewRequest.from_handoff(reference_files=["junk", {"type": "schema", "name": "DB", "content": "x"}])
        assert request.reference_files == [ReferenceDocument(type="schema", name="DB", content="x")]
