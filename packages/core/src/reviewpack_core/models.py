"""Records passed through the review pipeline.

All records are built fresh per wizard run and never mutated by the prompt
builder. ``to_dict``/``from_dict`` use the camelCase JSON shape persisted in
the hand-off store and dumped into the prompt's "Full PR Data" block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_PLACEHOLDER_PREFIX = "Error fetching ticket"


@dataclass(frozen=True)
class TicketRecord:
    key: str
    summary: str
    description: str = ""

    @property
    def is_placeholder(self) -> bool:
        """True for the inline error record produced when a fetch fails."""
        return self.summary.startswith(_PLACEHOLDER_PREFIX)

    def to_dict(self) -> dict:
        return {"key": self.key, "summary": self.summary, "description": self.description}

    @classmethod
    def from_dict(cls, d: dict) -> TicketRecord:
        return cls(key=d.get("key", ""), summary=d.get("summary", ""), description=d.get("description") or "")


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str


@dataclass(frozen=True)
class FileChange:
    filename: str
    status: str  # "added" | "modified" | "removed"
    patch: str | None = None
    additions: int | None = None
    deletions: int | None = None
    changes: int | None = None


@dataclass(frozen=True)
class CommitInfo:
    sha: str
    message: str
    author: str | None = None
    date: str | None = None


@dataclass(frozen=True)
class CommentInfo:
    id: int
    body: str
    path: str | None = None
    position: int | None = None
    author: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class ReviewInfo:
    id: int
    state: str
    author: str | None = None
    body: str | None = None
    submitted_at: str | None = None


@dataclass(frozen=True)
class PullRequestRecord:
    number: int
    title: str
    description: str
    repo: RepoRef
    changed_files: list[FileChange] = field(default_factory=list)
    author: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    is_merged: bool | None = None
    merged_at: str | None = None
    mergeable: bool | None = None
    labels: list[str] = field(default_factory=list)
    commits: list[CommitInfo] = field(default_factory=list)
    review_comments: list[CommentInfo] = field(default_factory=list)
    reviews: list[ReviewInfo] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "title": self.title,
            "description": self.description,
            "repo": {"owner": self.repo.owner, "name": self.repo.name},
            "changedFiles": [
                {
                    "filename": f.filename,
                    "status": f.status,
                    "patch": f.patch,
                    "additions": f.additions,
                    "deletions": f.deletions,
                    "changes": f.changes,
                }
                for f in self.changed_files
            ],
            "author": self.author,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "isMerged": self.is_merged,
            "mergedAt": self.merged_at,
            "mergeable": self.mergeable,
            "labels": list(self.labels),
            "commits": [
                {"sha": c.sha, "message": c.message, "author": c.author, "date": c.date} for c in self.commits
            ],
            "reviewComments": [
                {
                    "id": c.id,
                    "body": c.body,
                    "path": c.path,
                    "position": c.position,
                    "author": c.author,
                    "createdAt": c.created_at,
                }
                for c in self.review_comments
            ],
            "reviews": [
                {
                    "id": r.id,
                    "state": r.state,
                    "author": r.author,
                    "body": r.body,
                    "submittedAt": r.submitted_at,
                }
                for r in self.reviews
            ],
        }

    @classmethod
    def from_dict(cls, d: dict) -> PullRequestRecord:
        repo = d.get("repo") or {}
        return cls(
            number=d.get("number", 0),
            title=d.get("title", ""),
            description=d.get("description") or "",
            repo=RepoRef(owner=repo.get("owner", ""), name=repo.get("name", "")),
            changed_files=[
                FileChange(
                    filename=f.get("filename", ""),
                    status=f.get("status", "modified"),
                    patch=f.get("patch"),
                    additions=f.get("additions"),
                    deletions=f.get("deletions"),
                    changes=f.get("changes"),
                )
                for f in d.get("changedFiles") or []
            ],
            author=d.get("author"),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
            is_merged=d.get("isMerged"),
            merged_at=d.get("mergedAt"),
            mergeable=d.get("mergeable"),
            labels=list(d.get("labels") or []),
            commits=[
                CommitInfo(sha=c.get("sha", ""), message=c.get("message", ""), author=c.get("author"), date=c.get("date"))
                for c in d.get("commits") or []
            ],
            review_comments=[
                CommentInfo(
                    id=c.get("id", 0),
                    body=c.get("body", ""),
                    path=c.get("path"),
                    position=c.get("position"),
                    author=c.get("author"),
                    created_at=c.get("createdAt"),
                )
                for c in d.get("reviewComments") or []
            ],
            reviews=[
                ReviewInfo(
                    id=r.get("id", 0),
                    state=r.get("state", ""),
                    author=r.get("author"),
                    body=r.get("body"),
                    submitted_at=r.get("submittedAt"),
                )
                for r in d.get("reviews") or []
            ],
        )


@dataclass(frozen=True)
class ReferenceDocument:
    """A catalog document; only type, name and content reach the prompt."""

    type: str  # "schema" | "business-context" | "coding-standard" | anything else
    name: str
    content: str
    id: str = ""


@dataclass
class GeneratedReview:
    """The persisted review result. suggestions and score are never populated."""

    review: str
    suggestions: list[str] = field(default_factory=list)
    score: int = 0

    def to_dict(self) -> dict:
        return {"review": self.review, "suggestions": list(self.suggestions), "score": self.score}

    @classmethod
    def from_dict(cls, d: dict) -> GeneratedReview:
        return cls(review=d.get("review", ""), suggestions=list(d.get("suggestions") or []), score=d.get("score", 0))


@dataclass
class ReviewSections:
    summary: str = ""
    critical_issues: str = ""
    recommendations: str = ""
    highlights: str = ""
    breakdown: str = ""

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "criticalIssues": self.critical_issues,
            "recommendations": self.recommendations,
            "highlights": self.highlights,
            "breakdown": self.breakdown,
        }


@dataclass
class ReviewResult:
    """Outcome envelope of a review generation: ``{success, data}`` or ``{success, error}``."""

    success: bool
    data: str | None = None
    error: str | None = None
    error_type: str | None = None  # taxonomy class name, e.g. "InputError"

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}


@dataclass
class FileNode:
    id: str  # full path
    name: str
    is_directory: bool
    children: list[FileNode] | None = None

    def to_dict(self) -> dict:
        d: dict = {"id": self.id, "name": self.name, "isDirectory": self.is_directory}
        if self.children is not None:
            d["children"] = [c.to_dict() for c in self.children]
        return d


@dataclass(frozen=True)
class ReviewRequest:
    """Everything the prompt builder needs. ``ReviewRequest()`` is the explicit empty variant."""

    tickets: list[TicketRecord] = field(default_factory=list)
    pull_requests: dict[str, PullRequestRecord] = field(default_factory=dict)  # keyed by repo key
    concatenated_files: str = ""
    reference_files: list[ReferenceDocument] = field(default_factory=list)

    @classmethod
    def from_handoff(
        cls,
        tickets: Any = None,
        pull_requests: Any = None,
        concatenated_files: Any = None,
        reference_files: Any = None,
    ) -> ReviewRequest:
        """Build a request from raw hand-off JSON values.

        This is the single place where loosely-shaped stored data is coerced:
        a falsy value means "none", a lone ticket or reference becomes a
        one-element list, a lone PR dict is keyed as "default", and non-string
        file blobs are stringified.
        """
        if not tickets:
            ticket_list = []
        elif isinstance(tickets, list):
            ticket_list = [t for t in tickets if t]
        else:
            ticket_list = [tickets]

        if not pull_requests:
            pr_map = {}
        elif isinstance(pull_requests, dict) and "number" in pull_requests:
            pr_map = {"default": pull_requests}
        else:
            pr_map = {key: value for key, value in dict(pull_requests).items() if value}

        if not reference_files:
            ref_list = []
        elif isinstance(reference_files, list):
            ref_list = [r for r in reference_files if isinstance(r, (ReferenceDocument, dict))]
        elif isinstance(reference_files, (ReferenceDocument, dict)):
            ref_list = [reference_files]
        else:
            ref_list = []

        return cls(
            tickets=[t if isinstance(t, TicketRecord) else TicketRecord.from_dict(t) for t in ticket_list],
            pull_requests={
                key: pr if isinstance(pr, PullRequestRecord) else PullRequestRecord.from_dict(pr)
                for key, pr in pr_map.items()
            },
            concatenated_files=concatenated_files if isinstance(concatenated_files, str) else str(concatenated_files or ""),
            reference_files=[
                r
                if isinstance(r, ReferenceDocument)
                else ReferenceDocument(
                    type=r.get("type", "unknown"), name=r.get("name", ""), content=r.get("content", ""), id=r.get("id", "")
                )
                for r in ref_list
            ],
        )
