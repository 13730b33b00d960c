"""Prompt construction for the full-context code review.

The prompt is one large document: a persona preamble, four delimited input
sections, the review guidelines, and the required six-section output
structure. Everything here is a pure function of its inputs; building the
same request twice yields byte-identical text.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from reviewpack_core.models import PullRequestRecord, ReferenceDocument, ReviewRequest, TicketRecord

NO_REFERENCES_PLACEHOLDER = "No additional reference files selected."
NO_PR_PLACEHOLDER = "No PR information available."

# Order matters: validation and the reinforcement suffix both rely on it.
REQUIRED_SECTIONS: tuple[str, ...] = (
    "1. SUMMARY",
    "2. CRITICAL ISSUES",
    "3. RECOMMENDATIONS",
    "4. POSITIVE HIGHLIGHTS",
    "5. DETAILED BREAKDOWN",
    "6. A HIGHLY DETAILED INSTRUCTION GUIDE",
)

_REFERENCE_LABELS = {
    "schema": "Database Schema:",
    "business-context": "Business Context:",
    "coding-standard": "Design & Coding Standards:",
}

_PREAMBLE = """You are an expert-level code reviewer for the product and engineering team at TempStars, a web and mobile based two-sided marketplace platform that connects dental offices with dental professionals for temping and hiring.

Your job is to review all of the information below and provide a comprehensive, actionable code review.  

Below, you will find the following information needed to understand the scope of the PR and Jira ticket:

1. Jira ticket
2. the GitHub PR
3. a giant block of concatenated files which are additional context files needed for you to understand the scope of the PR and Jira ticket
4. Some additional information for context, such as business context, database schema, design and coding standards

So that you can tell where each section starts and ends, each section will be separated and titled with '=====' tags

Based on all that information, and considering your coding expertise and experience, your job is to provide a comprehensive, actionable expert-level code review.  """  # noqa: E501

_FILES_INTRO = """And here are all the files related to this work, you'll see each file in the concatenation is labelled with its file name and path. Note: The TempStars repo is split into 'tempstars-api' and 'tempstars-app' repos.  So you will see files and directories with paths that start with 'tempstars-api' (backend) or 'tempstars-app' (frontend).  
During development of the actual project, both repos are used.  Here is the code concatenation for the backend and frontend:"""  # noqa: E501

_REFERENCES_INTRO = (
    "Below are some files and information for additional context as it relates to the Jira ticket and "
    "pull request.  This may include the database schema, business context or coding and design standards:"
)

_GUIDELINES = """REVIEW GUIDELINES FOR PULL REQUESTS:
1. Code Quality:

Identify any code smells or anti-patterns
Check for proper error handling
Verify proper typing and null checks
Assess code organization and modularity
Review naming conventions and code clarity

2. Database Considerations:

Verify proper use of database schema
Check for potential SQL injection vulnerabilities
Review query performance and optimization
Ensure proper handling of relationships between tables

3. Security:

Check for security vulnerabilities
Verify proper authentication/authorization
Review data validation and sanitization
Assess handling of sensitive information

4. Performance:

Identify potential performance bottlenecks
Review API call efficiency
Check for unnecessary re-renders in React components
Assess memory usage and potential leaks

5. Business Logic:

Verify implementation successfully meets acceptance criteria
Identify any areas where the code is not meeting acceptance criteria, explain why and what is missing
Check for proper handling of edge cases
Ensure business rules are correctly implemented
Verify proper error messaging for users

6. Legacy Considerations:

Check dependencies on legacy code and libraries
Check functions, variables and libraries that are being used
Check for instances where the change might break regression tests
Check for instances where the change might break existing functionality

7. Testing & Documentation:

Verify appropriate test coverage for changes
Check for clear documentation of new functionality
Ensure complex business logic is adequately explained
Review updated API documentation if applicable

8. Platform-Specific Considerations:

Verify mobile/responsive compatibility for user interfaces
Check for accessibility issues in UI changes
Ensure proper handling of time zones for date/time functionality
Verify compatibility with all supported browsers/devices"""

_OUTPUT_STRUCTURE = """Please provide your review in the following structure:

1. SUMMARY
An overview of the changes, scope, context and impact.  The summary should include a list of checkmarks or x's for each acceptance criteria from the Jira ticket(s) that are met or not met.
Use the following format for the checkmarks: ✅ or ❌.

2. CRITICAL ISSUES
- Identify any blocking issues that must be addressed,
- any unmet acceptance criteria, 
- any security vulnerabilities, 
- any performance issues, 
- any code quality issues, 
- any business logic issues, 
- any testing issues 

3. RECOMMENDATIONS
Suggested improvements categorized by:
- Security
- Performance
- Code Quality
- Debugging
- Meeting Acceptance Criteria
- Business Logic
- Testing

4. POSITIVE HIGHLIGHTS
Well-implemented aspects of the code

5. DETAILED BREAKDOWN
File-by-file analysis of significant changes that were made to the code and the reasoning behind the changes.

6. A HIGHLY DETAILED INSTRUCTION GUIDE FOR IMPLEMENTING FIXES TO CRITICAL ISSUES
This guide should reference every file (including path) that needs to be changed to address the critical issues and the specific lines of code that need to be changed, and what the changes should be.
Critical issues would be things like: - not meeting acceptance criteria, bugs, changes that would break other functionality, glaring security vulnerabilities, etc.

You may be working with a beginner coder, or a developer new to the team.  So remember to be always thorough, highly-detailed and actionable in your feedback.  Reference specific files and lines of code and providing specific examples and suggested solutions where applicable."""  # noqa: E501


def section(name: str, body: str) -> str:
    """Wrap ``body`` in the ``=====START <NAME>=====`` / ``=====END <NAME>=====`` markers."""
    return f"=====START {name}=====\n{body}\n=====END {name}====="


def _to_json(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


# --------------------------------------------------------------------------- #
# Reference formatter                                                         #
# --------------------------------------------------------------------------- #


def format_reference_files(documents: Sequence[ReferenceDocument]) -> str:
    """Render reference documents as one delimited block.

    Content is not escaped: a document that itself contains the marker text
    makes the block ambiguous.
    """
    if not documents:
        return NO_REFERENCES_PLACEHOLDER

    blocks = []
    for doc in documents:
        label = _REFERENCE_LABELS.get(doc.type, f"{doc.name}:")
        blocks.append(
            f"\n=== {doc.name} ===\nType: {doc.type}\n\n{label}\n{doc.content}\n\n=== End {doc.name} ===\n"
        )
    return "\n\n".join(blocks)


# --------------------------------------------------------------------------- #
# PR formatter                                                                #
# --------------------------------------------------------------------------- #


def format_pr_info(pr: PullRequestRecord | None) -> str:
    """Render a pull request as readable text followed by a full JSON dump."""
    if pr is None:
        return NO_PR_PLACEHOLDER

    labels = ", ".join(pr.labels) if pr.labels else "None"

    if pr.changed_files:
        files = []
        for f in pr.changed_files:
            changes = f" (+{f.additions}/-{f.deletions})" if f.additions is not None and f.deletions is not None else ""
            files.append(f"- {f.filename} ({f.status}{changes})")
        changed_files = "\n".join(files)
    else:
        changed_files = "No files changed"

    if pr.commits:
        commits = "\n".join(
            f"- {c.sha[:7]}: {c.message} ({c.author or 'Unknown'}, {c.date or 'Unknown date'})" for c in pr.commits
        )
    else:
        commits = "No commit information available"

    if pr.reviews:
        reviews = "\n".join(
            f"- {r.author or 'Unknown'}: {r.state} {f'on {r.submitted_at}' if r.submitted_at else ''}"
            for r in pr.reviews
        )
    else:
        reviews = "No reviews yet"

    if pr.is_merged:
        status = "Merged"
    elif pr.mergeable:
        status = "Mergeable"
    else:
        status = "Not Mergeable"
    merged_at = f"Merged at: {pr.merged_at}" if pr.is_merged and pr.merged_at else ""

    return "\n".join(
        [
            f"PR #{pr.number}: {pr.title}",
            f"Description: {pr.description}",
            f"Author: {pr.author or 'Unknown'}",
            f"Created: {pr.created_at or 'Unknown date'}",
            f"Updated: {pr.updated_at or 'Unknown date'}",
            f"Status: {status}",
            merged_at,
            f"Labels: {labels}",
            f"Changed Files: {len(pr.changed_files)} files modified",
            "",
            "Files changed:",
            changed_files,
            "",
            "Commits:",
            commits,
            "",
            "Reviews:",
            reviews,
            "",
            "Full PR Data:",
            _to_json(pr.to_dict()),
        ]
    )


def format_pr_block(pull_requests: dict[str, PullRequestRecord]) -> str:
    """Render every selected repository's PR; a single PR is rendered bare."""
    if not pull_requests:
        return NO_PR_PLACEHOLDER
    if len(pull_requests) == 1:
        return format_pr_info(next(iter(pull_requests.values())))
    return "\n\n".join(f"Repository: {key}\n{format_pr_info(pr)}" for key, pr in pull_requests.items())


def format_tickets(tickets: Sequence[TicketRecord]) -> str:
    if not tickets:
        return "{}"
    if len(tickets) == 1:
        return _to_json(tickets[0].to_dict())
    return _to_json([t.to_dict() for t in tickets])


# --------------------------------------------------------------------------- #
# Prompt builder                                                              #
# --------------------------------------------------------------------------- #


def build_prompt(request: ReviewRequest) -> str:
    """Assemble the review prompt from a request. Never mutates the request."""
    return "\n\n".join(
        [
            _PREAMBLE,
            "Here is the Jira ticket information related to this task:",
            section("JIRA TICKET", f"\n{format_tickets(request.tickets)}\n"),
            "And here is the pull request information as related to this task:",
            section("GITHUB PR", format_pr_block(request.pull_requests)),
            _FILES_INTRO,
            section("CONCATENATED FILES", f"\n{request.concatenated_files or ''}\n"),
            _REFERENCES_INTRO,
            section("ADDITIONAL CONTEXT FILES", f"\n{format_reference_files(request.reference_files)}\n"),
            _GUIDELINES,
            _OUTPUT_STRUCTURE,
        ]
    )


def reinforce_sections(prompt: str) -> str:
    """Append the suffix restating the required section headers verbatim."""
    headers = "\n".join(REQUIRED_SECTIONS)
    return (
        f"{prompt}\n\nIMPORTANT: Your response MUST include these exact section headers in this order:\n"
        f"{headers}\n\n"
        "Each section is required and must maintain this exact naming. Do not skip any sections."
    )
