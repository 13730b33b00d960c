"""Hand-off state keys shared by the wizard steps.

Decoupled from reviewpack_core so the store layer can be used independently:
values are plain JSON, and the CLI converts them to core records.
"""

from __future__ import annotations

JIRA_TICKETS = "jiraTicket"  # list of ticket dicts
GITHUB_PRS = "githubPRs"  # repo key → PR dict
CONCATENATED_FILES = "concatenatedFiles"  # raw text, stored as a JSON string
REFERENCE_CONTENTS = "referenceContents"  # reference id → content
REVIEW_RESULT = "reviewResult"  # {review, suggestions, score}

HANDOFF_KEYS = (JIRA_TICKETS, GITHUB_PRS, CONCATENATED_FILES, REFERENCE_CONTENTS, REVIEW_RESULT)
