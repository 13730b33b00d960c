"""Split a generated review into its display sections.

A deliberately loose scan: a header matches anywhere on a line, text before
the first header is dropped, and the sixth (instruction guide) section is
not separated out, so its content lands in ``breakdown``.
"""

from __future__ import annotations

from reviewpack_core.models import ReviewSections

_HEADER_TO_FIELD = (
    ("1. SUMMARY", "summary"),
    ("2. CRITICAL ISSUES", "critical_issues"),
    ("3. RECOMMENDATIONS", "recommendations"),
    ("4. POSITIVE HIGHLIGHTS", "highlights"),
    ("5. DETAILED BREAKDOWN", "breakdown"),
)

SECTION_TITLES = {
    "summary": "Summary",
    "critical_issues": "Critical Issues",
    "recommendations": "Recommendations",
    "highlights": "Positive Highlights",
    "breakdown": "Detailed Breakdown",
}


def parse_sections(review: str) -> ReviewSections:
    collected = {name: [] for _, name in _HEADER_TO_FIELD}
    current: str | None = None

    lines = review.split("\n")
    if review.endswith("\n"):
        lines.pop()  # trailing newline ends the last line

    for line in lines:
        for header, name in _HEADER_TO_FIELD:
            if header in line:
                current = name
                break
        else:
            if current is not None:
                collected[current].append(line + "\n")

    return ReviewSections(**{name: "".join(parts) for name, parts in collected.items()})
