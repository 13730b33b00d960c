"""Reference document catalog resolution.

The hand-off state stores only ``{catalog id: content}``; the catalog from
configuration supplies each document's type and display name.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from reviewpack_core.config import ReferenceEntry
from reviewpack_core.errors import InputError
from reviewpack_core.models import ReferenceDocument
from reviewpack_core.runlog import RunLog


def resolve_reference_documents(
    contents: dict[str, str],
    catalog: dict[str, ReferenceEntry],
) -> list[ReferenceDocument]:
    documents = []
    for ref_id, content in contents.items():
        entry = catalog.get(ref_id)
        documents.append(
            ReferenceDocument(
                id=ref_id,
                type=entry.type if entry else "unknown",
                name=entry.name if entry else ref_id,
                content=content,
            )
        )
    return documents


def load_reference_contents(
    ids: Iterable[str],
    catalog: dict[str, ReferenceEntry],
    reader: Callable[[str], str],
    log: RunLog,
    base_dir: str | None = None,
) -> dict[str, str]:
    """Read the selected catalog entries; catalog paths are relative to ``base_dir``."""
    contents: dict[str, str] = {}
    for ref_id in ids:
        entry = catalog.get(ref_id)
        if entry is None:
            raise InputError(f"Unknown reference file: {ref_id}")
        path = Path(base_dir or ".") / entry.path
        contents[ref_id] = reader(str(path))
        log.info("References", f"Loaded {entry.name}", f"{len(contents[ref_id])} characters")
    return contents
