import pytest

from reviewpack_core.config import ReferenceEntry
from reviewpack_core.errors import InputError
from reviewpack_core.models import ReferenceDocument
from reviewpack_core.references import load_reference_contents, resolve_reference_documents
from reviewpack_core.runlog import RunLog

CATALOG = {
    "schema": ReferenceEntry(id="schema", type="schema", name="Database Schema", path="docs/schema.sql"),
    "standards": ReferenceEntry(id="standards", type="coding-standard", name="Coding Standards", path="docs/std.md"),
}


def test_resolve_known_and_unknown_ids():
    documents = resolve_reference_documents({"schema": "CREATE TABLE x;", "legacy": "notes"}, CATALOG)
    assert documents == [
        ReferenceDocument(type="schema", name="Database Schema", content="CREATE TABLE x;", id="schema"),
        ReferenceDocument(type="unknown", name="legacy", content="notes", id="legacy"),
    ]


def test_load_reads_paths_relative_to_base_dir(tmp_path):
    read = []

    def _reader(path):
        read.append(path)
        return f"contents of {path}"

    contents = load_reference_contents(["standards"], CATALOG, _reader, RunLog(), base_dir=str(tmp_path))
    assert read == [str(tmp_path / "docs" / "std.md")]
    assert list(contents) == ["standards"]


def test_load_unknown_id():
    with pytest.raises(InputError, match="Unknown reference file: nope"):
        load_reference_contents(["nope"], CATALOG, lambda p: "", RunLog())


def test_load_nothing_selected():
    assert load_reference_contents([], CATALOG, lambda p: "", RunLog()) == {}
