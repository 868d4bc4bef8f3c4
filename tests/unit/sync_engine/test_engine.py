"""Unit tests for sync_engine.engine.SyncEngine."""

import pytest

from markdown2confluence.confluence_client.errors import APIAccessError
from markdown2confluence.documents.errors import DocumentReadError, FrontmatterError
from markdown2confluence.sync_engine.engine import SyncEngine
from markdown2confluence.sync_engine.errors import (
    CreateFailedError,
    LabelError,
    LookupFailedError,
    MissingParentError,
    MissingSpaceError,
    MissingTitleError,
    ParentNotFoundError,
    UpdateFailedError,
)
from markdown2confluence.sync_engine.fingerprint import fingerprint
from markdown2confluence.sync_engine.models import SyncAction, SyncConfig
from tests.helpers.fake_repository import FakeRepository


def make_doc(title="T", body="Hello world\n", **fields) -> bytes:
    """Build raw document bytes with front matter."""
    lines = ["---"]
    if title:
        lines.append(f"page_title: {title}")
    for key, value in fields.items():
        lines.append(f"{key}: '{value}'")
    lines.append("---")
    return ("\n".join(lines) + "\n" + body).encode("utf-8")


def fingerprint_labels(repo, page_id):
    return [label for label in repo.labels[page_id] if label.startswith("sha-")]


@pytest.fixture
def repo():
    return FakeRepository()


@pytest.fixture
def config():
    return SyncConfig(default_space="S", default_ancestor="100")


@pytest.fixture
def engine(repo, config):
    return SyncEngine(repo, config)


class TestCreate:
    """Documents whose title has no page in the space are created."""

    def test_creates_page_and_attaches_one_fingerprint_label(self, engine, repo):
        summary = engine.run([("a.md", make_doc(title="T", body="Hello\n"))])

        result = summary.results[0]
        assert result.action is SyncAction.CREATE
        assert len(repo.calls_named("create_page")) == 1
        assert repo.labels[result.page_id] == [fingerprint(b"Hello\n")]
        assert summary.success

    def test_create_uses_default_space_and_ancestor(self, engine, repo):
        engine.run([("a.md", make_doc(title="T"))])

        space, title, _, parent_id = repo.calls_named("create_page")[0]
        assert (space, title, parent_id) == ("S", "T", "100")

    def test_create_renders_body_to_storage_format(self, engine, repo):
        result = engine.run([("a.md", make_doc(body="# Heading\n"))]).results[0]

        assert "<h1>Heading</h1>" in repo.bodies[result.page_id]

    def test_front_matter_overrides_defaults(self, engine, repo):
        engine.run([("a.md", make_doc(title="T", space="DOCS", parent_id="555"))])

        space, _, _, parent_id = repo.calls_named("create_page")[0]
        assert space == "DOCS"
        assert parent_id == "555"

    def test_parent_title_is_resolved_in_space(self, engine, repo):
        parent = repo.add_page("S", "Engineering")

        engine.run([("a.md", make_doc(title="T", parent_title="Engineering"))])

        _, _, _, parent_id = repo.calls_named("create_page")[0]
        assert parent_id == parent.page_id

    def test_parent_id_takes_precedence_over_parent_title(self, engine, repo):
        repo.add_page("S", "Engineering")

        engine.run([("a.md", make_doc(title="T", parent_id="777", parent_title="Engineering"))])

        _, _, _, parent_id = repo.calls_named("create_page")[0]
        assert parent_id == "777"
        assert repo.calls_named("find_pages") == [("S", "T")]

    def test_create_failure_fails_document(self, engine, repo):
        repo.failures["create_page"] = APIAccessError("boom")

        result = engine.run([("a.md", make_doc())]).results[0]

        assert result.action is SyncAction.FAILED
        assert isinstance(result.error, CreateFailedError)
        assert repo.calls_named("add_label") == []

    def test_label_failure_after_create_fails_document(self, engine, repo):
        repo.failures["add_label"] = APIAccessError("boom")

        summary = engine.run([("a.md", make_doc())])

        assert isinstance(summary.results[0].error, LabelError)
        assert len(repo.calls_named("create_page")) == 1
        assert not summary.success


class TestUpdate:
    """Existing pages with a different or missing fingerprint are updated."""

    def test_stale_label_is_replaced_and_version_bumped(self, engine, repo):
        page = repo.add_page("S", "T", version=4, labels=["sha-00000000", "team"])

        result = engine.run([("a.md", make_doc(body="New body\n"))]).results[0]

        assert result.action is SyncAction.UPDATE
        assert result.page_id == page.page_id
        assert repo.pages[page.page_id].version == 5
        assert repo.calls_named("delete_label") == [(page.page_id, "sha-00000000")]
        assert fingerprint_labels(repo, page.page_id) == [fingerprint(b"New body\n")]
        assert "team" in repo.labels[page.page_id]

    def test_update_sequence_order(self, engine, repo):
        page = repo.add_page("S", "T", labels=["sha-00000000"])

        engine.run([("a.md", make_doc())])

        names = [name for name, _ in repo.calls]
        assert names == [
            "find_pages",
            "get_labels",
            "get_page",
            "delete_label",
            "update_page",
            "add_label",
        ]
        _, title, space, parent_id, _, version = repo.calls_named("update_page")[0]
        assert (title, space, parent_id, version) == ("T", "S", "100", 2)
        assert page.page_id in repo.pages

    def test_page_without_fingerprint_label_is_updated(self, engine, repo):
        page = repo.add_page("S", "T", labels=["unrelated"])

        result = engine.run([("a.md", make_doc())]).results[0]

        assert result.action is SyncAction.UPDATE
        assert repo.calls_named("delete_label") == []
        assert len(fingerprint_labels(repo, page.page_id)) == 1

    def test_multiple_fingerprint_labels_are_all_removed(self, engine, repo):
        page = repo.add_page("S", "T", labels=["sha-bbbbbbbb", "sha-aaaaaaaa"])

        engine.run([("a.md", make_doc())])

        assert fingerprint_labels(repo, page.page_id) == [fingerprint(b"Hello world\n")]

    def test_update_failure_leaves_page_unlabelled_and_next_run_heals(self, engine, repo):
        page = repo.add_page("S", "T", labels=["sha-00000000"])
        repo.failures["update_page"] = APIAccessError("boom")

        first = engine.run([("a.md", make_doc())])

        assert isinstance(first.results[0].error, UpdateFailedError)
        assert fingerprint_labels(repo, page.page_id) == []
        assert repo.pages[page.page_id].version == 1

        del repo.failures["update_page"]
        second = engine.run([("a.md", make_doc())])

        assert second.results[0].action is SyncAction.UPDATE
        assert repo.pages[page.page_id].version == 2
        assert fingerprint_labels(repo, page.page_id) == [fingerprint(b"Hello world\n")]

    def test_version_read_failure_fails_before_any_mutation(self, engine, repo):
        repo.add_page("S", "T", labels=["sha-00000000"])
        repo.failures["get_page"] = APIAccessError("boom")

        result = engine.run([("a.md", make_doc())]).results[0]

        assert isinstance(result.error, UpdateFailedError)
        assert repo.mutating_calls() == []

    def test_label_removal_failure_fails_document(self, engine, repo):
        repo.add_page("S", "T", labels=["sha-00000000"])
        repo.failures["delete_label"] = APIAccessError("boom")

        result = engine.run([("a.md", make_doc())]).results[0]

        assert isinstance(result.error, LabelError)
        assert result.error.operation == "remove"
        assert repo.calls_named("update_page") == []


class TestSkip:
    """Pages whose fingerprint label matches the body are left alone."""

    def test_matching_label_skips_without_mutation(self, engine, repo):
        repo.add_page("S", "T", labels=[fingerprint(b"Hello world\n")])

        result = engine.run([("a.md", make_doc())]).results[0]

        assert result.action is SyncAction.SKIP
        assert repo.mutating_calls() == []
        assert repo.calls_named("get_page") == []

    def test_second_run_on_unchanged_documents_makes_no_writes(self, engine, repo):
        sources = [
            ("a.md", make_doc(title="A", body="one\n")),
            ("b.md", make_doc(title="B", body="two\n")),
        ]
        engine.run(sources)
        writes_after_first_run = len(repo.mutating_calls())

        summary = engine.run(sources)

        assert [r.action for r in summary.results] == [SyncAction.SKIP, SyncAction.SKIP]
        assert len(repo.mutating_calls()) == writes_after_first_run

    def test_front_matter_change_alone_does_not_trigger_update(self, engine, repo):
        engine.run([("a.md", make_doc(title="T", body="same\n"))])

        result = engine.run([("a.md", make_doc(title="T", body="same\n", parent_id="100"))]).results[0]

        assert result.action is SyncAction.SKIP


class TestValidation:
    """Documents are validated before any repository call."""

    def test_missing_title_fails_without_repository_calls(self, repo):
        engine = SyncEngine(repo, SyncConfig())

        result = engine.run([("a.md", make_doc(title=""))]).results[0]

        assert isinstance(result.error, MissingTitleError)
        assert repo.calls == []

    def test_missing_space_without_default_fails(self, repo):
        engine = SyncEngine(repo, SyncConfig(default_ancestor="100"))

        result = engine.run([("a.md", make_doc())]).results[0]

        assert isinstance(result.error, MissingSpaceError)
        assert repo.calls == []

    def test_missing_parent_without_default_fails(self, repo):
        engine = SyncEngine(repo, SyncConfig(default_space="S"))

        result = engine.run([("a.md", make_doc())]).results[0]

        assert isinstance(result.error, MissingParentError)
        assert repo.calls == []

    def test_unknown_parent_title_fails(self, engine, repo):
        result = engine.run([("a.md", make_doc(parent_title="Nope"))]).results[0]

        assert isinstance(result.error, ParentNotFoundError)
        assert repo.mutating_calls() == []

    def test_lookup_failure_fails_document(self, engine, repo):
        repo.failures["find_pages"] = APIAccessError("boom")

        result = engine.run([("a.md", make_doc())]).results[0]

        assert isinstance(result.error, LookupFailedError)
        assert isinstance(result.error.__cause__, APIAccessError)

    def test_malformed_front_matter_fails(self, engine, repo):
        result = engine.run([("a.md", b"---\npage_title: [unclosed\n---\nbody\n")]).results[0]

        assert isinstance(result.error, FrontmatterError)
        assert repo.calls == []

    def test_non_utf8_body_is_fingerprinted_as_raw_bytes(self, engine, repo):
        result = engine.run([("a.md", make_doc(body="x\n") + b"caf\xe9\n")]).results[0]

        assert result.action is SyncAction.CREATE
        assert result.fingerprint == fingerprint(b"x\ncaf\xe9\n")
        assert repo.labels[result.page_id] == [result.fingerprint]
        assert "caf\ufffd" in repo.bodies[result.page_id]

    def test_non_utf8_body_is_skipped_when_unchanged(self, engine, repo):
        source = ("a.md", make_doc(body="x\n") + b"caf\xe9\n")
        engine.run([source])

        result = engine.run([source]).results[0]

        assert result.action is SyncAction.SKIP

    def test_unreadable_path_fails_with_read_error(self, engine, tmp_path):
        summary = engine.run_paths([str(tmp_path / "missing.md")])

        assert isinstance(summary.results[0].error, DocumentReadError)


class TestBatch:
    """A failing document never stops the batch."""

    def test_middle_failure_does_not_abort_batch(self, engine, repo):
        summary = engine.run([
            ("a.md", make_doc(title="A")),
            ("b.md", make_doc(title="")),
            ("c.md", make_doc(title="C")),
        ])

        actions = [r.action for r in summary.results]
        assert actions == [SyncAction.CREATE, SyncAction.FAILED, SyncAction.CREATE]
        assert not summary.success
        assert summary.failed_count == 1
        assert summary.created_count == 2

    def test_run_paths_reads_files(self, engine, repo, tmp_path):
        path = tmp_path / "page.md"
        path.write_bytes(make_doc(title="From disk"))

        summary = engine.run_paths([str(path)])

        assert summary.results[0].action is SyncAction.CREATE
        assert repo.calls_named("create_page")[0][1] == "From disk"

    def test_parallel_run_keeps_input_order_and_serializes_same_page(self, repo):
        engine = SyncEngine(repo, SyncConfig(default_space="S", default_ancestor="100", workers=4))
        sources = [(f"{i}.md", make_doc(title=f"P{i}", body=f"{i}\n")) for i in range(6)]
        sources.append(("dup.md", make_doc(title="P0", body="changed\n")))

        summary = engine.run(sources)

        assert [r.file_path for r in summary.results] == [path for path, _ in sources]
        assert summary.success
        p0 = [p for p in repo.pages.values() if p.title == "P0"]
        assert len(p0) == 1
        assert p0[0].version == 2
        assert fingerprint_labels(repo, p0[0].page_id) == [fingerprint(b"changed\n")]


class TestDryRun:
    """Dry runs decide actions without changing Confluence."""

    def test_dry_run_reports_actions_without_mutation(self, repo):
        engine = SyncEngine(repo, SyncConfig(default_space="S", default_ancestor="100", dry_run=True))
        repo.add_page("S", "Existing", labels=["sha-00000000"])

        summary = engine.run([
            ("a.md", make_doc(title="New")),
            ("b.md", make_doc(title="Existing")),
        ])

        assert [r.action for r in summary.results] == [SyncAction.CREATE, SyncAction.UPDATE]
        assert summary.dry_run
        assert repo.mutating_calls() == []


class TestSyncFile:
    """Single-file entry point."""

    def test_sync_file_creates_page(self, engine, repo):
        result = engine.sync_file("a.md", make_doc(title="Single"))

        assert result.action is SyncAction.CREATE
        assert result.fingerprint == fingerprint(b"Hello world\n")

    def test_sync_file_reports_read_failure(self, engine, tmp_path):
        result = engine.sync_file(str(tmp_path / "missing.md"))

        assert result.action is SyncAction.FAILED
        assert isinstance(result.error, DocumentReadError)
