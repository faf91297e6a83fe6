"""Unit tests for cli.prune_handler module."""

import pytest

from src.cli.prune_handler import PruneHandler
from src.file_mapper.annotation_codec import AnnotationCodec
from src.models.file_metadata import FileMetadata
from tests.fixtures.sample_markdown import ANNOTATED_README, USER_NOTE

ROOT = "Projects/octocat/hello-world"


def annotated(path):
    metadata = FileMetadata(
        owner="octocat",
        repo="hello-world",
        branch="main",
        path=path,
        remote_url=f"https://github.com/octocat/hello-world/blob/main/{path}",
    )
    return AnnotationCodec.add_header("body\n", metadata, "2026-01-30T10:00:00+00:00")


@pytest.fixture
def handler(store):
    return PruneHandler(store)


def put(store, path, content):
    store.ensure_folder(path.rsplit("/", 1)[0])
    store.write(path, content)


class TestIsDeletable:
    """Test cases for PruneHandler.is_deletable()."""

    def test_annotated_markdown_is_deletable(self, handler, store):
        put(store, f"{ROOT}/README.md", ANNOTATED_README)

        assert handler.is_deletable(f"{ROOT}/README.md", "Projects")

    def test_user_note_is_kept(self, handler, store):
        put(store, f"{ROOT}/notes.md", USER_NOTE)

        assert not handler.is_deletable(f"{ROOT}/notes.md", "Projects")

    def test_media_depth_heuristic(self, handler):
        assert handler.is_system_media_path(f"{ROOT}/logo.png", "Projects")
        assert handler.is_system_media_path(f"{ROOT}/img/logo.png", "Projects")
        assert not handler.is_system_media_path("Projects/octocat/logo.png", "Projects")
        assert not handler.is_system_media_path("Elsewhere/a/b/logo.png", "Projects")

    def test_other_file_types_are_kept(self, handler, store):
        put(store, f"{ROOT}/script.py", "print()")

        assert not handler.is_deletable(f"{ROOT}/script.py", "Projects")


class TestPrune:
    """Test cases for PruneHandler.prune()."""

    def test_removes_unsynced_system_files_only(self, handler, store):
        put(store, f"{ROOT}/README.md", annotated("README.md"))
        put(store, f"{ROOT}/old.md", annotated("old.md"))
        put(store, f"{ROOT}/notes.md", USER_NOTE)
        put(store, f"{ROOT}/img/stale.png", b"\x89PNG")

        deleted = handler.prune(ROOT, {f"{ROOT}/README.md"}, "Projects")

        assert sorted(deleted) == [f"{ROOT}/img/stale.png", f"{ROOT}/old.md"]
        assert store.is_file(f"{ROOT}/README.md")
        assert store.is_file(f"{ROOT}/notes.md")
        assert not store.exists(f"{ROOT}/old.md")

    def test_header_without_provenance_key_survives(self, handler, store):
        put(store, f"{ROOT}/titled.md", "---\ntitle: x\n---\n\nMy own note\n")
        put(store, f"{ROOT}/plain.md", "# No header at all\n")

        deleted = handler.prune(ROOT, set(), "Projects")

        assert deleted == []
        assert store.is_file(f"{ROOT}/titled.md")
        assert store.is_file(f"{ROOT}/plain.md")

    def test_empty_folders_removed_but_not_repo_root(self, handler, store):
        put(store, f"{ROOT}/docs/deep/old.md", annotated("docs/deep/old.md"))

        handler.prune(ROOT, set(), "Projects")

        assert not store.exists(f"{ROOT}/docs")
        assert store.is_dir(ROOT)

    def test_folder_with_user_file_is_kept(self, handler, store):
        put(store, f"{ROOT}/docs/old.md", annotated("docs/old.md"))
        put(store, f"{ROOT}/docs/mine.md", "my own note")

        handler.prune(ROOT, set(), "Projects")

        assert store.is_file(f"{ROOT}/docs/mine.md")

    def test_dry_run_deletes_nothing(self, handler, store):
        put(store, f"{ROOT}/docs/old.md", annotated("docs/old.md"))

        deleted = handler.prune(ROOT, set(), "Projects", dry_run=True)

        assert deleted == [f"{ROOT}/docs/old.md"]
        assert store.is_file(f"{ROOT}/docs/old.md")

    def test_missing_repo_root_is_noop(self, handler):
        assert handler.prune(ROOT, set(), "Projects") == []
