"""Unit tests for github_client.listing module."""

import pytest

from src.github_client.listing import (
    RemoteListing,
    calculate_backlink_target,
    is_markdown_file,
    is_media_file,
    is_syncable,
)
from src.models.repository import RepoRef
from src.models.tree_entry import TreeEntry


class TestClassification:
    """Test cases for file classification helpers."""

    @pytest.mark.parametrize("path", ["README.md", "docs/guide.md", "pages/index.mdx"])
    def test_markdown_files(self, path):
        assert is_markdown_file(path)

    @pytest.mark.parametrize("path", ["README.markdown", "notes.txt", "README.MD"])
    def test_non_markdown_files(self, path):
        assert not is_markdown_file(path)

    @pytest.mark.parametrize("path", ["img/logo.PNG", "a.jpeg", "clip.webm", "paper.pdf"])
    def test_media_files_case_insensitive(self, path):
        assert is_media_file(path)

    def test_source_files_are_not_media(self):
        assert not is_media_file("src/main.py")

    def test_tree_entries_are_never_syncable(self):
        entry = TreeEntry(path="docs.md", type="tree", sha="t1")
        assert not is_syncable(entry, include_media=True)

    def test_media_requires_flag(self):
        entry = TreeEntry(path="img/logo.png", type="blob", sha="b1")

        assert not is_syncable(entry, include_media=False)
        assert is_syncable(entry, include_media=True)

    def test_markdown_always_syncable(self):
        entry = TreeEntry(path="README.md", type="blob", sha="b1")
        assert is_syncable(entry, include_media=False)


class TestCalculateBacklinkTarget:
    """Test cases for backlink target computation."""

    ROOT = "Projects/octocat/hello-world"

    def test_root_file_links_to_base_folder(self):
        assert calculate_backlink_target("Projects", self.ROOT, "README.md") == "Projects"

    def test_first_level_file_links_to_repo_readme(self):
        assert calculate_backlink_target("Projects", self.ROOT, "docs/guide.md") == (
            "Projects/octocat/hello-world/README"
        )

    def test_nested_file_links_to_parent_directory_readme(self):
        assert calculate_backlink_target("Projects", self.ROOT, "docs/guides/deploy.md") == (
            "Projects/octocat/hello-world/docs/README"
        )

    def test_deeply_nested_file(self):
        assert calculate_backlink_target("Projects", self.ROOT, "a/b/c/d.md") == (
            "Projects/octocat/hello-world/a/b/README"
        )


class TestRemoteListing:
    """Test cases for RemoteListing against the fake API."""

    def test_lists_only_syncable_blobs(self, fake_api):
        fake_api.add_repo("octocat", "hello-world", {
            "README.md": "# Hi",
            "docs/guide.md": "guide",
            "img/logo.png": b"\x89PNG",
            "src/main.py": "print()",
        })
        listing = RemoteListing(fake_api)

        files = listing.list_syncable_files(RepoRef("octocat", "hello-world"))

        assert [f.path for f in files] == ["README.md", "docs/guide.md"]

    def test_includes_media_when_enabled(self, fake_api):
        fake_api.add_repo("octocat", "hello-world", {
            "README.md": "# Hi",
            "img/logo.png": b"\x89PNG",
        })
        listing = RemoteListing(fake_api)

        files = listing.list_syncable_files(RepoRef("octocat", "hello-world"), include_media=True)

        assert [f.path for f in files] == ["README.md", "img/logo.png"]

    def test_resolves_branch_before_listing_tree(self, fake_api):
        fake_api.add_repo("octocat", "hello-world", {"README.md": "# Hi"})
        listing = RemoteListing(fake_api)

        listing.list_syncable_files(RepoRef("octocat", "hello-world", branch="dev"))

        assert fake_api.call_names()[:2] == ["resolve_branch_head", "list_tree"]
        assert fake_api.calls[0] == ("resolve_branch_head", "octocat/hello-world@dev")

    def test_fetch_content_returns_bytes_for_media(self, fake_api):
        fake_api.add_repo("octocat", "hello-world", {
            "README.md": "# Hi",
            "img/logo.png": b"\x89PNG",
        })
        listing = RemoteListing(fake_api)
        ref = RepoRef("octocat", "hello-world")

        assert listing.fetch_content(ref, TreeEntry("img/logo.png", "blob", "b")) == b"\x89PNG"
        assert listing.fetch_content(ref, TreeEntry("README.md", "blob", "b")) == "# Hi"

    def test_build_file_url_uses_branch(self, fake_api):
        listing = RemoteListing(fake_api)

        url = listing.build_file_url(RepoRef("octocat", "hello-world", branch="dev"), "docs/a.md")

        assert url == "https://github.com/octocat/hello-world/blob/dev/docs/a.md"
