"""Integration tests for complete mirror runs."""

import pytest

from src.cli.config import StateManager
from src.cli.models import ExitCode
from src.file_mapper.annotation_codec import AnnotationCodec
from tests.helpers.assertion_helpers import assert_tree_equals, list_tree_files, read_tree_file

pytestmark = pytest.mark.integration

HELLO = {
    "README.md": "# Hello World\n",
    "docs/guide.md": "# Guide\n",
    "docs/guides/deploy.md": "# Deploy\n",
    "img/logo.png": b"\x89PNG\r\n",
    "src/main.py": "print('hi')\n",
}


def snapshot(vault):
    return {
        path: (vault / path).read_bytes()
        for path in list_tree_files(vault)
        if not path.startswith(".github-mirror/")
    }


class TestFirstRun:
    """A first run mirrors Markdown into base/owner/repo."""

    def test_tree_layout_and_annotations(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"])

        assert run_mirror() == ExitCode.SUCCESS

        assert_tree_equals(vault, [
            "Projects/octocat/hello-world/README.md",
            "Projects/octocat/hello-world/docs/guide.md",
            "Projects/octocat/hello-world/docs/guides/deploy.md",
        ])
        deploy = read_tree_file(vault, "Projects/octocat/hello-world/docs/guides/deploy.md")
        assert AnnotationCodec.extract_metadata(deploy).path == "docs/guides/deploy.md"
        assert "← [[Projects/octocat/hello-world/docs/README]]" in deploy
        readme = read_tree_file(vault, "Projects/octocat/hello-world/README.md")
        assert "← [[Projects]]" in readme

    def test_media_mirrored_when_enabled(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"], sync_media_files=True)

        run_mirror()

        assert (vault / "Projects/octocat/hello-world/img/logo.png").read_bytes() == b"\x89PNG\r\n"

    def test_org_namespace_and_manual_branch(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("github", "docs", {"index.md": "# Docs\n"}, org=True)
        fake_api.add_repo("octocat", "site", {"README.md": "# Site\n"})
        write_config(namespaces=["github"], repos=["octocat/site@gh-pages"])

        assert run_mirror() == ExitCode.SUCCESS

        site = read_tree_file(vault, "Projects/octocat/site/README.md")
        assert "blob/gh-pages/README.md" in site
        assert (vault / "Projects/github/docs/index.md").is_file()


class TestSteadyState:
    """Repeated runs without upstream changes converge."""

    def test_second_run_changes_nothing(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"], sync_media_files=True, prune_extraneous_files=True)
        run_mirror()
        first = snapshot(vault)

        assert run_mirror() == ExitCode.SUCCESS

        assert snapshot(vault) == first

    def test_state_tracks_resolved_repositories(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "a", {"README.md": "a"})
        fake_api.add_repo("octocat", "b", {"README.md": "b"})
        write_config(namespaces=["octocat"])

        run_mirror()

        state = StateManager.load(str(vault / ".github-mirror" / "state.yaml"))
        assert state.last_synced_repo_ids == {"octocat/a", "octocat/b"}


class TestScopeChanges:
    """Cleanup and pruning follow upstream and configuration changes."""

    def test_removed_repository_is_cleaned_up(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "a", {"README.md": "a"})
        fake_api.add_repo("octocat", "b", {"README.md": "b"})
        write_config(namespaces=["octocat"])
        run_mirror()

        fake_api.remove_repo("octocat", "b")
        assert run_mirror() == ExitCode.SUCCESS

        assert_tree_equals(vault, ["Projects/octocat/a/README.md"])

    def test_repository_filtered_out_is_cleaned_up(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "docs-site", {"README.md": "a"})
        fake_api.add_repo("octocat", "api", {"README.md": "b"})
        write_config(namespaces=["octocat"])
        run_mirror()

        write_config(namespaces=["octocat"], auto_defaults={"repo_glob": "docs-*"})
        run_mirror()

        assert_tree_equals(vault, ["Projects/octocat/docs-site/README.md"])

    def test_last_repository_of_owner_removes_owner_folder(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "a", {"README.md": "a"})
        fake_api.add_repo("other", "x", {"README.md": "x"})
        write_config(repos=["octocat/a", "other/x"])
        run_mirror()

        write_config(repos=["octocat/a"])
        run_mirror()

        assert not (vault / "Projects" / "other").exists()

    def test_upstream_deletion_is_pruned_but_user_notes_survive(
        self, vault, fake_api, write_config, run_mirror
    ):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"], prune_extraneous_files=True)
        run_mirror()
        note = vault / "Projects/octocat/hello-world/docs/my-notes.md"
        note.write_text("my own notes\n", encoding="utf-8")

        del fake_api.files["octocat/hello-world"]["docs/guides/deploy.md"]
        run_mirror()

        assert not (vault / "Projects/octocat/hello-world/docs/guides").exists()
        assert note.read_text(encoding="utf-8") == "my own notes\n"
        assert (vault / "Projects/octocat/hello-world/docs/guide.md").is_file()

    def test_pruning_disabled_keeps_stale_files(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"])
        run_mirror()

        del fake_api.files["octocat/hello-world"]["docs/guide.md"]
        run_mirror()

        assert (vault / "Projects/octocat/hello-world/docs/guide.md").is_file()


class TestFailures:
    """One failing repository does not stop the others."""

    def test_partial_failure(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "broken", {"README.md": "x"})
        fake_api.add_repo("octocat", "fine", {"README.md": "y"})
        fake_api.failing_repos.add("octocat/broken")
        write_config(namespaces=["octocat"])

        assert run_mirror() == ExitCode.PARTIAL_FAILURE

        assert (vault / "Projects/octocat/fine/README.md").is_file()

    def test_failing_repository_keeps_previous_tree(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "flaky", {"README.md": "x"})
        write_config(namespaces=["octocat"], prune_extraneous_files=True)
        run_mirror()

        fake_api.failing_repos.add("octocat/flaky")
        run_mirror()

        assert (vault / "Projects/octocat/flaky/README.md").is_file()


class TestDryRun:
    def test_dry_run_then_real_run(self, vault, fake_api, write_config, run_mirror):
        fake_api.add_repo("octocat", "hello-world", HELLO)
        write_config(namespaces=["octocat"])

        assert run_mirror(dry_run=True) == ExitCode.SUCCESS
        assert not (vault / "Projects").exists()

        assert run_mirror() == ExitCode.SUCCESS
        assert (vault / "Projects/octocat/hello-world/README.md").is_file()
