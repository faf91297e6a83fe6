"""Unit tests for cli.strip_command module."""

from src.cli.strip_command import StripCommand
from src.file_mapper.errors import FilesystemError
from tests.fixtures.sample_markdown import ANNOTATED_README, PLAIN_README, USER_NOTE

ROOT = "Projects/octocat/hello-world"


def put(store, path, content):
    store.ensure_folder(path.rsplit("/", 1)[0])
    store.write_text(path, content)


class TestStripCommand:
    """Test cases for StripCommand.run()."""

    def test_strips_mirrored_files_and_skips_others(self, store, config):
        put(store, f"{ROOT}/README.md", ANNOTATED_README)
        put(store, f"{ROOT}/docs/notes.md", USER_NOTE)
        put(store, f"{ROOT}/img/logo.txt", "not markdown")

        summary = StripCommand(store).run(config)

        assert summary.stripped == [f"{ROOT}/README.md"]
        assert summary.skipped == [f"{ROOT}/docs/notes.md"]
        assert summary.failed == []
        assert store.read_text(f"{ROOT}/README.md") == PLAIN_README
        assert store.read_text(f"{ROOT}/docs/notes.md") == USER_NOTE

    def test_dry_run_leaves_files(self, store, config):
        put(store, f"{ROOT}/README.md", ANNOTATED_README)

        summary = StripCommand(store).run(config, dry_run=True)

        assert summary.stripped == [f"{ROOT}/README.md"]
        assert store.read_text(f"{ROOT}/README.md") == ANNOTATED_README

    def test_missing_base_folder(self, store, config):
        summary = StripCommand(store).run(config)

        assert summary.stripped == [] and summary.skipped == [] and summary.failed == []

    def test_write_failure_is_recorded(self, store, config, mocker):
        put(store, f"{ROOT}/README.md", ANNOTATED_README)
        mocker.patch.object(store, "write_text", side_effect=FilesystemError("x", "write", "denied"))

        summary = StripCommand(store).run(config)

        assert summary.failed == [f"{ROOT}/README.md"]

    def test_store_created_from_config(self, config, tmp_path):
        (tmp_path / "Projects").mkdir()
        command = StripCommand()

        command.run(config)

        assert command.store.root == str(tmp_path)
