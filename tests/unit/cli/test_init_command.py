"""Unit tests for cli.init_command module."""

import pytest
from unittest.mock import Mock

from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.file_mapper.config_loader import ConfigLoader
from src.file_mapper.models import ManualRepo


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / ".github-mirror" / "config.yaml")


class TestInitCommand:
    """Test cases for InitCommand.run()."""

    def test_writes_config_and_creates_base_folder(self, fake_api, config_path, tmp_path):
        fake_api.add_repo("octocat", "hello-world")
        init = InitCommand(api_wrapper=fake_api, config_path=config_path)

        config = init.run(
            namespaces=["octocat"],
            repos=["other/docs@dev"],
            base_folder="Notes/GitHub",
            vault_path=str(tmp_path),
        )

        assert ConfigLoader.load(config_path) == config
        assert config.repos == [ManualRepo("other", "docs", "dev")]
        assert (tmp_path / "Notes" / "GitHub").is_dir()

    def test_existing_config_is_not_overwritten(self, fake_api, config_path, tmp_path):
        init = InitCommand(api_wrapper=fake_api, config_path=config_path)
        init.run(repos=["octocat/hello-world"], vault_path=str(tmp_path))

        with pytest.raises(InitError, match="already exists"):
            init.run(repos=["octocat/other"], vault_path=str(tmp_path))

    def test_requires_namespace_or_repo(self, fake_api, config_path):
        with pytest.raises(InitError, match="at least one"):
            InitCommand(api_wrapper=fake_api, config_path=config_path).run()

    def test_unknown_namespace_fails(self, fake_api, config_path, tmp_path):
        init = InitCommand(api_wrapper=fake_api, config_path=config_path)

        with pytest.raises(InitError, match="ghost"):
            init.run(namespaces=["ghost"], vault_path=str(tmp_path))

    def test_invalid_base_folder_fails(self, fake_api, config_path):
        init = InitCommand(api_wrapper=fake_api, config_path=config_path)

        with pytest.raises(InitError, match="base_folder"):
            init.run(namespaces=["octocat"], base_folder="../escape")

    def test_validation_skipped_without_token(self, config_path, tmp_path):
        init = InitCommand(config_path=config_path)

        config = init.run(namespaces=["octocat"], vault_path=str(tmp_path))

        assert config.namespaces == ["octocat"]

    def test_only_first_namespace_is_validated(self, config_path, tmp_path):
        api = Mock()
        api.list_user_repos.return_value = []
        init = InitCommand(api_wrapper=api, config_path=config_path)

        init.run(namespaces=["first", "second"], vault_path=str(tmp_path))

        api.list_user_repos.assert_called_once_with("first")
