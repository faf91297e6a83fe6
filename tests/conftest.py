"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import pytest

from src.file_mapper.local_store import LocalStore
from src.file_mapper.models import MirrorConfig
from tests.helpers.fake_github import FakeGitHubAPI


@pytest.fixture(autouse=True)
def isolated_github_env(monkeypatch):
    """Keep a developer's real token and API URL out of the tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    # load_dotenv() must not pick up a .env from the working directory
    monkeypatch.setattr("src.github_client.auth.load_dotenv", lambda *args, **kwargs: False)


@pytest.fixture
def fake_api():
    return FakeGitHubAPI()


@pytest.fixture
def store(tmp_path):
    return LocalStore(str(tmp_path))


@pytest.fixture
def config(tmp_path):
    return MirrorConfig(base_folder="Projects", vault_path=str(tmp_path))
