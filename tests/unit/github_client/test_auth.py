"""Unit tests for github_client.auth module."""

import pytest

from src.github_client.auth import Authenticator, Credentials, DEFAULT_API_URL
from src.github_client.errors import InvalidCredentialsError


class TestAuthenticator:
    """Test cases for Authenticator class."""

    def test_env_token_is_used(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'ghp_from_env')

        creds = Authenticator().get_credentials()

        assert creds == Credentials(token='ghp_from_env', api_url=DEFAULT_API_URL)

    def test_env_token_takes_precedence_over_fallback(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'ghp_from_env')

        creds = Authenticator(fallback_token='ghp_from_config').get_credentials()

        assert creds.token == 'ghp_from_env'

    def test_fallback_token_used_when_env_missing(self):
        creds = Authenticator(fallback_token='  ghp_from_config  ').get_credentials()

        assert creds.token == 'ghp_from_config'

    def test_missing_token_raises(self):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_credentials()

        assert 'GITHUB_TOKEN' in str(exc_info.value)

    def test_blank_token_raises(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', '   ')

        with pytest.raises(InvalidCredentialsError):
            Authenticator().get_credentials()

    def test_api_url_override_strips_trailing_slash(self, monkeypatch):
        monkeypatch.setenv('GITHUB_TOKEN', 'ghp_x')
        monkeypatch.setenv('GITHUB_API_URL', 'https://github.example.com/api/v3/')

        creds = Authenticator().get_credentials()

        assert creds.api_url == 'https://github.example.com/api/v3'
