"""Authentication module for loading the GitHub token.

This module loads the GitHub personal access token from environment variables
using python-dotenv, falling back to the token stored in the mirror
configuration. It raises an error when no token is available at all.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

DEFAULT_API_URL = "https://api.github.com"


class Credentials(NamedTuple):
    """GitHub API credentials."""
    token: str
    api_url: str


class Authenticator:
    """Loads and validates GitHub credentials.

    Lookup order for the token:
        1. GITHUB_TOKEN environment variable (a .env file is honoured)
        2. The ``fallback_token`` passed in (usually ``github_token`` from config)

    The API base URL can be overridden with GITHUB_API_URL (GitHub Enterprise).

    Raises:
        InvalidCredentialsError: If no token is configured

    Example:
        >>> auth = Authenticator(fallback_token=config.github_token)
        >>> creds = auth.get_credentials()
    """

    def __init__(self, fallback_token: Optional[str] = None):
        """Initialize the authenticator by loading environment variables from .env file.

        Args:
            fallback_token: Token to use when GITHUB_TOKEN is not set
        """
        load_dotenv()
        self._fallback_token = fallback_token

    def get_credentials(self) -> Credentials:
        """Get GitHub credentials.

        Returns:
            Credentials: A named tuple containing token and api_url

        Raises:
            InvalidCredentialsError: If no token is configured
        """
        api_url = (os.getenv('GITHUB_API_URL') or DEFAULT_API_URL).rstrip('/')
        token = os.getenv('GITHUB_TOKEN') or self._fallback_token

        if not token or not token.strip():
            raise InvalidCredentialsError(
                endpoint=api_url,
                reason="set GITHUB_TOKEN or github_token in config"
            )

        return Credentials(token=token.strip(), api_url=api_url)
