"""InitCommand for configuration initialization.

This module implements the --init command that writes a starter
.github-mirror/config.yaml from the namespaces and repositories given on the
command line and creates the base folder.
"""

import os
import logging
from typing import List, Optional

from src.file_mapper.config_loader import ConfigLoader
from src.file_mapper.errors import ConfigError
from src.file_mapper.models import MirrorConfig
from src.github_client.api_wrapper import APIWrapper
from src.github_client.auth import Authenticator
from src.github_client.errors import GitHubError, InvalidCredentialsError

from .errors import InitError
from .repo_resolver import RepoResolver

logger = logging.getLogger(__name__)


class InitCommand:
    """Handles initialization of mirror configuration.

    When a token is available, the first namespace is listed once so that a
    typo in a user or organization name is caught at init time.

    Example:
        >>> init = InitCommand()
        >>> init.run(namespaces=["octocat"], base_folder="Projects")
    """

    DEFAULT_CONFIG_PATH = ".github-mirror/config.yaml"

    def __init__(
        self,
        api_wrapper: Optional[APIWrapper] = None,
        config_path: Optional[str] = None
    ):
        """Initialize the init command.

        Args:
            api_wrapper: Optional APIWrapper instance for testing
            config_path: Optional config file path (defaults to .github-mirror/config.yaml)
        """
        self.api_wrapper = api_wrapper
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH

    def _get_api_wrapper(self) -> Optional[APIWrapper]:
        """Get or create the API wrapper; None when no token is configured."""
        if self.api_wrapper is None:
            auth = Authenticator()
            try:
                auth.get_credentials()
            except InvalidCredentialsError:
                return None
            self.api_wrapper = APIWrapper(auth)
        return self.api_wrapper

    def _check_config_exists(self) -> None:
        """Check if config file already exists.

        Raises:
            InitError: If config file already exists
        """
        if os.path.exists(self.config_path):
            raise InitError(
                f"Configuration file already exists at {self.config_path}\n"
                "Please delete it first if you want to reinitialize."
            )

    def _validate_namespace(self, namespace: str) -> Optional[int]:
        """List a namespace once.

        Returns:
            Number of repositories found, or None when validation was skipped

        Raises:
            InitError: If the namespace cannot be listed as user or organization
        """
        api = self._get_api_wrapper()
        if api is None:
            logger.warning("GITHUB_TOKEN not set - skipping namespace validation")
            return None

        try:
            repos = RepoResolver(api).discover_namespace(namespace)
        except GitHubError as e:
            raise InitError(
                f"Failed to list repositories for '{namespace}': {str(e)}"
            )
        logger.info(f"Namespace '{namespace}' has {len(repos)} repositories")
        return len(repos)

    def _create_directories(self, config: MirrorConfig) -> None:
        """Create the config directory and the base folder.

        Raises:
            InitError: If directory creation fails
        """
        config_dir = os.path.dirname(self.config_path)
        base_path = os.path.join(config.vault_path, *config.base_folder.split('/'))

        for directory in (config_dir, base_path):
            if not directory:
                continue
            try:
                os.makedirs(directory, exist_ok=True)
                logger.info(f"Created directory: {directory}")
            except Exception as e:
                raise InitError(
                    f"Failed to create directory {directory}: {str(e)}"
                )

    def run(
        self,
        namespaces: Optional[List[str]] = None,
        base_folder: str = "Projects",
        repos: Optional[List[str]] = None,
        vault_path: str = "."
    ) -> MirrorConfig:
        """Run the init command to create mirror configuration.

        Args:
            namespaces: Users or organizations to auto-discover
            base_folder: Folder holding mirrored repositories
            repos: Explicit repositories as "owner/repo" or "owner/repo@branch"
            vault_path: Root of the local store

        Returns:
            The saved configuration

        Raises:
            InitError: If initialization fails at any step
        """
        self._check_config_exists()

        namespaces = list(namespaces or [])
        repos = list(repos or [])
        if not namespaces and not repos:
            raise InitError("Provide at least one --namespace or --repo to mirror")

        try:
            config = ConfigLoader.from_dict({
                'base_folder': base_folder,
                'vault_path': vault_path,
                'namespaces': namespaces,
                'repos': repos,
            })
        except ConfigError as e:
            raise InitError(str(e))

        if config.namespaces:
            self._validate_namespace(config.namespaces[0])

        self._create_directories(config)

        try:
            ConfigLoader.save(self.config_path, config)
            logger.info(f"Configuration saved to {self.config_path}")
        except Exception as e:
            raise InitError(
                f"Failed to save configuration: {str(e)}"
            )

        logger.info(
            f"Initialized mirror into '{config.base_folder}' for "
            f"{len(config.namespaces)} namespace(s) and {len(config.repos)} repository(ies)"
        )
        return config
