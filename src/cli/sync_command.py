"""Sync command orchestration for CLI.

This module provides the SyncCommand class that sequences one mirror run:
resolve repositories, clean up repositories that fell out of scope, then
list, reconcile and prune each repository in turn, and finally persist the
set of repository ids for the next run's cleanup.
"""

import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional

from src.cli.cleanup_handler import CleanupHandler
from src.cli.config import StateManager
from src.cli.errors import CLIError, ConfigNotFoundError
from src.cli.models import ExitCode, ResolutionResult, SyncState, SyncSummary
from src.cli.output import OutputHandler
from src.cli.prune_handler import PruneHandler
from src.cli.repo_resolver import RepoResolver
from src.cli.run_lock import RunLock
from src.file_mapper.config_loader import ConfigLoader
from src.file_mapper.errors import ConfigError
from src.file_mapper.file_reconciler import FileReconciler, repo_root_path
from src.file_mapper.local_store import LocalStore
from src.file_mapper.models import MirrorConfig, RepoSyncResult
from src.github_client.api_wrapper import APIWrapper
from src.github_client.auth import Authenticator
from src.github_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
)
from src.github_client.listing import RemoteListing
from src.models.repository import RepoRef

logger = logging.getLogger(__name__)


class SyncCommand:
    """Orchestrates a complete mirror run for the CLI.

    The sync workflow:
        1. Load configuration and check that a token and repositories exist
        2. Take the run lock
        3. Load the previous run's repository ids
        4. Resolve repositories (manual + auto-discovered)
        5. Remove local trees of repositories no longer resolved
        6. For each repository: list, reconcile, prune (when enabled),
           continuing past failures
        7. Persist the resolved ids and the run time (skipped in dry run)
        8. Print the summary and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> sync_cmd = SyncCommand(output_handler=output)
        >>> exit_code = sync_cmd.run(dry_run=False)
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = ".github-mirror/config.yaml",
        state_path: str = ".github-mirror/state.yaml",
        lock_path: str = RunLock.DEFAULT_LOCK_PATH,
        state_manager: Optional[StateManager] = None,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[APIWrapper] = None,
        store: Optional[LocalStore] = None,
    ):
        """Initialize sync command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            state_path: Path to state YAML file
            lock_path: Path of the run lock file
            state_manager: StateManager for state management (optional)
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for the GitHub API (optional)
            api: APIWrapper for the GitHub API (optional)
            store: LocalStore rooted at the vault (optional)

        Note:
            All dependencies are optional to support testing. In production
            they are created from the loaded configuration.
        """
        self.config_path = config_path
        self.state_path = state_path
        self.lock_path = lock_path

        self.output_handler = output_handler or OutputHandler()
        self.state_manager = state_manager or StateManager()
        self.authenticator = authenticator
        self.api = api
        self.store = store

    def run(self, dry_run: bool = False) -> ExitCode:
        """Execute one mirror run.

        Translates exceptions to exit codes; configuration and credential
        problems abort before any network activity.

        Args:
            dry_run: If True, report what would change without writing

        Returns:
            ExitCode.SUCCESS if every repository synced,
            ExitCode.PARTIAL_FAILURE if any repository failed
        """
        try:
            logger.info(f"Loading configuration from {self.config_path}")
            self.output_handler.info(f"Loading configuration from {self.config_path}")

            if not Path(self.config_path).exists():
                self.output_handler.print("No mirror configuration found.\n")
                self.output_handler.print("To get started, initialize with a user or organization:\n")
                self.output_handler.print("  github-mirror --init --namespace octocat\n")
                self.output_handler.print("Required environment variables:")
                self.output_handler.print("  GITHUB_TOKEN    - Personal access token (or github_token in config)\n")
                self.output_handler.print("Run 'github-mirror --help' for more options.")
                raise ConfigNotFoundError(self.config_path)

            config = ConfigLoader.load(self.config_path)

            if not config.repos and not config.namespaces:
                self.output_handler.error(
                    "No repositories configured. Add 'repos' or 'namespaces' to "
                    f"{self.config_path}"
                )
                return ExitCode.GENERAL_ERROR

            if not self.authenticator:
                self.authenticator = Authenticator(fallback_token=config.github_token or None)

            # Fail on a missing token before any request is made
            self.authenticator.get_credentials()

            with RunLock(self.lock_path):
                return self._run_sync(config, dry_run)

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check the GITHUB_TOKEN environment variable or github_token in the config"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during sync")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _run_sync(self, config: MirrorConfig, dry_run: bool) -> ExitCode:
        """Run the sync sequence while holding the run lock."""
        state = self.state_manager.load(self.state_path)
        logger.info(
            f"Last synced: {state.last_sync_time or 'never'} "
            f"({len(state.last_synced_repo_ids)} repositories)"
        )

        if not self.api:
            self.api = APIWrapper(self.authenticator)
        if not self.store:
            self.store = LocalStore(config.vault_path)

        listing = RemoteListing(self.api)
        reconciler = FileReconciler(listing, self.store)
        pruner = PruneHandler(self.store)
        cleanup = CleanupHandler(self.store, config.base_folder)

        with self.output_handler.spinner("Resolving repositories..."):
            resolution = RepoResolver(self.api).resolve(config)

        if not resolution.repos:
            self.output_handler.error("No repositories resolved; nothing to sync")
            for namespace in resolution.failed_namespaces:
                self.output_handler.warning(f"Discovery failed for namespace '{namespace}'")
            return ExitCode.GENERAL_ERROR

        self.output_handler.info(f"Resolved {len(resolution.repos)} repositories")

        summary = SyncSummary()

        # Cleanup compares the previous footprint against the newly resolved scope
        summary.repos_removed = cleanup.cleanup(
            state.last_synced_repo_ids,
            resolution.repo_ids,
            protected_owners=resolution.failed_namespaces,
            dry_run=dry_run,
        )
        self.output_handler.print_cleanup_summary(summary.repos_removed, dry_run)

        for repo_ref in resolution.repos:
            self.output_handler.print(f"[bold]{repo_ref.repo_id}[/bold] ({repo_ref.branch})")
            try:
                result = self._sync_repository(
                    repo_ref, config, dry_run, listing, reconciler, pruner
                )
            except InvalidCredentialsError:
                raise
            except Exception as e:
                logger.error(f"Failed to sync {repo_ref.repo_id}: {e}")
                self.output_handler.error(f"Failed to sync {repo_ref.repo_id}: {e}")
                summary.repos_failed.append(repo_ref.repo_id)
                continue

            summary.repos_succeeded.append(repo_ref.repo_id)
            summary.created_count += len(result.created)
            summary.updated_count += len(result.updated)
            summary.unchanged_count += len(result.unchanged)
            summary.failed_file_count += len(result.failed)
            summary.pruned_count += len(result.pruned)

        if dry_run:
            logger.info("Dry run: state not saved")
        else:
            self._save_state(resolution)

        self.output_handler.print_summary(summary, dry_run)

        if summary.repos_failed:
            return ExitCode.PARTIAL_FAILURE
        return ExitCode.SUCCESS

    def _sync_repository(
        self,
        repo_ref: RepoRef,
        config: MirrorConfig,
        dry_run: bool,
        listing: RemoteListing,
        reconciler: FileReconciler,
        pruner: PruneHandler
    ) -> RepoSyncResult:
        """List, reconcile and prune one repository.

        Raises:
            GitHubError: If the branch or tree cannot be listed
        """
        files = listing.list_syncable_files(repo_ref, include_media=config.sync_media_files)
        result = reconciler.sync_repository(repo_ref, files, config, dry_run=dry_run)

        if config.prune_extraneous_files:
            repo_root = repo_root_path(config.base_folder, repo_ref.owner, repo_ref.repo)
            # A file that failed this pass still exists upstream
            keep = result.synced_paths | {f"{repo_root}/{path}" for path in result.failed}
            result.pruned = pruner.prune(
                repo_root,
                keep,
                config.base_folder,
                dry_run=dry_run,
            )

        return result

    def _save_state(self, resolution: ResolutionResult) -> None:
        new_state = SyncState(
            last_synced_repo_ids=resolution.repo_ids,
            last_sync_time=datetime.now(UTC).isoformat(),
        )
        self.state_manager.save(self.state_path, new_state)
        logger.info(f"Saved state for {len(new_state.last_synced_repo_ids)} repositories")
