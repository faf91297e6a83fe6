"""State file loading and validation.

This module handles loading and saving the cross-run baseline: the set of
repository ids the previous run resolved, which drives cleanup of
repositories that fell out of scope.
"""

import os
from datetime import datetime
from typing import Dict, Any
import yaml

from .errors import StateError, StateFilesystemError
from .models import SyncState


class StateManager:
    """Handles state file loading, validation, and saving.

    State file structure:
        last_synced_repo_ids:
          - octocat/hello-world
          - octocat/spoon-knife
        last_sync_time: "2026-01-15T10:30:00+00:00"

    If the file is missing or empty, it's treated as a fresh state
    (never synced): no previous repository ids and no timestamp.
    """

    DEFAULT_STATE_DIR = '.github-mirror'
    DEFAULT_STATE_FILE = 'state.yaml'

    @classmethod
    def default_path(cls) -> str:
        return os.path.join(cls.DEFAULT_STATE_DIR, cls.DEFAULT_STATE_FILE)

    @classmethod
    def load(cls, state_path: str) -> SyncState:
        """Load and parse state from a YAML file.

        Args:
            state_path: Path to the YAML state file

        Returns:
            SyncState object with parsed state

        Raises:
            StateFilesystemError: If file cannot be read (except FileNotFoundError)
            StateError: If state file is invalid or malformed
        """
        try:
            with open(state_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            # Missing state file is normal for first sync
            return SyncState()
        except PermissionError:
            raise StateFilesystemError(
                state_path,
                'read',
                'Permission denied'
            )
        except Exception as e:
            raise StateFilesystemError(
                state_path,
                'read',
                str(e)
            )

        if not content.strip():
            return SyncState()

        try:
            state_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise StateError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if state_dict is None:
            return SyncState()

        if not isinstance(state_dict, dict):
            raise StateError(
                f"State must be a YAML dictionary, got {type(state_dict).__name__}"
            )

        return cls._parse_state(state_dict)

    @classmethod
    def save(cls, state_path: str, sync_state: SyncState) -> None:
        """Save state to a YAML file.

        Repository ids are written sorted so the file diffs cleanly between runs.

        Args:
            state_path: Path to the YAML state file
            sync_state: SyncState object to save

        Raises:
            StateFilesystemError: If file cannot be written
        """
        state_dict = {
            'last_synced_repo_ids': sorted(sync_state.last_synced_repo_ids),
            'last_sync_time': sync_state.last_sync_time,
        }

        yaml_str = yaml.safe_dump(
            state_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        state_dir = os.path.dirname(state_path)
        if state_dir:
            try:
                os.makedirs(state_dir, exist_ok=True)
            except Exception as e:
                raise StateFilesystemError(
                    state_dir,
                    'create_directory',
                    str(e)
                )

        try:
            with open(state_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise StateFilesystemError(
                state_path,
                'write',
                'Permission denied'
            )
        except Exception as e:
            raise StateFilesystemError(
                state_path,
                'write',
                str(e)
            )

    @classmethod
    def _parse_state(cls, state_dict: Dict[str, Any]) -> SyncState:
        """Parse and validate state dictionary.

        Raises:
            StateError: If state is invalid
        """
        last_sync_time = state_dict.get('last_sync_time')

        if last_sync_time is not None:
            # Unquoted timestamps come back from YAML as datetime objects
            if isinstance(last_sync_time, datetime):
                last_sync_time = last_sync_time.isoformat()
            if not isinstance(last_sync_time, str):
                raise StateError(
                    f"Field 'last_sync_time' must be a string (ISO 8601 timestamp), "
                    f"got {type(last_sync_time).__name__}",
                    'last_sync_time'
                )
            last_sync_time = last_sync_time.strip() or None

        repo_ids = state_dict.get('last_synced_repo_ids')
        if repo_ids is None:
            repo_ids = []
        if not isinstance(repo_ids, list):
            raise StateError(
                f"Field 'last_synced_repo_ids' must be a list, got {type(repo_ids).__name__}",
                'last_synced_repo_ids'
            )

        for repo_id in repo_ids:
            if not isinstance(repo_id, str):
                raise StateError(
                    f"Field 'last_synced_repo_ids' entries must be strings, got {type(repo_id).__name__}",
                    'last_synced_repo_ids'
                )

        return SyncState(
            last_synced_repo_ids={repo_id.strip() for repo_id in repo_ids if repo_id.strip()},
            last_sync_time=last_sync_time,
        )
