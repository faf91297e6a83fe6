"""Pytest configuration and fixtures for integration tests.

Integration tests run complete mirror passes through SyncCommand against
the in-memory fake GitHub and a real vault directory under tmp_path.
"""

from unittest.mock import Mock

import pytest
import yaml

from src.cli.output import OutputHandler
from src.cli.sync_command import SyncCommand


@pytest.fixture
def vault(tmp_path):
    """Vault directory with an empty .github-mirror folder."""
    (tmp_path / ".github-mirror").mkdir()
    return tmp_path


@pytest.fixture
def write_config(vault):
    """Write .github-mirror/config.yaml for the vault and return its path."""
    def _write(**fields):
        config = {"base_folder": "Projects", "vault_path": str(vault)}
        config.update(fields)
        config_path = vault / ".github-mirror" / "config.yaml"
        config_path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")
        return str(config_path)
    return _write


@pytest.fixture
def run_mirror(vault, fake_api):
    """Run one mirror pass and return its exit code."""
    def _run(dry_run=False):
        state_dir = vault / ".github-mirror"
        command = SyncCommand(
            config_path=str(state_dir / "config.yaml"),
            state_path=str(state_dir / "state.yaml"),
            lock_path=str(state_dir / "sync.lock"),
            output_handler=OutputHandler(verbosity=0, no_color=True),
            authenticator=Mock(),
            api=fake_api,
        )
        return command.run(dry_run=dry_run)
    return _run
