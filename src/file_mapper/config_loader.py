"""YAML configuration loading and validation.

This module handles loading and saving the mirror configuration from
.github-mirror/config.yaml. The loaded MirrorConfig is an explicit value
threaded through the run; nothing reads configuration from global state.
"""

import os
from typing import Any, Dict, List
import yaml

from .errors import ConfigError, FilesystemError
from .models import AnnotationOptions, AutoDefaults, ManualRepo, MirrorConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        base_folder: Projects
        vault_path: .
        github_token: ''
        namespaces: [octocat]
        auto_defaults:
          include_private: false
          include_forks: false
          include_archived: false
          repo_glob: '*'
        repos:
          - owner: octocat
            repo: hello-world
            branch: main
        sync_interval_hours: 1
        auto_sync: false
        add_frontmatter: true
        add_readonly_banner: true
        add_backlinks: true
        prune_extraneous_files: false
        sync_media_files: false
    """

    DEFAULT_CONFIG_PATH = '.github-mirror/config.yaml'

    BOOLEAN_FIELDS = (
        'auto_sync',
        'add_frontmatter',
        'add_readonly_banner',
        'add_backlinks',
        'prune_extraneous_files',
        'sync_media_files',
    )

    AUTO_DEFAULT_BOOLEAN_FIELDS = ('include_private', 'include_forks', 'include_archived')

    @classmethod
    def load(cls, config_path: str) -> MirrorConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            MirrorConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except Exception as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def save(cls, config_path: str, config: MirrorConfig) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to the YAML configuration file
            config: MirrorConfig object to save

        Raises:
            FilesystemError: If file cannot be written
        """
        repos_list = []
        for repo in config.repos:
            repo_dict = {'owner': repo.owner, 'repo': repo.repo}
            if repo.branch:
                repo_dict['branch'] = repo.branch
            repos_list.append(repo_dict)

        config_dict = {
            'base_folder': config.base_folder,
            'vault_path': config.vault_path,
            'github_token': config.github_token,
            'namespaces': list(config.namespaces),
            'auto_defaults': {
                'include_private': config.auto_defaults.include_private,
                'include_forks': config.auto_defaults.include_forks,
                'include_archived': config.auto_defaults.include_archived,
                'repo_glob': config.auto_defaults.repo_glob,
            },
            'repos': repos_list,
            'sync_interval_hours': config.sync_interval_hours,
            'auto_sync': config.auto_sync,
            'add_frontmatter': config.annotations.add_frontmatter,
            'add_readonly_banner': config.annotations.add_readonly_banner,
            'add_backlinks': config.annotations.add_backlinks,
            'prune_extraneous_files': config.prune_extraneous_files,
            'sync_media_files': config.sync_media_files,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except Exception as e:
                raise FilesystemError(
                    config_dir,
                    'create_directory',
                    str(e)
                )

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(
                config_path,
                'write',
                'Permission denied'
            )
        except Exception as e:
            raise FilesystemError(
                config_path,
                'write',
                str(e)
            )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> MirrorConfig:
        """Validate a configuration given as a dictionary (e.g. built from CLI options).

        Raises:
            ConfigError: If configuration is invalid
        """
        return cls._parse_config(config_dict)

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> MirrorConfig:
        """Parse and validate configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary from YAML

        Returns:
            Validated MirrorConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        defaults = MirrorConfig()

        base_folder = str(config_dict.get('base_folder', defaults.base_folder) or '').strip().strip('/')
        if not base_folder:
            raise ConfigError("Field 'base_folder' cannot be empty", 'base_folder')
        if any(part in ('', '.', '..') for part in base_folder.split('/')):
            raise ConfigError(
                f"Field 'base_folder' must be a plain relative folder path, got '{base_folder}'",
                'base_folder'
            )

        vault_path = str(config_dict.get('vault_path', defaults.vault_path) or '.')
        github_token = str(config_dict.get('github_token') or '')

        namespaces = cls._parse_namespaces(config_dict.get('namespaces'))
        auto_defaults = cls._parse_auto_defaults(config_dict.get('auto_defaults'))
        repos = cls._parse_repos(config_dict.get('repos'))

        try:
            sync_interval_hours = float(
                config_dict.get('sync_interval_hours', defaults.sync_interval_hours)
            )
        except (ValueError, TypeError) as e:
            raise ConfigError(
                f"Invalid value for 'sync_interval_hours': {str(e)}",
                'sync_interval_hours'
            )
        if sync_interval_hours <= 0:
            raise ConfigError(
                f"Field 'sync_interval_hours' must be positive, got {sync_interval_hours}",
                'sync_interval_hours'
            )

        flags = {}
        for name in cls.BOOLEAN_FIELDS:
            value = config_dict.get(name)
            if value is None:
                value = getattr(defaults, name, None)
                if value is None:
                    value = getattr(defaults.annotations, name)
            if not isinstance(value, bool):
                raise ConfigError(
                    f"Field '{name}' must be a boolean, got {type(value).__name__}",
                    name
                )
            flags[name] = value

        return MirrorConfig(
            base_folder=base_folder,
            vault_path=vault_path,
            github_token=github_token,
            namespaces=namespaces,
            auto_defaults=auto_defaults,
            repos=repos,
            sync_interval_hours=sync_interval_hours,
            auto_sync=flags['auto_sync'],
            annotations=AnnotationOptions(
                add_frontmatter=flags['add_frontmatter'],
                add_readonly_banner=flags['add_readonly_banner'],
                add_backlinks=flags['add_backlinks'],
            ),
            prune_extraneous_files=flags['prune_extraneous_files'],
            sync_media_files=flags['sync_media_files'],
        )

    @classmethod
    def _parse_namespaces(cls, raw: Any) -> List[str]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ConfigError("Field 'namespaces' must be a list", 'namespaces')

        namespaces = []
        for i, namespace in enumerate(raw):
            name = str(namespace).strip() if namespace is not None else ''
            if not name:
                raise ConfigError(
                    f"Namespace at index {i} cannot be empty",
                    f'namespaces[{i}]'
                )
            if name not in namespaces:
                namespaces.append(name)
        return namespaces

    @classmethod
    def _parse_auto_defaults(cls, raw: Any) -> AutoDefaults:
        if raw is None:
            return AutoDefaults()
        if not isinstance(raw, dict):
            raise ConfigError("Field 'auto_defaults' must be a dictionary", 'auto_defaults')

        values = {}
        for name in cls.AUTO_DEFAULT_BOOLEAN_FIELDS:
            value = raw.get(name, False)
            if not isinstance(value, bool):
                raise ConfigError(
                    f"Field '{name}' must be a boolean, got {type(value).__name__}",
                    f'auto_defaults.{name}'
                )
            values[name] = value

        repo_glob = raw.get('repo_glob', '*')
        values['repo_glob'] = '*' if repo_glob is None else str(repo_glob).strip() or '*'
        return AutoDefaults(**values)

    @classmethod
    def _parse_repos(cls, raw: Any) -> List[ManualRepo]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ConfigError("Field 'repos' must be a list", 'repos')

        repos = []
        for i, entry in enumerate(raw):
            # Shorthand: "owner/repo" or "owner/repo@branch"
            if isinstance(entry, str):
                slug, _, branch = entry.partition('@')
                owner, _, repo = slug.partition('/')
                entry = {'owner': owner, 'repo': repo, 'branch': branch or None}

            if not isinstance(entry, dict):
                raise ConfigError(
                    f"Repository at index {i} must be a dictionary or 'owner/repo' string",
                    f'repos[{i}]'
                )

            owner = str(entry.get('owner') or '').strip()
            repo = str(entry.get('repo') or '').strip()
            if not owner or not repo:
                raise ConfigError(
                    f"Repository at index {i} requires both 'owner' and 'repo'",
                    f'repos[{i}]'
                )
            if '/' in owner or '/' in repo:
                raise ConfigError(
                    f"Repository at index {i} has '/' inside owner or repo name",
                    f'repos[{i}]'
                )

            branch = entry.get('branch')
            branch = str(branch).strip() if branch else None
            repos.append(ManualRepo(owner=owner, repo=repo, branch=branch or None))
        return repos
