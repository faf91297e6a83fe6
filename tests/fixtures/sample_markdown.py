"""Sample documents used across the mirror tests."""

PLAIN_README = """# Hello World

This is the upstream README.

- item one
- item two
"""

# Output of the full annotation pipeline for octocat/hello-world README.md
ANNOTATED_README = """---
github_repo: octocat/hello-world
github_path: README.md
github_url: https://github.com/octocat/hello-world/blob/main/README.md
synced_at: '2026-01-30T10:00:00+00:00'
readonly: true
---

> [!WARNING] Read-Only
> This file is synced from GitHub. Any local changes will be overwritten.
> View source: [octocat/hello-world](https://github.com/octocat/hello-world/blob/main/README.md)

← [[Projects]]

# Hello World

This is the upstream README.

- item one
- item two
"""

USER_NOTE = """---
tags: [personal]
---

My own notes next to the mirrored files.
"""

SAMPLE_CONFIG_YAML = """base_folder: Projects
vault_path: .
namespaces:
  - octocat
auto_defaults:
  include_private: false
  include_forks: false
  include_archived: false
  repo_glob: '*'
repos:
  - owner: octocat
    repo: hello-world
    branch: develop
  - other/docs
sync_interval_hours: 2
prune_extraneous_files: true
sync_media_files: true
"""
