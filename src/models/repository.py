"""Repository data models."""

from dataclasses import dataclass
from typing import Literal


@dataclass
class RemoteRepository:
    """Repository as returned by the GitHub repository listing.

    Only the fields the resolver filters on are kept.

    Attributes:
        name: Repository name (e.g., "hello-world")
        owner: Login of the owning user or organization
        default_branch: Branch synced for auto-discovered repositories
        private: True for private repositories
        fork: True if the repository is a fork
        archived: True if the repository is archived
    """
    name: str
    owner: str
    default_branch: str = "main"
    private: bool = False
    fork: bool = False
    archived: bool = False

    @property
    def repo_id(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class RepoRef:
    """A repository selected for mirroring in the current run.

    Identity is ``owner/repo``; the branch is a sync parameter and does not
    take part in identity comparisons done by the resolver and cleanup.

    Attributes:
        owner: Repository owner login
        repo: Repository name
        branch: Branch to mirror
        origin: "manual" for configured entries, "auto" for discovered ones
    """
    owner: str
    repo: str
    branch: str = "main"
    origin: Literal["manual", "auto"] = "manual"

    @property
    def repo_id(self) -> str:
        return f"{self.owner}/{self.repo}"
