"""Provenance metadata model for mirrored files."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileMetadata:
    """Provenance of a mirrored Markdown file.

    Derived per file at sync time and embedded into the annotation header.
    It is also recovered by parsing the header of an annotated file, which
    is how pruning recognizes files it owns.

    Attributes:
        owner: Repository owner login
        repo: Repository name
        branch: Branch the file was synced from
        path: Path of the file inside the repository
        remote_url: Browser URL of the file on GitHub
    """
    owner: str
    repo: str
    branch: str
    path: str
    remote_url: str

    @property
    def repo_id(self) -> str:
        return f"{self.owner}/{self.repo}"
