"""Remote tree listing data model."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class TreeEntry:
    """Single item of a recursive git tree listing.

    Attributes:
        path: Slash-separated path relative to the repository root
        type: "blob" for files, "tree" for directories
        sha: Git object id (used to fetch blob content)
        size: Blob size in bytes (None for trees)
    """
    path: str
    type: Literal["blob", "tree"]
    sha: str
    size: Optional[int] = None

    @property
    def is_blob(self) -> bool:
        return self.type == "blob"
