"""Annotation of mirrored Markdown files.

A mirrored file carries up to three prefix blocks in a fixed order, followed
by the original body:

    ---                                  <- provenance header (YAML)
    github_repo: owner/repo
    github_path: docs/guide.md
    github_url: https://github.com/owner/repo/blob/main/docs/guide.md
    synced_at: '2026-01-30T10:00:00+00:00'
    readonly: true
    ---

    > [!WARNING] Read-Only               <- read-only banner
    > This file is synced from GitHub. Any local changes will be overwritten.
    > View source: [owner/repo](https://github.com/owner/repo/blob/main/docs/guide.md)

    ← [[Projects/owner/repo/README]]     <- backlink

    original body

Every block is detected before it is inserted, so running the pipeline
against its own output leaves the document unchanged. An existing header is
never rewritten, so its timestamp is kept as well.
"""

import re
from datetime import datetime, UTC
from typing import Optional, Tuple

import yaml

from src.models.file_metadata import FileMetadata

from .errors import AnnotationError
from .models import AnnotationOptions

HEADER_START = '---\n'
HEADER_END = '\n---\n'

BANNER_TITLE = '> [!WARNING] Read-Only'
BANNER_EXPLANATION = '> This file is synced from GitHub. Any local changes will be overwritten.'

BACKLINK_PATTERN = re.compile(r'^← \[\[.*?\]\]\n\n')

SYNCED_AT_PATTERN = re.compile(r'^synced_at:.*$', re.MULTILINE)

# Keys a header must carry to be recognized as written by the mirror
PROVENANCE_KEY = 'github_repo'
REQUIRED_KEYS = ('github_repo', 'github_path', 'github_url')


class AnnotationCodec:
    """Adds, detects and removes the annotation blocks of a mirrored file.

    All methods are pure string transforms; callers load the full file into
    memory, transform it and only then write it back.
    """

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _split_header(cls, content: str) -> Optional[Tuple[str, int]]:
        """Locate a leading header block.

        Returns:
            Tuple of (header inner text, offset just past the block), or None.
            The offset also swallows the single blank line that follows a
            header written by ``add_header``.
        """
        if not content.startswith(HEADER_START):
            return None

        end = content.find(HEADER_END)
        if end == -1:
            return None

        inner = content[len(HEADER_START):end]
        offset = end + len(HEADER_END)
        if content.startswith('\n', offset):
            offset += 1
        return inner, offset

    @classmethod
    def _header_offset(cls, content: str) -> int:
        header = cls._split_header(content)
        return header[1] if header else 0

    @classmethod
    def build_banner(cls, metadata: FileMetadata) -> str:
        return (
            f"{BANNER_TITLE}\n"
            f"{BANNER_EXPLANATION}\n"
            f"> View source: [{metadata.owner}/{metadata.repo}]({metadata.remote_url})\n"
            f"\n"
        )

    @classmethod
    def add_header(
        cls,
        content: str,
        metadata: FileMetadata,
        synced_at: Optional[str] = None
    ) -> str:
        """Prepend the provenance header unless the document already starts with one.

        Args:
            content: Document text
            metadata: Provenance of the file
            synced_at: ISO 8601 timestamp (defaults to now, UTC)

        Raises:
            AnnotationError: If the metadata lacks owner, repo or path
        """
        if content.startswith(HEADER_START):
            return content

        if not metadata.owner or not metadata.repo or not metadata.path:
            raise AnnotationError(
                metadata.path or '<unknown>',
                "owner, repo and path are required to build a header"
            )

        fields = {
            'github_repo': f"{metadata.owner}/{metadata.repo}",
            'github_path': metadata.path,
            'github_url': metadata.remote_url,
            'synced_at': synced_at or datetime.now(UTC).isoformat(),
            'readonly': True,
        }
        yaml_str = yaml.safe_dump(
            fields,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=4096,
        )
        return f"{HEADER_START}{yaml_str}---\n\n{content}"

    @classmethod
    def add_banner(cls, content: str, metadata: FileMetadata) -> str:
        """Insert the read-only banner right after the header (or at the start).

        No-op when the banner title already appears at or after that point.
        """
        offset = cls._header_offset(content)
        if BANNER_TITLE in content[offset:]:
            return content

        return content[:offset] + cls.build_banner(metadata) + content[offset:]

    @classmethod
    def add_backlink(cls, content: str, target: str) -> str:
        """Insert ``← [[target]]`` after the header and banner.

        No-op when any backlink-shaped line already sits at that position,
        whatever its target.
        """
        offset = cls._header_offset(content)

        if content.startswith(BANNER_TITLE, offset):
            banner_end = content.find('\n\n', offset)
            if banner_end != -1:
                offset = banner_end + 2

        if BACKLINK_PATTERN.match(content[offset:]):
            return content

        return f"{content[:offset]}← [[{target}]]\n\n{content[offset:]}"

    @classmethod
    def process(
        cls,
        content: str,
        metadata: FileMetadata,
        options: AnnotationOptions,
        backlink_target: Optional[str] = None,
        synced_at: Optional[str] = None
    ) -> str:
        """Run header, banner and backlink steps, each gated by its toggle."""
        processed = content

        if options.add_frontmatter:
            processed = cls.add_header(processed, metadata, synced_at)

        if options.add_readonly_banner:
            processed = cls.add_banner(processed, metadata)

        if options.add_backlinks and backlink_target:
            processed = cls.add_backlink(processed, backlink_target)

        return processed

    @classmethod
    def strip(cls, content: str) -> str:
        """Remove all annotation blocks.

        The header is removed only if it carries the provenance key, the
        first banner block is removed wherever found, and a leading backlink
        line is removed. Leading whitespace left behind is trimmed.
        """
        stripped = content

        header = cls._split_header(stripped)
        if header and f"{PROVENANCE_KEY}:" in header[0]:
            stripped = stripped[header[1]:]

        banner_start = stripped.find(BANNER_TITLE)
        if banner_start != -1:
            banner_end = stripped.find('\n\n', banner_start)
            if banner_end != -1:
                stripped = stripped[:banner_start] + stripped[banner_end + 2:]

        stripped = BACKLINK_PATTERN.sub('', stripped, count=1)

        return stripped.lstrip()

    @classmethod
    def _yaml_depth_ok(cls, obj, current_depth: int = 0) -> bool:
        if current_depth > cls.MAX_YAML_DEPTH:
            return False
        if isinstance(obj, dict):
            return all(cls._yaml_depth_ok(v, current_depth + 1) for v in obj.values())
        if isinstance(obj, list):
            return all(cls._yaml_depth_ok(v, current_depth + 1) for v in obj)
        return True

    @classmethod
    def extract_metadata(cls, content: str) -> Optional[FileMetadata]:
        """Recover provenance from a leading header.

        Returns:
            FileMetadata, or None when there is no header, it is not valid
            YAML, or any of github_repo / github_path / github_url is missing.
            None means "not a file written by the mirror".
        """
        header = cls._split_header(content)
        if header is None:
            return None

        try:
            fields = yaml.safe_load(header[0])
        except yaml.YAMLError:
            return None

        if not isinstance(fields, dict) or not cls._yaml_depth_ok(fields):
            return None

        values = {}
        for key in REQUIRED_KEYS:
            value = fields.get(key)
            if value is None or not str(value).strip():
                return None
            values[key] = str(value).strip()

        owner, _, repo = values['github_repo'].partition('/')
        if not owner or not repo:
            return None

        remote_url = values['github_url']
        url_parts = remote_url.split('/')
        branch = 'main'
        if 'blob' in url_parts:
            blob_index = url_parts.index('blob')
            if blob_index + 1 < len(url_parts) and url_parts[blob_index + 1]:
                branch = url_parts[blob_index + 1]

        return FileMetadata(
            owner=owner,
            repo=repo,
            branch=branch,
            path=values['github_path'],
            remote_url=remote_url,
        )

    @classmethod
    def normalize_for_compare(cls, content: str) -> str:
        """Blank out the header's synced_at value.

        Two documents that differ only in when they were synced compare
        equal after normalization, so an unchanged remote file does not
        cause a rewrite on every run.
        """
        header = cls._split_header(content)
        if header is None:
            return content

        offset = header[1]
        return SYNCED_AT_PATTERN.sub('synced_at: ~', content[:offset]) + content[offset:]
