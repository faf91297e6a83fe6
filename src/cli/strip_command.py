"""StripCommand: remove mirror annotations from the local tree.

Walks the base folder and rewrites every mirrored Markdown file without its
provenance header, read-only banner and backlink. Files without provenance
metadata are not touched. Use it before turning annotations off, or to hand
the mirrored notes over as plain Markdown.
"""

import logging
from typing import Optional

from src.file_mapper.annotation_codec import AnnotationCodec
from src.file_mapper.errors import FilesystemError
from src.file_mapper.local_store import LocalStore
from src.file_mapper.models import MirrorConfig
from src.github_client.listing import is_markdown_file

from .models import StripSummary

logger = logging.getLogger(__name__)


class StripCommand:
    """Strips annotations from every system-owned Markdown file.

    Example:
        >>> summary = StripCommand().run(config)
        >>> len(summary.stripped)
        12
    """

    def __init__(self, store: Optional[LocalStore] = None):
        self.store = store

    def run(self, config: MirrorConfig, dry_run: bool = False) -> StripSummary:
        """Strip annotations below ``config.base_folder``.

        Args:
            config: Mirror configuration (base folder and vault path)
            dry_run: Report without writing

        Returns:
            StripSummary with stripped, skipped and failed paths
        """
        if self.store is None:
            self.store = LocalStore(config.vault_path)

        summary = StripSummary()
        if not self.store.is_dir(config.base_folder):
            logger.info(f"Base folder {config.base_folder} does not exist - nothing to strip")
            return summary

        self._strip_folder(config.base_folder, summary, dry_run)

        logger.info(
            f"Stripped {len(summary.stripped)} file(s), skipped {len(summary.skipped)}, "
            f"failed {len(summary.failed)}"
        )
        return summary

    def _strip_folder(self, folder: str, summary: StripSummary, dry_run: bool) -> None:
        for child in self.store.list_children(folder):
            if self.store.is_dir(child):
                self._strip_folder(child, summary, dry_run)
                continue
            if not is_markdown_file(child):
                continue

            try:
                content = self.store.read_text(child)
                if AnnotationCodec.extract_metadata(content) is None:
                    summary.skipped.append(child)
                    continue

                stripped = AnnotationCodec.strip(content)
                if dry_run:
                    logger.info(f"Dry run: would strip {child}")
                else:
                    self.store.write_text(child, stripped)
                    logger.debug(f"Stripped: {child}")
                summary.stripped.append(child)
            except FilesystemError as e:
                logger.error(f"Failed to strip {child}: {e}")
                summary.failed.append(child)
