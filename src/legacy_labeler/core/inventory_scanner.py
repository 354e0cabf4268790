"""Discovery of reviewable documents under the documents root."""

import asyncio
import hashlib
import logging
import os
import stat
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator, List, Optional

from ..models.document import DocumentDescriptor, utc_now

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: FrozenSet[str] = frozenset({"pdf", "jpg", "jpeg", "png", "tiff", "tif"})


def generate_document_id(relative_path: str) -> str:
    """Derive a stable document id from a path relative to the documents root.

    Backslashes are normalised so the same layout yields the same id on
    every platform.
    """
    normalized = relative_path.replace("\\", "/")
    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    return f"doc_{digest[:16]}"


def _stat_document(path: str) -> os.stat_result:
    return os.stat(path)


def _is_readable(path: str) -> bool:
    return os.access(path, os.R_OK)


class InventoryScanner:
    """Walks the documents root and describes every supported file."""

    def __init__(self, documents_root: str, extensions: Optional[Iterable[str]] = None):
        """Initialize scanner.

        Args:
            documents_root: Folder to scan recursively (created if missing)
            extensions: Allowed extensions without the dot; defaults to
                SUPPORTED_EXTENSIONS
        """
        self.documents_root = Path(documents_root)
        self.extensions = frozenset(
            ext.lower().lstrip(".") for ext in (extensions or SUPPORTED_EXTENSIONS)
        )

    async def scan(self) -> List[DocumentDescriptor]:
        """Scan the documents root.

        Returns:
            Descriptors sorted by relative path; empty if the root had to be created
        """
        descriptors = await asyncio.to_thread(lambda: list(self.iter_documents()))
        logger.info(f"Scanned {self.documents_root}: {len(descriptors)} documents")
        return descriptors

    def iter_documents(self, discovered_at: Optional[datetime] = None) -> Iterator[DocumentDescriptor]:
        """Yield a descriptor per supported file, skipping unreadable ones."""
        if not self.documents_root.is_dir():
            if self.documents_root.exists():
                logger.warning(f"Documents root {self.documents_root} is not a folder; nothing to scan")
                return
            try:
                self.documents_root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Could not create documents folder {self.documents_root}: {e}")
                return
            logger.info(f"Created documents folder {self.documents_root}")
            return

        discovered_at = discovered_at or utc_now()
        root = str(self.documents_root)

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._log_walk_error):
            dirnames.sort()
            for filename in sorted(filenames):
                descriptor = self._describe(root, dirpath, filename, discovered_at)
                if descriptor is not None:
                    yield descriptor

    def is_supported(self, filename: str) -> bool:
        """Check a filename against the extension allow-list."""
        _, ext = os.path.splitext(filename)
        return ext.lower().lstrip(".") in self.extensions

    def _describe(
        self, root: str, dirpath: str, filename: str, discovered_at: datetime
    ) -> Optional[DocumentDescriptor]:
        if not self.is_supported(filename):
            return None

        full_path = os.path.join(dirpath, filename)
        relative_path = Path(os.path.relpath(full_path, root)).as_posix()

        try:
            info = _stat_document(full_path)
        except OSError as e:
            logger.warning(f"Skipping unreadable document {relative_path}: {e}")
            return None

        if not stat.S_ISREG(info.st_mode):
            return None

        if not _is_readable(full_path):
            logger.warning(f"Skipping unreadable document {relative_path}: permission denied")
            return None

        return DocumentDescriptor(
            id=generate_document_id(relative_path),
            original_filename=filename,
            relative_path=relative_path,
            file_type=os.path.splitext(filename)[1].lower().lstrip("."),
            file_size=info.st_size,
            discovered_at=discovered_at,
        )

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable folder {error.filename}: {error}")
