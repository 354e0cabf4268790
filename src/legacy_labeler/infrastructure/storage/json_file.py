"""JSON file persistence for the review collection."""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ...exceptions import CorruptStateError, StateWriteError
from ...models.document import ReviewCollection, utc_now

logger = logging.getLogger(__name__)


def serialize_collection(collection: ReviewCollection) -> str:
    """Render a collection as pretty-printed, key-sorted camelCase JSON."""
    payload = collection.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def parse_collection(text: str) -> ReviewCollection:
    """Parse state file text into a collection.

    Raises:
        ValueError: If the text is not valid JSON or fails validation
    """
    return ReviewCollection.model_validate_json(text)


class JsonStateFile:
    """Reads and atomically rewrites the persisted review collection."""

    def __init__(self, path: str):
        """Initialize state file access.

        Args:
            path: Location of the JSON state file (parent created on write)
        """
        self.path = Path(path)

    def exists(self) -> bool:
        """Whether the state file is present."""
        return self.path.is_file()

    async def read(self) -> Optional[ReviewCollection]:
        """Read the persisted collection.

        Returns:
            The collection, or None when the file does not exist

        Raises:
            CorruptStateError: If the file exists but cannot be read or parsed
        """
        return await asyncio.to_thread(self._read_sync)

    async def write(self, collection: ReviewCollection) -> None:
        """Replace the state file with the given collection.

        Raises:
            StateWriteError: If the file could not be written; the previous
                file is left in place
        """
        await asyncio.to_thread(self._write_sync, serialize_collection(collection))

    async def quarantine(self) -> Optional[Path]:
        """Move an unreadable state file aside so it is not overwritten.

        Returns:
            The new location, or None if the file could not be moved
        """
        return await asyncio.to_thread(self._quarantine_sync)

    def _read_sync(self) -> Optional[ReviewCollection]:
        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
            return parse_collection(text)
        except (OSError, ValueError) as e:
            raise CorruptStateError(str(self.path), str(e)) from e

    def _write_sync(self, text: str) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                delete=False,
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                encoding="utf-8",
            ) as tf:
                tmp_name = tf.name
                tf.write(text)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError as cleanup_error:
                    logger.warning(f"Could not remove temp file {tmp_name}: {cleanup_error}")
            raise StateWriteError(str(self.path), str(e)) from e

        logger.debug(f"Wrote {len(text)} bytes to {self.path}")

    def _quarantine_sync(self) -> Optional[Path]:
        stamp = utc_now().strftime("%Y%m%dT%H%M%SZ")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            os.replace(self.path, target)
        except OSError as e:
            logger.warning(f"Could not move corrupt review data {self.path} aside: {e}")
            return None
        return target
