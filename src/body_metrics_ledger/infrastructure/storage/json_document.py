"""
JSON document storage for the metrics snapshot.

The whole document is read in full and rewritten in full on every save.
Writes go to a temporary file in the target directory and are moved into
place, so a failed write never leaves a truncated document behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from body_metrics_ledger.utils.exceptions import StorageReadError, StorageWriteError
from body_metrics_ledger.utils.parameters import StorageConfig

logger = logging.getLogger(__name__)


class JSONDocumentStorage:
    """File-backed storage for a single JSON document."""

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize JSON document storage.

        Args:
            config: Storage configuration.
        """
        self.config = config
        self.path = Path(config.path)

    def read(self) -> dict[str, Any] | None:
        """
        Read the persisted document.

        Returns:
            Parsed document, or None if nothing has been persisted yet.

        Raises:
            StorageReadError: If the file cannot be read or is not a JSON object.
        """
        if not self.path.exists():
            logger.info(f"No metrics document at {self.path}, starting empty")
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Metrics document is corrupt: {self.path}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read metrics document {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise StorageReadError(
                f"Metrics document root must be an object, got {type(document).__name__}"
            )

        logger.debug(f"Read metrics document with {len(document)} keys from {self.path}")
        return document

    def write(self, document: dict[str, Any]) -> None:
        """
        Overwrite the persisted document.

        Args:
            document: Complete document to persist.

        Raises:
            StorageWriteError: If the document cannot be serialized or written.
        """
        try:
            payload = json.dumps(
                document, indent=self.config.indent, ensure_ascii=False, allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Failed to serialize metrics document: {e}") from e

        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Failed to write metrics document {self.path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.debug(f"Wrote metrics document with {len(document)} keys to {self.path}")
