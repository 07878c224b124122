"""Artifact store interface.

The handler stages each artifact on local disk, uploads it, and optionally
mints a download link. S3ArtifactStore is the only production backend.
"""

import os
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator

from ..utils.logger import get_logger

logger = get_logger(__name__)


class ArtifactStore(ABC):
    """Persists one artifact per invocation."""

    def __init__(self, tmp_dir: str = "/tmp"):
        self.tmp_dir = tmp_dir

    @contextmanager
    def stage(self, file_name: str, content: str) -> Iterator[str]:
        """Write content to a local temp file and yield its path.

        Path separators in file_name are flattened so the file always lands
        directly in tmp_dir. The file is removed on exit even if the write
        or the body raised.
        """
        path = os.path.join(self.tmp_dir, file_name.replace("/", "-").replace(os.sep, "-"))
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
            logger.info(f"Response written to local file: {path}")
            yield path
        finally:
            if os.path.exists(path):
                os.remove(path)
                logger.info(f"Local file cleaned up: {path}")

    @abstractmethod
    def upload(
        self,
        path: str,
        key: str,
        metadata: Dict[str, str],
        content_type: str = "text/plain",
    ) -> str:
        """Upload the staged file under key. Returns the object's ETag."""

    @abstractmethod
    def presigned_url(self, key: str, expires_in: int) -> str:
        """Return a time-limited download link for key."""

    @abstractmethod
    def location(self, key: str) -> str:
        """Return the fully-qualified location string for key."""
