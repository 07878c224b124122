from .base import ArtifactStore
from .s3_store import S3ArtifactStore

__all__ = ["ArtifactStore", "S3ArtifactStore"]
