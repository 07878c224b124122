"""
S3 Artifact Store
-----------------
Uploads knowledge-base responses and mints pre-signed download links.

Bucket Structure:
-----------------
{bucket}/
├── {repository}/{pr_number}/bedrock-response-{timestamp}.txt   # knowledge_base
└── {repository}/testcases-{pr_number}-{timestamp}.txt         # test_cases

No lifecycle is managed here; objects are retained until removed by hand
or by a bucket rule.
"""

from typing import Dict

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .base import ArtifactStore
from ..utils.logger import get_logger

logger = get_logger(__name__)


class S3ArtifactStore(ArtifactStore):
    """Artifact store backed by a single S3 bucket."""
    
    def __init__(self, bucket: str, region: str, tmp_dir: str = "/tmp", client=None):
        super().__init__(tmp_dir)
        self.bucket = bucket
        self.region = region
        self._client = client
    
    @property
    def s3_client(self):
        """Lazily initialize the S3 client (s3v4 signatures for pre-signed URLs)."""
        if self._client is None:
            s3_config = Config(
                signature_version='s3v4',
                region_name=self.region
            )
            self._client = boto3.client('s3', config=s3_config)
        return self._client
    
    def upload(
        self,
        path: str,
        key: str,
        metadata: Dict[str, str],
        content_type: str = "text/plain",
    ) -> str:
        """
        Upload a staged file to S3.
        
        Args:
            path: Local file to read
            key: S3 object key
            metadata: Object metadata tags
            content_type: MIME type
        
        Returns:
            ETag of the uploaded object
        """
        with open(path, "rb") as f:
            body = f.read()
        
        try:
            response = self.s3_client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                Metadata=metadata,
            )
        except ClientError as e:
            logger.error(f"Error uploading artifact to S3: {e}")
            raise
        
        etag = response.get("ETag")
        logger.info(f"File uploaded to S3: {self.location(key)}")
        logger.info(f"Upload ETag: {etag}")
        return etag
    
    def presigned_url(self, key: str, expires_in: int) -> str:
        """
        Generate a pre-signed URL for downloading an artifact.
        
        Args:
            key: S3 object key
            expires_in: URL expiry time in seconds
        
        Returns:
            Pre-signed download URL
        """
        try:
            url = self.s3_client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': key,
                },
                ExpiresIn=expires_in
            )
        except ClientError as e:
            logger.error(f"Error generating download URL: {e}")
            raise
        
        logger.info(f"Generated download URL for {key}")
        return url
    
    def location(self, key: str) -> str:
        return f"s3://{self.bucket}/{key}"
