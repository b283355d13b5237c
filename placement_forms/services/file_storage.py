import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from placement_forms.core.config import Settings, get_settings
from placement_forms.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class FileStorage:
    """Uploads files attached to form answers to S3-compatible storage."""

    def __init__(self, settings: Optional[Settings] = None, client=None):
        settings = settings or get_settings()
        self.bucket = settings.storage_bucket
        self.public_url = settings.public_storage_url

        # Configure boto3 client for MinIO / S3
        self.client = client or boto3.client(
            's3',
            endpoint_url=settings.storage_endpoint,
            aws_access_key_id=settings.storage_access_key,
            aws_secret_access_key=settings.storage_secret_key,
            config=Config(
                signature_version='s3v4',
                s3={'addressing_style': 'path'}
            ),
            region_name='us-east-1'
        )

    def ensure_bucket_exists(self):
        """Create the bucket if it doesn't exist."""
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            if error_code in ('404', 'NoSuchBucket'):
                try:
                    self.client.create_bucket(Bucket=self.bucket)
                    logger.info(f"Created storage bucket: {self.bucket}")
                except ClientError as create_error:
                    logger.warning(f"Failed to create storage bucket: {create_error}")
            else:
                logger.warning(f"Failed to check storage bucket: {e}")

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"

    def upload(self, content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        """
        Upload file bytes under `key`.

        Returns:
            Stable public URL to store as the answer value
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {key}: {e}")
            raise ExternalServiceError("File upload failed.")
        logger.info(f"Uploaded form file: {key} ({len(content)} bytes)")
        return self.url_for(key)
