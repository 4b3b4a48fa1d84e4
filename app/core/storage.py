"""
File storage abstraction layer supporting both local filesystem and AWS S3.

Uploaded CVs and documents go through get_storage(), so endpoints never
touch paths directly and tests can swap in a LocalStorage rooted in a
temporary directory via app.dependency_overrides.
"""

import logging
import os
import uuid
from io import BytesIO
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'pdf': 'application/pdf',
    'docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'doc': 'application/msword',
    'txt': 'text/plain',
    'rtf': 'application/rtf',
}


def guess_content_type(filename: str) -> str:
    """Determine content type based on file extension"""
    extension = filename.lower().rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, 'application/octet-stream')


def unique_name(filename: str) -> str:
    """UUID-prefixed basename, so stored names never collide or escape the upload dir."""
    return f"{uuid.uuid4()}_{os.path.basename(filename) or 'upload'}"


class StorageError(Exception):
    pass


class StorageBackend:
    """Abstract base class for storage backends"""

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "") -> str:
        """Upload file and return storage path/URL"""
        raise NotImplementedError

    def download_file(self, file_path: str) -> BytesIO:
        """Download file and return as BytesIO object"""
        raise NotImplementedError

    def delete_file(self, file_path: str) -> bool:
        """Delete file from storage"""
        raise NotImplementedError

    def file_exists(self, file_path: str) -> bool:
        """Check if file exists"""
        raise NotImplementedError


class LocalStorage(StorageBackend):
    """Local filesystem storage backend"""

    def __init__(self, base_dir: str = "uploads"):
        self.base_dir = str(base_dir)
        os.makedirs(self.base_dir, exist_ok=True)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "") -> str:
        """Save file under base_dir/folder with a unique name"""
        target_dir = os.path.join(self.base_dir, folder) if folder else self.base_dir
        os.makedirs(target_dir, exist_ok=True)
        file_path = os.path.join(target_dir, unique_name(filename))

        try:
            with open(file_path, "wb") as buffer:
                buffer.write(file.read())
        except OSError as e:
            raise StorageError(f"Failed to save file {file_path}: {e}") from e

        return file_path

    def download_file(self, file_path: str) -> BytesIO:
        try:
            with open(file_path, "rb") as f:
                return BytesIO(f.read())
        except OSError as e:
            raise StorageError(f"Failed to read file {file_path}: {e}") from e

    def delete_file(self, file_path: str) -> bool:
        if not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False
        return True

    def file_exists(self, file_path: str) -> bool:
        return os.path.exists(file_path)


class S3Storage(StorageBackend):
    """AWS S3 storage backend"""

    def __init__(self):
        self.bucket_name = settings.S3_BUCKET_NAME

        # If AWS_ACCESS_KEY_ID is not set, boto3 will use IAM roles (for EC2/ECS)
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION
            )
        else:
            self.s3_client = boto3.client('s3', region_name=settings.AWS_REGION)

    def upload_file(self, file: BinaryIO, filename: str, folder: str = "") -> str:
        """Upload file to S3 and return its s3:// URI"""
        prefix = folder or "uploads"
        s3_key = f"{prefix}/{unique_name(filename)}"

        try:
            self.s3_client.upload_fileobj(
                file,
                self.bucket_name,
                s3_key,
                ExtraArgs={
                    'ContentType': guess_content_type(filename),
                    'ServerSideEncryption': 'AES256'
                }
            )
        except ClientError as e:
            logger.error(f"Error uploading to S3: {e}")
            raise StorageError(f"Failed to upload file to S3: {e}") from e

        return f"s3://{self.bucket_name}/{s3_key}"

    def download_file(self, file_path: str) -> BytesIO:
        s3_key = self._parse_s3_uri(file_path)

        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=s3_key)
        except ClientError as e:
            logger.error(f"Error downloading from S3: {e}")
            raise StorageError(f"Failed to download file from S3: {e}") from e
        return BytesIO(response['Body'].read())

    def delete_file(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=s3_key)
        except ClientError as e:
            logger.error(f"Error deleting from S3: {e}")
            return False
        return True

    def file_exists(self, file_path: str) -> bool:
        s3_key = self._parse_s3_uri(file_path)

        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=s3_key)
            return True
        except ClientError:
            return False

    def _parse_s3_uri(self, s3_uri: str) -> str:
        """Extract the key from s3://bucket-name/key, or return a bare key unchanged."""
        if s3_uri.startswith("s3://"):
            parts = s3_uri.replace("s3://", "").split("/", 1)
            if len(parts) == 2:
                return parts[1]
            raise ValueError(f"Invalid S3 URI format: {s3_uri}")
        return s3_uri


_storage: Optional[StorageBackend] = None


def get_storage() -> StorageBackend:
    """
    Storage backend dependency, created on first use.

    Use as Depends(get_storage) so tests can override it.
    """
    global _storage
    if _storage is None:
        if settings.USE_S3:
            if not settings.S3_BUCKET_NAME:
                raise ValueError("S3_BUCKET_NAME must be set when USE_S3=True")
            _storage = S3Storage()
        else:
            _storage = LocalStorage(settings.UPLOADS_DIR)
    return _storage
