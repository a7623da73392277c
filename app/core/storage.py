import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import settings
from .exceptions import NotFound, StorageFailure

logger = logging.getLogger(__name__)


class MediaStorage:
    """Upload interface for post media.

    A reference returned by ``upload`` is an opaque key; posts store it as is
    and hand it back to ``read`` / ``delete``.
    """

    def upload(self, data: bytes, filename: str, content_type: Optional[str] = None, prefix: str = "post_media") -> str:
        raise NotImplementedError

    def read(self, reference: str) -> bytes:
        raise NotImplementedError

    def delete(self, reference: str) -> bool:
        raise NotImplementedError

    @staticmethod
    def _new_key(filename: str, prefix: str) -> str:
        file_extension = os.path.splitext(filename or "")[1].lower()
        return f"{prefix}/{uuid.uuid4().hex}{file_extension}"


class LocalStorage(MediaStorage):
    """Stores media under the uploads directory"""

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or settings.UPLOAD_DIRECTORY)

    def _path(self, reference: str) -> Path:
        path = (self.root / reference).resolve()
        if self.root.resolve() not in path.parents:
            raise NotFound("Media not found")
        return path

    def upload(self, data: bytes, filename: str, content_type: Optional[str] = None, prefix: str = "post_media") -> str:
        key = self._new_key(filename, prefix)
        local_path = self._path(key)
        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(data)
        except OSError as e:
            logger.error(f"[UPLOAD] Failed to save file locally: {str(e)}")
            raise StorageFailure("Failed to save media") from e
        logger.info(f"[UPLOAD] Saved file locally at {local_path}")
        return key

    def read(self, reference: str) -> bytes:
        local_path = self._path(reference)
        if not local_path.is_file():
            logger.error(f"File {reference} not found in local storage")
            raise NotFound("Media not found")
        try:
            return local_path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read file {reference} from local storage: {str(e)}")
            raise StorageFailure("Failed to read media") from e

    def delete(self, reference: str) -> bool:
        try:
            local_path = self._path(reference)
            if local_path.is_file():
                local_path.unlink()
                logger.info(f"Deleted local media file {local_path}")
                return True
        except (OSError, NotFound) as e:
            logger.error(f"Failed to delete local media {reference}: {e}")
        return False


class R2Storage(MediaStorage):
    """Handles file storage using Cloudflare R2"""

    def __init__(self, client=None):
        self.bucket = settings.R2_BUCKET_NAME
        if client is not None:
            self.client = client
            return

        logger.info("Initializing R2Storage with configuration:")
        logger.info(f"  Bucket: {self.bucket}")
        logger.info(f"  Endpoint: {settings.R2_ENDPOINT}")
        self.client = boto3.client(
            "s3",
            endpoint_url=settings.R2_ENDPOINT,
            aws_access_key_id=settings.R2_ACCESS_KEY_ID,
            aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        )
        logger.info("R2Storage S3 client initialized successfully")

    def upload(self, data: bytes, filename: str, content_type: Optional[str] = None, prefix: str = "post_media") -> str:
        key = self._new_key(filename, prefix)
        logger.info(f"[UPLOAD] Uploading file '{filename}' to R2 bucket '{self.bucket}' with key '{key}'")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"[UPLOAD] Failed to upload to R2: {str(e)}")
            raise StorageFailure("Failed to upload media") from e
        logger.info("[UPLOAD] Successfully uploaded file to R2")
        return key

    def read(self, reference: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=reference)
            return response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                raise NotFound("Media not found") from e
            logger.error(f"Failed to retrieve file {reference} from R2: {str(e)}")
            raise StorageFailure("Failed to read media") from e
        except BotoCoreError as e:
            logger.error(f"Failed to retrieve file {reference} from R2: {str(e)}")
            raise StorageFailure("Failed to read media") from e

    def delete(self, reference: str) -> bool:
        try:
            logger.info(f"Deleting file with key '{reference}' from bucket '{self.bucket}'")
            self.client.delete_object(Bucket=self.bucket, Key=reference)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete from R2: {str(e)}")
            return False


_media_storage: Optional[MediaStorage] = None

def get_media_storage() -> MediaStorage:
    """R2 when fully configured, local uploads directory otherwise"""
    global _media_storage
    if _media_storage is None:
        if settings.r2_configured:
            _media_storage = R2Storage()
        else:
            missing = [
                name for name in ("R2_ENDPOINT", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY")
                if not getattr(settings, name)
            ]
            logger.warning(f"R2 storage not configured - missing: {', '.join(missing)}; using local storage")
            _media_storage = LocalStorage()
    return _media_storage
