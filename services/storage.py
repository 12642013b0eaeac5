"""MinIO object storage for invoice PDFs.

The MinIO SDK is blocking; every call runs in the default executor.
"""

import asyncio
import io
import logging
import ssl
import time
from datetime import timedelta
from pathlib import PurePosixPath
from typing import Any, Callable, Optional, TypeVar

import urllib3
from minio import Minio
from minio.commonconfig import CopySource
from minio.error import S3Error

from extraction.core.exceptions import ResourceNotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

PDF_CONTENT_TYPE = "application/pdf"
_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject"}


def build_object_name(filename: str) -> str:
    """``<epoch-ms>-<basename>``; directory parts of the upload name are dropped."""
    basename = PurePosixPath(filename.replace("\\", "/")).name or "invoice.pdf"
    return f"{int(time.time() * 1000)}-{basename}"


class PdfStorage:
    """
    PDF upload/download/move over a MinIO client.

    Args:
        client: Configured ``minio.Minio`` instance
        incoming_bucket: Uploads dropped by other systems, awaiting processing
        processed_bucket: PDFs linked to an invoice record
    """

    def __init__(self, client: Minio, incoming_bucket: str, processed_bucket: str):
        self.client = client
        self.incoming_bucket = incoming_bucket
        self.processed_bucket = processed_bucket

    async def _run(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, fn)

    async def ensure_bucket(self, bucket: str) -> None:
        try:
            exists = await self._run(lambda: self.client.bucket_exists(bucket))
            if not exists:
                await self._run(lambda: self.client.make_bucket(bucket))
                logger.info(f"Bucket created: {bucket}")
        except (S3Error, urllib3.exceptions.HTTPError) as e:
            raise StorageError("ensure_bucket", "", bucket, details={"error": str(e)}) from e

    async def ensure_buckets(self) -> None:
        for bucket in (self.incoming_bucket, self.processed_bucket):
            await self.ensure_bucket(bucket)

    async def upload_pdf(
        self, pdf_bytes: bytes, filename: str, bucket: Optional[str] = None
    ) -> str:
        """Store ``pdf_bytes`` and return the generated object name."""
        bucket = bucket or self.processed_bucket
        object_name = build_object_name(filename)
        try:
            await self._run(
                lambda: self.client.put_object(
                    bucket,
                    object_name,
                    io.BytesIO(pdf_bytes),
                    length=len(pdf_bytes),
                    content_type=PDF_CONTENT_TYPE,
                )
            )
        except (S3Error, urllib3.exceptions.HTTPError) as e:
            logger.error(f"Upload failed for {object_name}: {e}")
            raise StorageError("upload", object_name, bucket, details={"error": str(e)}) from e
        logger.info(f"Uploaded {object_name} to {bucket} ({len(pdf_bytes)} bytes)")
        return object_name

    def _read_object(self, bucket: str, object_name: str) -> bytes:
        response = self.client.get_object(bucket, object_name)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    async def download_pdf(self, object_name: str, bucket: Optional[str] = None) -> bytes:
        bucket = bucket or self.processed_bucket
        try:
            data = await self._run(lambda: self._read_object(bucket, object_name))
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                raise ResourceNotFoundError("PDF", object_name) from e
            raise StorageError("download", object_name, bucket, details={"error": str(e)}) from e
        except urllib3.exceptions.HTTPError as e:
            raise StorageError("download", object_name, bucket, details={"error": str(e)}) from e
        logger.debug(f"Downloaded {object_name} from {bucket} ({len(data)} bytes)")
        return data

    async def move_pdf(
        self,
        object_name: str,
        source_bucket: Optional[str] = None,
        destination_bucket: Optional[str] = None,
        new_name: Optional[str] = None,
    ) -> str:
        """Copy to the destination bucket, then delete the source object."""
        source_bucket = source_bucket or self.incoming_bucket
        destination_bucket = destination_bucket or self.processed_bucket
        target = new_name or object_name
        try:
            await self._run(
                lambda: self.client.copy_object(
                    destination_bucket, target, CopySource(source_bucket, object_name)
                )
            )
            await self._run(lambda: self.client.remove_object(source_bucket, object_name))
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                raise ResourceNotFoundError("PDF", object_name) from e
            raise StorageError("move", object_name, source_bucket, details={"error": str(e)}) from e
        except urllib3.exceptions.HTTPError as e:
            raise StorageError("move", object_name, source_bucket, details={"error": str(e)}) from e
        logger.info(f"Moved {source_bucket}/{object_name} → {destination_bucket}/{target}")
        return target

    async def list_pdfs(self, bucket: Optional[str] = None) -> list[dict[str, Any]]:
        bucket = bucket or self.incoming_bucket

        def _list() -> list[dict[str, Any]]:
            return [
                {
                    "name": obj.object_name,
                    "size": obj.size,
                    "last_modified": obj.last_modified,
                }
                for obj in self.client.list_objects(bucket, recursive=True)
                if not obj.is_dir
            ]

        try:
            return await self._run(_list)
        except (S3Error, urllib3.exceptions.HTTPError) as e:
            raise StorageError("list", "", bucket, details={"error": str(e)}) from e

    async def get_pdf_url(
        self, object_name: str, bucket: Optional[str] = None, expires_seconds: int = 3600
    ) -> str:
        """Presigned GET URL for an object."""
        bucket = bucket or self.processed_bucket
        try:
            return await self._run(
                lambda: self.client.presigned_get_object(
                    bucket, object_name, expires=timedelta(seconds=expires_seconds)
                )
            )
        except (S3Error, urllib3.exceptions.HTTPError) as e:
            raise StorageError("presign", object_name, bucket, details={"error": str(e)}) from e


def create_pdf_storage_from_settings() -> PdfStorage:
    """Create PdfStorage from centralized settings."""
    from core.settings import s3_settings

    http_client = urllib3.PoolManager(
        cert_reqs=ssl.CERT_NONE,
        assert_hostname=False,
        timeout=urllib3.Timeout(connect=5.0, read=30.0),
        retries=urllib3.Retry(total=3, backoff_factor=0.2, status_forcelist=[500, 502, 503, 504]),
    )
    client = Minio(
        s3_settings.S3_ENDPOINT,
        access_key=s3_settings.S3_ACCESS_KEY,
        secret_key=s3_settings.S3_SECRET_KEY.get_secret_value(),
        secure=s3_settings.S3_SECURE,
        http_client=http_client,
    )
    logger.info(f"PdfStorage initialized: endpoint={s3_settings.S3_ENDPOINT}")
    return PdfStorage(
        client,
        incoming_bucket=s3_settings.INVOICE_INCOMING_BUCKET,
        processed_bucket=s3_settings.INVOICE_PROCESSED_BUCKET,
    )
