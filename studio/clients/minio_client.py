"""
MinIO (S3-compatible) client for post images.

Only used when media_storage_enabled is set; otherwise posts carry the
placeholder image path. Returns pre-signed URLs so clients fetch images
directly from MinIO.
"""
import logging
import uuid
from io import BytesIO
from typing import Optional

import boto3
from botocore.client import Config

from studio.config import settings

logger = logging.getLogger(__name__)

_s3 = None

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def init_minio() -> None:
    """Create the S3 client and ensure the media bucket exists."""
    global _s3
    _s3 = boto3.client(
        "s3",
        endpoint_url=f"http://{settings.minio_endpoint}",
        aws_access_key_id=settings.minio_access_key,
        aws_secret_access_key=settings.minio_secret_key,
        config=Config(signature_version="s3v4"),
        region_name="us-east-1",
    )

    existing = [b["Name"] for b in _s3.list_buckets().get("Buckets", [])]
    if settings.minio_bucket not in existing:
        _s3.create_bucket(Bucket=settings.minio_bucket)
        logger.info("Created MinIO bucket '%s'", settings.minio_bucket)
    else:
        logger.info("MinIO bucket '%s' already exists", settings.minio_bucket)


def get_s3():
    if _s3 is None:
        raise RuntimeError("MinIO client not initialised — call init_minio() at startup")
    return _s3


def upload_image(data: bytes, content_type: str) -> str:
    """
    Upload image bytes to MinIO and return the object key.
    Key format: posts/{uuid}.{ext}
    """
    ext = _EXTENSIONS.get(content_type, "bin")
    key = f"posts/{uuid.uuid4()}.{ext}"

    get_s3().put_object(
        Bucket=settings.minio_bucket,
        Key=key,
        Body=BytesIO(data),
        ContentType=content_type,
    )
    logger.debug("Uploaded image to MinIO: %s", key)
    return key


def get_presigned_url(image_key: str, expires_in: int = 3600) -> Optional[str]:
    """Generate a temporary pre-signed URL valid for `expires_in` seconds."""
    if not image_key:
        return None
    try:
        return get_s3().generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.minio_bucket, "Key": image_key},
            ExpiresIn=expires_in,
        )
    except Exception as exc:
        logger.warning("Failed to generate presigned URL for %s: %s", image_key, exc)
        return None


def resolve_image_url(image: str, image_key: Optional[str]) -> str:
    """URL to serve for a post: pre-signed when stored, else the stored path."""
    if image_key:
        return get_presigned_url(image_key) or image
    return image
