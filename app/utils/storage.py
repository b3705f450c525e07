"""
Storage utilities for review photos.
Photos live in a private bucket; readers get time-limited signed URLs.
"""

import logging
import re
from typing import Optional

import boto3
from botocore.client import Config

from ..config import (
    REVIEW_PHOTOS_BUCKET,
    SIGNED_URL_EXPIRY_SECONDS,
    STORAGE_ACCESS_KEY_ID,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

# Stored URLs look like .../storage/v1/object/public/review-photos/<path>
_PHOTO_PATH_RE = re.compile(re.escape(REVIEW_PHOTOS_BUCKET) + r"/(.+)$")


def get_storage_client():
    """Get configured boto3 client for the S3-compatible storage endpoint"""
    return boto3.client(
        "s3",
        endpoint_url=STORAGE_ENDPOINT_URL,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name=STORAGE_REGION,
    )


def extract_photo_path(photo_url: str) -> Optional[str]:
    """Object key inside the review photos bucket, or None if the URL isn't one of ours"""
    match = _PHOTO_PATH_RE.search(photo_url or "")
    return match.group(1) if match else None


def get_signed_photo_url(photo_url: str) -> str:
    """
    Get a signed URL for a review photo.

    Returns the original URL when it doesn't point into the bucket or when
    signing fails.
    """
    file_path = extract_photo_path(photo_url)
    if not file_path:
        return photo_url

    try:
        s3_client = get_storage_client()
        return s3_client.generate_presigned_url(
            "get_object",
            Params={"Bucket": REVIEW_PHOTOS_BUCKET, "Key": file_path},
            ExpiresIn=SIGNED_URL_EXPIRY_SECONDS,
        )
    except Exception as e:
        logger.error(f"Error creating signed URL for {file_path}: {e}")
        return photo_url


def get_signed_photo_urls(photo_urls: Optional[list[str]]) -> list[str]:
    """Get signed URLs for multiple review photos"""
    return [get_signed_photo_url(url) for url in photo_urls or []]
