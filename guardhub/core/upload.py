"""
core/upload.py

Handles media uploads to S3 (check-in selfies, incident media, company logos):
- Validates file size by streaming the upload in chunks
- Validates MIME type using content sniffing (`filetype`)
- Stores objects under caller-chosen folders and returns their public URL
"""

import logging
import os
import uuid
from urllib.parse import urlparse

import boto3
import filetype
from botocore.exceptions import ClientError, NoCredentialsError, PartialCredentialsError
from fastapi import HTTPException, UploadFile, status

from guardhub.core.config import settings

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES: frozenset[str] = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MEDIA_MIME_TYPES: frozenset[str] = IMAGE_MIME_TYPES | {"video/mp4", "video/quicktime", "video/webm"}

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_LOGO_SIZE = 2 * 1024 * 1024

try:
    s3_client = boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        region_name=settings.AWS_REGION,
    )
    logger.info("Boto3 S3 client initialized successfully.")
except (NoCredentialsError, PartialCredentialsError):
    logger.error("AWS credentials not found or incomplete in environment settings.")
    s3_client = None
except Exception as e:
    logger.error(f"Failed to initialize Boto3 S3 client: {e}")
    s3_client = None


def _safe_filename(filename: str | None) -> str:
    safe = os.path.basename(filename or "untitled").replace(" ", "_")
    safe = "".join(c for c in safe if c.isalnum() or c in ("_", "-", "."))
    return safe or "uploaded_file"


def public_url_for(s3_key: str) -> str:
    return f"{settings.s3_public_base_url}/{s3_key}"


async def upload_file_to_s3(
    file: UploadFile,
    folder: str,
    *,
    object_name: str | None = None,
    allowed_mime_types: frozenset[str] = IMAGE_MIME_TYPES,
    max_size: int = MAX_FILE_SIZE,
) -> str:
    """
    Validates MIME type and size, then streams the file to S3.

    Args:
        file (UploadFile): Uploaded file from the request.
        folder (str): Key prefix inside the bucket (e.g. "check-in-photos/<company_id>").
        object_name (str | None): Exact object name; a sanitized unique name is generated when omitted.
        allowed_mime_types (frozenset[str]): Sniffed MIME types accepted for this upload.
        max_size (int): Maximum size in bytes.

    Returns:
        str: Public HTTPS URL of the uploaded object.

    Raises:
        HTTPException: If S3 is unavailable, the file is empty, too large or of the wrong type,
        or the upload fails.
    """
    if not s3_client:
        logger.error("S3 client is not available. Check AWS configuration and credentials.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="File storage is not configured or unavailable.",
        )

    size = 0
    chunk_size = 8192
    try:
        while chunk := await file.read(chunk_size):
            size += len(chunk)
        await file.seek(0)
    except Exception as e:
        logger.error(f"Error reading file '{file.filename}' to determine size: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not read file: {e}",
        )

    if size > max_size:
        logger.warning(
            f"Upload rejected: File '{file.filename}' size ({size} bytes) exceeds limit ({max_size} bytes)."
        )
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size should be less than {max_size // 1024 // 1024}MB.",
        )
    if size == 0:
        logger.warning(f"Upload rejected: Received an empty file '{file.filename}'.")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Received an empty file.",
        )

    # --- MIME Type Validation ---
    header_bytes = await file.read(261)
    await file.seek(0)

    kind = filetype.guess(header_bytes)
    detected_mime = kind.mime if kind else "unknown"
    if not kind or detected_mime not in allowed_mime_types:
        logger.warning(
            f"Upload rejected: Invalid file type '{detected_mime}' for file '{file.filename}'. Allowed: {sorted(allowed_mime_types)}"
        )
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type: '{detected_mime}'.",
        )

    name = object_name or f"{uuid.uuid4()}_{_safe_filename(file.filename)}"
    s3_key = f"{folder.strip('/')}/{name}"

    logger.info(
        f"Uploading '{file.filename}' (size: {size} bytes, type: {detected_mime}) as '{s3_key}' to bucket '{settings.AWS_S3_BUCKET}'"
    )

    try:
        s3_client.upload_fileobj(
            Fileobj=file.file,
            Bucket=settings.AWS_S3_BUCKET,
            Key=s3_key,
            ExtraArgs={"ContentType": detected_mime},
        )
        logger.info(f"Successfully uploaded file to S3. Key: {s3_key}")
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code")
        logger.error(f"S3 ClientError uploading '{s3_key}': {error_code} - {e}")
        if error_code == "AccessDenied":
            detail = "Upload failed: access denied by storage provider."
            status_code = status.HTTP_403_FORBIDDEN
        elif error_code == "NoSuchBucket":
            detail = f"Upload failed: bucket '{settings.AWS_S3_BUCKET}' not found."
            status_code = status.HTTP_404_NOT_FOUND
        elif error_code in ("InvalidAccessKeyId", "SignatureDoesNotMatch"):
            detail = "Upload failed: invalid storage credentials."
            status_code = status.HTTP_401_UNAUTHORIZED
        else:
            detail = f"Upload failed due to a storage error: {error_code}"
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        raise HTTPException(status_code=status_code, detail=detail)
    except Exception as e:
        logger.error(f"Unexpected error during S3 upload for '{s3_key}': {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file due to an unexpected server error.",
        )
    finally:
        await file.close()

    file_url = public_url_for(s3_key)
    logger.debug(f"Generated file URL: {file_url}")
    return file_url


def get_s3_key_from_url(s3_url: str) -> str | None:
    """Extracts the object key from a standard S3 HTTPS URL."""
    if not s3_url:
        return None
    parsed_url = urlparse(s3_url)
    if not parsed_url.netloc.endswith("amazonaws.com"):
        logger.warning(f"URL '{s3_url}' does not look like a standard S3 URL.")
        return None
    key = parsed_url.path.lstrip("/")
    return key or None


def delete_file_from_s3(s3_url: str | None) -> None:
    """Best-effort removal of a previously uploaded object (e.g. a replaced logo)."""
    key = get_s3_key_from_url(s3_url or "")
    if not s3_client or not key:
        return
    try:
        s3_client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
        logger.info(f"Deleted S3 object: {key}")
    except ClientError as e:
        logger.error(f"Failed to delete S3 object '{key}': {e}")
