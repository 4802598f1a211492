import logging
import time
import uuid

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from minio import Minio
from minio.error import S3Error

from app.core import settings
from app.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5MB


def generate_object_name() -> str:
    return f"uploads/{uuid.uuid4()}-{int(time.time() * 1000)}"


def get_public_url(object_name: str) -> str:
    return f"{settings.MINIO_PUBLIC_URL.rstrip('/')}/{object_name}"


def get_object_name(image_url: str) -> str:
    prefix = f"{settings.MINIO_PUBLIC_URL.rstrip('/')}/"
    if not image_url.startswith(prefix) or len(image_url) == len(prefix):
        raise ValidationError("Image URL does not belong to this storage")
    return image_url[len(prefix):]


def get_file_size(file: UploadFile) -> int:
    file.file.seek(0, 2)
    file_size = file.file.tell()
    file.file.seek(0)
    return file_size


def validate_image(file: UploadFile) -> int:
    if not file.content_type or not file.content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")

    file_size = get_file_size(file)
    if file_size == 0:
        raise ValidationError("No image file was provided")
    if file_size > MAX_IMAGE_SIZE:
        raise ValidationError(
            f"File size exceeds limit ({MAX_IMAGE_SIZE // 1024 // 1024}MB)"
        )
    return file_size


async def upload_image(minio_client: Minio, file: UploadFile) -> str:
    file_size = validate_image(file)
    object_name = generate_object_name()

    try:
        await run_in_threadpool(
            minio_client.put_object,
            settings.MINIO_BUCKET,
            object_name,
            file.file,
            length=file_size,
            content_type=file.content_type,
        )
    except S3Error:
        logger.exception(
            "Error uploading image %s to bucket %s",
            object_name,
            settings.MINIO_BUCKET,
        )
        raise StorageError("Failed to upload image")

    image_url = get_public_url(object_name)
    logger.info("Image uploaded: %s (%s bytes)", image_url, file_size)
    return image_url


async def delete_image(minio_client: Minio, image_url: str) -> None:
    object_name = get_object_name(image_url)

    try:
        await run_in_threadpool(
            minio_client.remove_object,
            settings.MINIO_BUCKET,
            object_name,
        )
    except S3Error:
        logger.exception("Error deleting image %s", object_name)
        raise StorageError("Failed to delete image")
