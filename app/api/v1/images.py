from fastapi import APIRouter, Depends, File, UploadFile, status
from minio import Minio

from app.schemas import SImageUploadResponse, SImageDelete, SImageDeleteResponse
from app.db import User
from app.dependencies import get_current_user, get_minio_client, get_upload_rate_limiter
from app.helpers import images as image_helpers
from app.helpers.rate_limiter import FixedWindowRateLimiter

router = APIRouter(prefix="/image", tags=["Image"])


def rate_limit_key(user: User) -> str:
    return f"image:{user.id}"


@router.post(
    "/upload",
    response_model=SImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    minio_client: Minio = Depends(get_minio_client),
    rate_limiter: FixedWindowRateLimiter = Depends(get_upload_rate_limiter),
):
    remaining = await rate_limiter.consume(rate_limit_key(current_user))
    image_url = await image_helpers.upload_image(minio_client, image)
    return SImageUploadResponse(image_url=image_url, remaining_calls=remaining)


@router.post("/delete", response_model=SImageDeleteResponse)
async def delete_image(
    image_data: SImageDelete,
    current_user: User = Depends(get_current_user),
    minio_client: Minio = Depends(get_minio_client),
    rate_limiter: FixedWindowRateLimiter = Depends(get_upload_rate_limiter),
):
    remaining = await rate_limiter.consume(rate_limit_key(current_user))
    await image_helpers.delete_image(minio_client, image_data.image_url)
    return SImageDeleteResponse(message="Image deleted", remaining_calls=remaining)
