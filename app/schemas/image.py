from pydantic import BaseModel, Field


class SImageUploadResponse(BaseModel):
    image_url: str
    remaining_calls: int


class SImageDelete(BaseModel):
    image_url: str = Field(..., min_length=1)


class SImageDeleteResponse(BaseModel):
    message: str
    remaining_calls: int
