from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class SArtworkBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    author: str = Field("Unknown Artist", max_length=255)
    cover_image: Optional[str] = None
    extra_images: list[str] = []
    collocation: Optional[str] = Field(None, max_length=255)
    link: str = ""
    period_tags: list[str] = []
    type_tags: list[str] = []


class SArtworkCreate(SArtworkBase):
    course_id: int
    order: Optional[int] = None
    model_config = ConfigDict(extra="forbid")


class SArtworkUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    author: Optional[str] = Field(None, max_length=255)
    cover_image: Optional[str] = None
    extra_images: Optional[list[str]] = None
    collocation: Optional[str] = Field(None, max_length=255)
    link: Optional[str] = None
    period_tags: Optional[list[str]] = None
    type_tags: Optional[list[str]] = None
    order: Optional[int] = None
    model_config = ConfigDict(extra="forbid")

    @field_validator(
        "title",
        "description",
        "author",
        "extra_images",
        "link",
        "period_tags",
        "type_tags",
        "order",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class SArtworkResponse(SArtworkBase):
    id: int
    course_id: int
    order: int
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SArtworkThumbnail(BaseModel):
    id: int
    title: str
    description: str
    cover_image: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
