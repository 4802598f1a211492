from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from .artwork import SArtworkResponse


class SCourseBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class SCourseCreate(SCourseBase):
    model_config = ConfigDict(extra="forbid")


class SCourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "description")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class SCourseResponse(SCourseBase):
    id: int
    owner_id: int
    is_published: bool
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class SCourseDetailResponse(SCourseResponse):
    artworks: list[SArtworkResponse] = []


class SCourseCatalogResponse(SCourseDetailResponse):
    students_enrolled: int = 0


class SCourseArtworksUpdate(BaseModel):
    artwork_ids: list[int]
    model_config = ConfigDict(extra="forbid")


class SCourseBrief(BaseModel):
    id: int
    title: str
    description: str
    published_at: Optional[datetime] = None
    owner_id: int
    model_config = ConfigDict(from_attributes=True)
