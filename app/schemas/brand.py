from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Brand(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    image_url: str
    image_public_id: str | None = None
    created_by_id: int
    created_at: datetime
    updated_at: datetime


class BrandCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50)
    image_url: str = Field(..., min_length=1, max_length=1024)
    image_public_id: str | None = Field(None, max_length=255)


class BrandUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=2, max_length=50)
    image_url: str | None = Field(None, min_length=1, max_length=1024)
    image_public_id: str | None = Field(None, max_length=255)
