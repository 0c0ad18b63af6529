from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import List, Optional
from uuid import UUID

from schemas.common import clean_name, validate_image_url


class CategoryRead(BaseModel):
    id: UUID
    name: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CategoryList(BaseModel):
    items: List[CategoryRead]


class CategoryPayload(BaseModel):
    """Body of create and update. Omitting image_url leaves the image untouched."""
    name: str
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("image_url")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return validate_image_url(v)

    def entity_fields(self) -> dict:
        return {"name": self.name}
