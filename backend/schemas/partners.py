from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import List, Optional
from uuid import UUID

from schemas.common import clean_name, validate_image_url, validate_link


class PartnerRead(BaseModel):
    id: UUID
    name: str
    link: str
    featured: bool
    category_id: Optional[UUID] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PartnerList(BaseModel):
    items: List[PartnerRead]


class PartnerPayload(BaseModel):
    name: str
    link: str
    featured: bool = False
    category_id: Optional[UUID] = None
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("link")
    @classmethod
    def check_link(cls, v: str) -> str:
        return validate_link(v)

    @field_validator("image_url")
    @classmethod
    def validate_image(cls, v: Optional[str]) -> Optional[str]:
        return validate_image_url(v)

    def entity_fields(self) -> dict:
        return {
            "name": self.name,
            "link": self.link,
            "featured": self.featured,
            "category_id": self.category_id,
        }
