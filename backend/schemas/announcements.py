from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from uuid import UUID

from schemas.common import validate_image_url, validate_link


class AnnouncementRead(BaseModel):
    id: UUID
    title: str
    description: str
    link: str
    date_published: date
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class AnnouncementList(BaseModel):
    items: List[AnnouncementRead]


class AnnouncementPayload(BaseModel):
    title: str = Field(min_length=2, max_length=120)
    description: str = Field(min_length=2, max_length=4000)
    link: str
    # Date only; a full timestamp is truncated to its day.
    date_published: date
    image_url: Optional[str] = None

    @field_validator("date_published", mode="before")
    @classmethod
    def truncate_to_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

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
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "date_published": self.date_published,
        }
