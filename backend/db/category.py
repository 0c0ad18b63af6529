import uuid
from sqlalchemy import Column, DateTime, Index, String, Uuid, func
from sqlalchemy.orm import relationship

from .database import Base, utcnow


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True, index=True)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    partners = relationship("Partner", back_populates="category", passive_deletes=True)

    __table_args__ = (
        Index("uq_categories_name_lower", func.lower(name), unique=True),
    )

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "image_url": self.image_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
