from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from .database import Base


class User(SQLAlchemyBaseUserTableUUID, Base):
    """Admin login account. Columns come from fastapi-users."""
    __tablename__ = "users"

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "email": self.email,
            "is_superuser": self.is_superuser,
        }
