import uuid

from fastapi_users import schemas

# fastapi-users provides the base fields (email, is_active, is_superuser, is_verified)


class UserRead(schemas.BaseUser[uuid.UUID]):
    pass


class UserCreate(schemas.BaseUserCreate):
    pass


class UserUpdate(schemas.BaseUserUpdate):
    pass
