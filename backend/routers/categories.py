from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from core.auth import current_active_user
from core.errors import DuplicateKeyError, ImageInUseError, NotFoundError
from core.image_signal import ImageSignal
from core.lifecycle import EntityLifecycleManager
from core.uploads import UploadGateway, get_upload_gateway
from db.database import get_async_session, User
from db.stores import CategoryStore
from schemas.categories import CategoryList, CategoryPayload, CategoryRead

router = APIRouter()


def get_category_manager(
    db: AsyncSession = Depends(get_async_session),
    uploads: UploadGateway = Depends(get_upload_gateway),
) -> EntityLifecycleManager:
    return EntityLifecycleManager(CategoryStore(db), uploads, kind="Category")


@router.get("/", response_model=CategoryList)
async def list_categories(
    manager: EntityLifecycleManager = Depends(get_category_manager),
    user: User = Depends(current_active_user),
):
    items = await manager.list()
    return CategoryList(items=[CategoryRead(**c.to_schema) for c in items])


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: UUID,
    manager: EntityLifecycleManager = Depends(get_category_manager),
    user: User = Depends(current_active_user),
):
    try:
        c = await manager.get(category_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return CategoryRead(**c.to_schema)


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryPayload,
    manager: EntityLifecycleManager = Depends(get_category_manager),
    user: User = Depends(current_active_user),
):
    try:
        c = await manager.create(payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateKeyError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category already exists")
    return CategoryRead(**c.to_schema)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    payload: CategoryPayload,
    manager: EntityLifecycleManager = Depends(get_category_manager),
    user: User = Depends(current_active_user),
):
    try:
        c = await manager.update(category_id, payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    except DuplicateKeyError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Category already exists")
    return CategoryRead(**c.to_schema)


@router.delete("/{category_id}")
async def delete_category(
    category_id: UUID,
    manager: EntityLifecycleManager = Depends(get_category_manager),
    user: User = Depends(current_active_user),
):
    # Partners pointing at this category are detached, not deleted.
    try:
        await manager.delete(category_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return {"ok": True}
