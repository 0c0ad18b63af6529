from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from core.auth import current_active_user
from core.errors import ImageInUseError, NotFoundError
from core.image_signal import ImageSignal
from core.lifecycle import EntityLifecycleManager
from core.uploads import UploadGateway, get_upload_gateway
from db.database import get_async_session, User
from db.stores import AnnouncementStore
from schemas.announcements import AnnouncementList, AnnouncementPayload, AnnouncementRead

router = APIRouter()


def get_announcement_manager(
    db: AsyncSession = Depends(get_async_session),
    uploads: UploadGateway = Depends(get_upload_gateway),
) -> EntityLifecycleManager:
    return EntityLifecycleManager(AnnouncementStore(db), uploads, kind="Announcement")


@router.get("/", response_model=AnnouncementList)
async def list_announcements(
    manager: EntityLifecycleManager = Depends(get_announcement_manager),
    user: User = Depends(current_active_user),
):
    items = await manager.list()
    return AnnouncementList(items=[AnnouncementRead(**a.to_schema) for a in items])


@router.get("/{announcement_id}", response_model=AnnouncementRead)
async def get_announcement(
    announcement_id: UUID,
    manager: EntityLifecycleManager = Depends(get_announcement_manager),
    user: User = Depends(current_active_user),
):
    try:
        a = await manager.get(announcement_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return AnnouncementRead(**a.to_schema)


@router.post("/", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: AnnouncementPayload,
    manager: EntityLifecycleManager = Depends(get_announcement_manager),
    user: User = Depends(current_active_user),
):
    try:
        a = await manager.create(payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return AnnouncementRead(**a.to_schema)


@router.put("/{announcement_id}", response_model=AnnouncementRead)
async def update_announcement(
    announcement_id: UUID,
    payload: AnnouncementPayload,
    manager: EntityLifecycleManager = Depends(get_announcement_manager),
    user: User = Depends(current_active_user),
):
    try:
        a = await manager.update(announcement_id, payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return AnnouncementRead(**a.to_schema)


@router.delete("/{announcement_id}")
async def delete_announcement(
    announcement_id: UUID,
    manager: EntityLifecycleManager = Depends(get_announcement_manager),
    user: User = Depends(current_active_user),
):
    try:
        await manager.delete(announcement_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return {"ok": True}
