from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from core.auth import current_active_user
from core.errors import ImageInUseError, InvalidReferenceError, NotFoundError
from core.image_signal import ImageSignal
from core.lifecycle import EntityLifecycleManager
from core.uploads import UploadGateway, get_upload_gateway
from db.database import get_async_session, User
from db.stores import PartnerStore
from schemas.partners import PartnerList, PartnerPayload, PartnerRead

router = APIRouter()


def get_partner_manager(
    db: AsyncSession = Depends(get_async_session),
    uploads: UploadGateway = Depends(get_upload_gateway),
) -> EntityLifecycleManager:
    return EntityLifecycleManager(PartnerStore(db), uploads, kind="Partner")


@router.get("/", response_model=PartnerList)
async def list_partners(
    manager: EntityLifecycleManager = Depends(get_partner_manager),
    user: User = Depends(current_active_user),
):
    items = await manager.list()
    return PartnerList(items=[PartnerRead(**p.to_schema) for p in items])


@router.get("/{partner_id}", response_model=PartnerRead)
async def get_partner(
    partner_id: UUID,
    manager: EntityLifecycleManager = Depends(get_partner_manager),
    user: User = Depends(current_active_user),
):
    try:
        p = await manager.get(partner_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Partner not found")
    return PartnerRead(**p.to_schema)


@router.post("/", response_model=PartnerRead, status_code=status.HTTP_201_CREATED)
async def create_partner(
    payload: PartnerPayload,
    manager: EntityLifecycleManager = Depends(get_partner_manager),
    user: User = Depends(current_active_user),
):
    try:
        p = await manager.create(payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InvalidReferenceError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="category_id does not exist")
    return PartnerRead(**p.to_schema)


@router.put("/{partner_id}", response_model=PartnerRead)
async def update_partner(
    partner_id: UUID,
    payload: PartnerPayload,
    manager: EntityLifecycleManager = Depends(get_partner_manager),
    user: User = Depends(current_active_user),
):
    try:
        p = await manager.update(partner_id, payload.entity_fields(), ImageSignal.from_payload(payload))
    except ImageInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Partner not found")
    except InvalidReferenceError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="category_id does not exist")
    return PartnerRead(**p.to_schema)


@router.delete("/{partner_id}")
async def delete_partner(
    partner_id: UUID,
    manager: EntityLifecycleManager = Depends(get_partner_manager),
    user: User = Depends(current_active_user),
):
    try:
        await manager.delete(partner_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Partner not found")
    return {"ok": True}
