"""Create, update and delete entity records while keeping their image blobs in step.

Every record owns at most one uploaded image (``image_url``). The manager writes
the record first and only then removes the blob it no longer references, so a
record never points at a missing file. A failed cleanup leaves an orphaned file
behind, which is acceptable; a failed write removes the blob that was supplied
for it.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

from core.errors import NotFoundError, StoreWriteError
from core.image_signal import ImageSignal

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image_url"


class EntityStore(Protocol):
    async def find_by_id(self, entity_id) -> Optional[Any]: ...

    async def insert(self, values: Dict[str, Any]) -> Any: ...

    async def update(self, entity_id, patch: Dict[str, Any]) -> Any: ...

    async def delete(self, entity_id) -> None: ...

    async def list_all(self) -> List[Any]: ...


class BlobRemover(Protocol):
    async def remove(self, address: Optional[str]) -> None: ...


class EntityLifecycleManager:
    def __init__(self, store: EntityStore, uploads: BlobRemover, kind: str = "Entity"):
        self.store = store
        self.uploads = uploads
        self.kind = kind

    async def list(self) -> List[Any]:
        return await self.store.list_all()

    async def get(self, entity_id) -> Any:
        record = await self.store.find_by_id(entity_id)
        if record is None:
            raise NotFoundError(self.kind, entity_id)
        return record

    async def create(self, fields: Dict[str, Any], image: ImageSignal) -> Any:
        values = dict(fields)
        values[IMAGE_FIELD] = image.address if image.is_set else None
        try:
            return await self.store.insert(values)
        except StoreWriteError:
            if image.is_set:
                logger.info("%s create failed, discarding upload %s", self.kind, image.address)
                await self.uploads.remove(image.address)
            raise

    async def update(self, entity_id, fields: Dict[str, Any], image: ImageSignal) -> Any:
        existing = await self.get(entity_id)
        old_image = getattr(existing, IMAGE_FIELD)
        new_image = image.apply(old_image)

        patch = dict(fields)
        patch.pop(IMAGE_FIELD, None)
        if new_image != old_image:
            patch[IMAGE_FIELD] = new_image

        try:
            updated = await self.store.update(entity_id, patch)
        except StoreWriteError:
            if image.is_set and image.address != old_image:
                logger.info("%s %s update failed, discarding upload %s", self.kind, entity_id, image.address)
                await self.uploads.remove(image.address)
            raise

        if old_image is not None and new_image != old_image:
            await self.uploads.remove(old_image)
        return updated

    async def delete(self, entity_id) -> None:
        existing = await self.get(entity_id)
        old_image = getattr(existing, IMAGE_FIELD)
        await self.store.delete(entity_id)
        if old_image is not None:
            await self.uploads.remove(old_image)
