import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update as sa_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import DuplicateKeyError, ImageInUseError, InvalidReferenceError, NotFoundError
from db.database import Announcement, Category, Partner, utcnow

logger = logging.getLogger(__name__)


class SqlAlchemyEntityStore:
    """Entity store over one mapped table. Each write is one commit."""

    kind = "Entity"

    def __init__(self, db: AsyncSession, model, order_by, unique_name: bool = False):
        self.db = db
        self.model = model
        self.order_by = order_by
        self.unique_name = unique_name

    async def find_by_id(self, entity_id) -> Optional[Any]:
        res = await self.db.execute(select(self.model).where(self.model.id == entity_id))
        return res.scalar_one_or_none()

    async def list_all(self) -> List[Any]:
        res = await self.db.execute(select(self.model).order_by(*self.order_by))
        return list(res.scalars().all())

    async def _check_unique_name(self, name: Optional[str], exclude_id=None) -> None:
        if not self.unique_name or name is None:
            return
        stmt = select(self.model.id).where(func.lower(self.model.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        res = await self.db.execute(stmt)
        if res.first() is not None:
            raise DuplicateKeyError(self.kind, "name", name)

    async def _check_image_unused(self, values: Dict[str, Any], exclude_id=None) -> None:
        """An uploaded file may be referenced by at most one record across all tables."""
        image_url = values.get("image_url")
        if not image_url or not image_url.startswith(settings.upload_url_prefix):
            return
        for model in (Category, Partner, Announcement):
            stmt = select(model.id).where(model.image_url == image_url)
            if model is self.model and exclude_id is not None:
                stmt = stmt.where(model.id != exclude_id)
            res = await self.db.execute(stmt)
            if res.first() is not None:
                raise ImageInUseError(image_url)

    async def _validate(self, values: Dict[str, Any], exclude_id=None) -> None:
        await self._check_unique_name(values.get("name"), exclude_id=exclude_id)

    async def _commit(self, values: Dict[str, Any]) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if self.unique_name:
                raise DuplicateKeyError(self.kind, "name", values.get("name"))
            raise

    async def insert(self, values: Dict[str, Any]) -> Any:
        await self._check_image_unused(values)
        await self._validate(values)
        m = self.model(**values)
        self.db.add(m)
        await self._commit(values)
        await self.db.refresh(m)
        return m

    async def update(self, entity_id, patch: Dict[str, Any]) -> Any:
        m = await self.find_by_id(entity_id)
        if m is None:
            raise NotFoundError(self.kind, entity_id)
        await self._check_image_unused(patch, exclude_id=entity_id)
        await self._validate(patch, exclude_id=entity_id)

        for key, value in patch.items():
            setattr(m, key, value)
        m.updated_at = utcnow()

        await self._commit(patch)
        await self.db.refresh(m)
        return m

    async def delete(self, entity_id) -> None:
        m = await self.find_by_id(entity_id)
        if m is None:
            raise NotFoundError(self.kind, entity_id)
        await self.db.delete(m)
        await self.db.commit()


class CategoryStore(SqlAlchemyEntityStore):
    kind = "Category"

    def __init__(self, db: AsyncSession):
        super().__init__(db, Category, order_by=[func.lower(Category.name).asc()], unique_name=True)

    async def delete(self, entity_id) -> None:
        m = await self.find_by_id(entity_id)
        if m is None:
            raise NotFoundError(self.kind, entity_id)

        # Detach dependents in the same transaction as the delete.
        res = await self.db.execute(
            sa_update(Partner)
            .where(Partner.category_id == entity_id)
            .values(category_id=None, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.delete(m)
        await self.db.commit()
        logger.info("Deleted category %s, detached %d partner(s)", entity_id, res.rowcount or 0)


class PartnerStore(SqlAlchemyEntityStore):
    kind = "Partner"

    def __init__(self, db: AsyncSession):
        super().__init__(db, Partner, order_by=[Partner.created_at.desc()])

    async def _validate(self, values: Dict[str, Any], exclude_id=None) -> None:
        category_id = values.get("category_id")
        if category_id is None:
            return
        res = await self.db.execute(select(Category.id).where(Category.id == category_id))
        if res.first() is None:
            raise InvalidReferenceError("category_id", category_id)


class AnnouncementStore(SqlAlchemyEntityStore):
    kind = "Announcement"

    def __init__(self, db: AsyncSession):
        super().__init__(db, Announcement, order_by=[Announcement.created_at.desc()])
