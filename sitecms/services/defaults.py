"""Single-default selection for billing cycles and pricing sections."""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.core.exceptions import NotFoundError
from sitecms.db.base import Base

logger = structlog.get_logger(__name__)


async def set_default(session: AsyncSession, model: type[Base], entity_id: object) -> Base:
    """Mark one row as the default and clear the flag on every other row.

    Both writes happen in the caller's transaction and are committed together,
    so at most one row is ever committed with ``is_default`` set.
    """
    entity = await session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(model.__name__, entity_id)

    await session.execute(
        update(model).where(model.id != entity_id).values(is_default=False)
    )
    entity.is_default = True
    await session.commit()
    await session.refresh(entity)

    logger.info("default_selected", entity=model.__name__, entity_id=str(entity_id))
    return entity
