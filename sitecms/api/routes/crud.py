"""Shared helpers for admin CRUD routes.

``add_crud_routes`` registers list/get/create/update/delete for entities
without special write rules. Entities with extra invariants (defaults,
upserts, child lists) write their routes by hand using the helpers below.
"""

from typing import Any, Sequence

import structlog
from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.db.base import Base, get_session_factory
from sitecms.schemas.base import ApiResponse, CamelModel

logger = structlog.get_logger(__name__)


async def load_one(session: AsyncSession, model: type[Base], entity_id: Any, options: Sequence = ()) -> Any:
    """Fetch one row with eager-load options, or raise 404."""
    result = await session.execute(
        select(model)
        .where(model.id == entity_id)
        .options(*options)
        .execution_options(populate_existing=True)
    )
    entity = result.scalar_one_or_none()
    if entity is None:
        raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
    return entity


async def commit_or_conflict(session: AsyncSession, entity_name: str) -> None:
    """Commit, turning unique/foreign-key violations into 409."""
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.info("integrity_conflict", entity=entity_name, error=str(exc.orig))
        raise HTTPException(
            status_code=409,
            detail=f"{entity_name} conflicts with existing data",
        ) from exc


def add_crud_routes(
    router: APIRouter,
    path: str,
    model: type[Base],
    read_schema: type[CamelModel],
    create_schema: type[CamelModel],
    update_schema: type[CamelModel],
    order_by: Sequence = (),
    options: Sequence = (),
    id_type: type = int,
) -> None:
    entity_name = model.__name__

    @router.get(path, response_model=ApiResponse[list[read_schema]], name=f"list_{model.__tablename__}")
    async def list_entities():
        factory = get_session_factory()
        async with factory() as session:
            result = await session.execute(select(model).options(*options).order_by(*order_by))
            rows = result.scalars().all()
            return ApiResponse(data=[read_schema.model_validate(r) for r in rows])

    @router.get(f"{path}/{{entity_id}}", response_model=ApiResponse[read_schema], name=f"get_{model.__tablename__}")
    async def get_entity(entity_id: id_type):
        factory = get_session_factory()
        async with factory() as session:
            entity = await load_one(session, model, entity_id, options)
            return ApiResponse(data=read_schema.model_validate(entity))

    @router.post(
        path,
        response_model=ApiResponse[read_schema],
        status_code=201,
        name=f"create_{model.__tablename__}",
    )
    async def create_entity(body: create_schema):
        factory = get_session_factory()
        async with factory() as session:
            entity = model(**body.model_dump())
            session.add(entity)
            await commit_or_conflict(session, entity_name)
            entity = await load_one(session, model, entity.id, options)
            logger.info("entity_created", entity=entity_name, entity_id=entity.id)
            return ApiResponse(data=read_schema.model_validate(entity))

    @router.put(f"{path}/{{entity_id}}", response_model=ApiResponse[read_schema], name=f"update_{model.__tablename__}")
    async def update_entity(entity_id: id_type, body: update_schema):
        factory = get_session_factory()
        async with factory() as session:
            entity = await load_one(session, model, entity_id)
            for field, value in body.model_dump(exclude_unset=True).items():
                setattr(entity, field, value)
            await commit_or_conflict(session, entity_name)
            entity = await load_one(session, model, entity_id, options)
            return ApiResponse(data=read_schema.model_validate(entity))

    @router.delete(f"{path}/{{entity_id}}", response_model=ApiResponse[None], name=f"delete_{model.__tablename__}")
    async def delete_entity(entity_id: id_type):
        factory = get_session_factory()
        async with factory() as session:
            entity = await load_one(session, model, entity_id)
            await session.delete(entity)
            await commit_or_conflict(session, entity_name)
            logger.info("entity_deleted", entity=entity_name, entity_id=entity_id)
            return ApiResponse(message=f"{entity_name} deleted")
