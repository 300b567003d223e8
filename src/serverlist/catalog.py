"""
Tag and version lookups for server listings.

``classify_*`` report which names already exist (connect) and which are new
(create). ``ensure_*`` are the atomic find-or-create used for writes: an
``INSERT ... ON CONFLICT DO NOTHING`` followed by a select, so two requests
naming the same new tag both end up linked to a single row.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from .dbmodels import Tags, Versions
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class TagReferences:
    """Tag names split into existing ids to link and new names to create."""

    connect: list[int] = field(default_factory=list)
    create: list[str] = field(default_factory=list)


@dataclass
class VersionReference:
    connect_id: int | None = None
    create_name: str | None = None


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


async def classify_tags(db: AsyncSession, names: list[str]) -> TagReferences:
    names = _unique(names)
    if not names:
        return TagReferences()

    result = await db.execute(select(Tags.id, Tags.name).where(Tags.name.in_(names)))
    found = {name: tag_id for tag_id, name in result.all()}

    references = TagReferences()
    for name in names:
        if name in found:
            references.connect.append(found[name])
        else:
            references.create.append(name)

    logger.debug(
        "Classified tags", existing=len(references.connect), new=references.create
    )
    return references


async def classify_version(db: AsyncSession, name: str) -> VersionReference:
    result = await db.execute(select(Versions.id).where(Versions.name == name))
    version_id = result.scalar_one_or_none()
    if version_id is not None:
        return VersionReference(connect_id=version_id)
    return VersionReference(create_name=name)


async def ensure_tags(db: AsyncSession, names: list[str]) -> list[Tags]:
    """Return Tags rows for ``names``, creating missing ones, in input order."""
    names = _unique(names)
    if not names:
        return []

    references = await classify_tags(db, names)
    if references.create:
        await db.execute(
            pg_insert(Tags)
            .values([{"name": name} for name in references.create])
            .on_conflict_do_nothing(index_elements=[Tags.name])
        )
        logger.info("Created tags", tags=references.create)

    result = await db.execute(select(Tags).where(Tags.name.in_(names)))
    by_name = {tag.name: tag for tag in result.scalars().all()}
    return [by_name[name] for name in names if name in by_name]


async def ensure_version(db: AsyncSession, name: str) -> Versions:
    """Return the Versions row named ``name``, creating it if missing."""
    reference = await classify_version(db, name)
    if reference.create_name is not None:
        await db.execute(
            pg_insert(Versions)
            .values(name=reference.create_name)
            .on_conflict_do_nothing(index_elements=[Versions.name])
        )
        logger.info("Created version", version=name)

    result = await db.execute(select(Versions).where(Versions.name == name))
    return result.scalar_one()


async def list_tags(db: AsyncSession) -> list[Tags]:
    result = await db.execute(select(Tags).order_by(Tags.name))
    return list(result.scalars().all())


async def list_versions(db: AsyncSession) -> list[Versions]:
    result = await db.execute(select(Versions).order_by(Versions.name))
    return list(result.scalars().all())
