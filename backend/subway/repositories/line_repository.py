"""Line persistence backed by an AsyncSession."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from subway.models.line import Line


class LineRepository:
    """Durable mapping from line id to Line aggregate."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def save(self, line: Line) -> Line:
        """Insert or update a line (and its sections) and commit."""
        self.db.add(line)
        await self.db.commit()
        await self.db.refresh(line)
        return line

    async def find_all(self) -> list[Line]:
        result = await self.db.execute(select(Line).order_by(Line.id))
        return list(result.scalars().all())

    async def find_by_id(self, line_id: int) -> Line | None:
        result = await self.db.execute(select(Line).where(Line.id == line_id))
        return result.scalar_one_or_none()

    async def exists_by_name(self, name: str, *, exclude_id: int | None = None) -> bool:
        """Check whether another line already uses this name."""
        query = select(Line.id).where(Line.name == name)
        if exclude_id is not None:
            query = query.where(Line.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def delete_by_id(self, line_id: int) -> None:
        """Delete a line; its sections go with it (delete-orphan cascade)."""
        if line := await self.find_by_id(line_id):
            await self.db.delete(line)
            await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
