# frameline/repository/frame_repository.py

from typing import Iterable, Sequence

from sqlalchemy import bindparam, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frameline.models.orm.frame_line import (
    FrameLine,
    PLACEHOLDER_CONTENT,
    PLACEHOLDER_FRAME_NUMBER,
)


async def reset_frame_lines(db: AsyncSession, line_count: int) -> int:
    """Delete every frame line, then insert `line_count` blank placeholders"""
    await db.execute(delete(FrameLine))

    rows = [
        {
            "line_number": i,
            "frame_number": PLACEHOLDER_FRAME_NUMBER,
            "line_content": PLACEHOLDER_CONTENT,
        }
        for i in range(line_count)
    ]
    if rows:
        await db.execute(insert(FrameLine), rows)

    await db.commit()
    return len(rows)


async def update_frame_lines(
    db: AsyncSession,
    frame_number: int,
    lines: Iterable[tuple[int, str]],
) -> int:
    """
    Patch content and frame number of existing rows, keyed by line number.
    Pairs whose line number has no row are skipped. Returns patched count.
    """
    pairs = list(lines)
    if not pairs:
        return 0

    wanted = {line_number for line_number, _ in pairs}
    result = await db.execute(
        select(FrameLine.line_number).where(FrameLine.line_number.in_(wanted))
    )
    existing = set(result.scalars().all())

    params = [
        {"b_line_number": line_number, "b_content": content}
        for line_number, content in pairs
        if line_number in existing
    ]
    if not params:
        return 0

    table = FrameLine.__table__
    stmt = (
        update(table)
        .where(table.c.line_number == bindparam("b_line_number"))
        .values(line_content=bindparam("b_content"), frame_number=frame_number)
    )
    await db.execute(stmt, params)
    await db.commit()
    return len(params)


async def get_all_frame_lines(db: AsyncSession) -> Sequence[FrameLine]:
    """All frame lines ordered by line number"""
    result = await db.execute(
        select(FrameLine).order_by(FrameLine.line_number.asc(), FrameLine.id.asc())
    )
    return list(result.scalars().all())


async def get_frame_line(db: AsyncSession, line_number: int) -> FrameLine | None:
    """First row carrying `line_number`"""
    result = await db.execute(
        select(FrameLine)
        .where(FrameLine.line_number == line_number)
        .order_by(FrameLine.id.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def count_frame_lines(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(FrameLine))
    return int(result.scalar_one())
