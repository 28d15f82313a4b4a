import asyncio

from frameline.core.config import configs
from frameline.core.database import Database
# Import all models to register them with SQLAlchemy
from frameline.models.orm import Video, FrameLine  # noqa: F401


async def init(db_url: str = configs.DATABASE_URL):
    db = Database(db_url)
    try:
        await db.create_database()
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(init())
