import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from frameline.models.orm import Base

logger = logging.getLogger(__name__)


def prepare_database_url(url: str) -> tuple[str, dict]:
    """
    Prepare database URL for asyncpg compatibility.
    asyncpg doesn't support 'sslmode' parameter, need to convert to 'ssl' context.
    URLs without 'sslmode' are returned untouched.
    """
    if not url or "sslmode" not in url:
        return url, {}

    parsed = make_url(url)
    sslmode = parsed.query.get("sslmode")
    if sslmode is None:
        return url, {}
    if isinstance(sslmode, tuple):
        sslmode = sslmode[0]

    connect_args = {}
    if sslmode == 'require':
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        connect_args['ssl'] = ssl_context
    elif sslmode == 'verify-ca' or sslmode == 'verify-full':
        connect_args['ssl'] = ssl.create_default_context()
    elif sslmode == 'disable':
        connect_args['ssl'] = False

    cleaned_url = parsed.difference_update_query(["sslmode"]).render_as_string(hide_password=False)
    return cleaned_url, connect_args


class Database:
    """Async engine plus session factory for one database URL."""

    def __init__(self, db_url: str, echo: bool = False) -> None:
        cleaned_url, connect_args = prepare_database_url(db_url)

        engine_kwargs = {"echo": echo, "connect_args": connect_args}
        if cleaned_url.startswith("sqlite") and ":memory:" in cleaned_url:
            # every pooled connection would otherwise see its own empty database
            engine_kwargs["poolclass"] = StaticPool
        elif not cleaned_url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True

        self.url = cleaned_url
        self.engine = create_async_engine(cleaned_url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_database(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"[DB] Tables ensured on {self.engine.url.render_as_string(hide_password=True)}")

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
