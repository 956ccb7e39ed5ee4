# 📁 backend/spacetime/database.py

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
# Einzige Quelle für Einstellungen ist spacetime.core.config
from spacetime.core.config import settings

# SQLAlchemy Base
Base = declarative_base()

# Datenbank-URL aus Core-Config ziehen
DATABASE_URL = settings.database_url


def make_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    return create_async_engine(url, future=True, echo=echo, **kwargs)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=bind, class_=AsyncSession, expire_on_commit=False)


# Engine mit optionalem SQL-Debug aus den Settings
engine = make_engine(DATABASE_URL, echo=settings.debug_sql)

# Session-Factory
AsyncSessionLocal = make_session_factory(engine)


async def create_schema(bind: AsyncEngine = engine) -> None:
    """Create all tables known to ``Base.metadata`` (local/dev setups without Alembic)."""
    # Models müssen registriert sein, bevor create_all läuft
    import spacetime.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# FastAPI-Dependency für DB-Sessions
async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
