from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    # Supabase/PostgreSQL with PgBouncer needs statement_cache_size=0
    # SQLite doesn't support these parameters or the pool sizing below
    if "postgresql" in database_url:
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={
                "statement_cache_size": 0,
                "prepared_statement_cache_size": 0,
            },
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=300,    # Recycle connections every 5 minutes
            pool_size=20,
            max_overflow=30,
        )
    return create_async_engine(database_url, echo=echo)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    # Register ORM tables on Base.metadata before creating them
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
