"""
hatchjudge/database.py
Async database engine, session factory and table bootstrap
"""
import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from hatchjudge.config.settings import settings
from hatchjudge.orm.base import Base
import hatchjudge.orm  # ensures all models are registered

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is not set")


def create_engine_for_url(database_url: str, **kwargs):
    """
    Create an async engine with pool settings suited to the backend.

    SQLite gets a busy timeout and foreign key enforcement; other backends
    get a larger recycled pool.
    """
    if "sqlite" in database_url.lower():
        async_engine = create_async_engine(
            database_url,
            echo=False,
            future=True,
            connect_args={
                "timeout": 30.0,   # SQLite busy timeout in seconds
            },
            **kwargs
        )

        @event.listens_for(async_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return async_engine

    return create_async_engine(
        database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_size=20,           # Base pool size
        max_overflow=30,        # Additional connections under load
        pool_timeout=30,        # Wait up to 30s for connection
        pool_recycle=3600,      # Recycle connections after 1 hour
        **kwargs
    )


engine = create_engine_for_url(DATABASE_URL)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db():
    """Dependency for getting async database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create missing tables."""
    logger.info("Initializing database...")
    try:
        logger.info(f"Database dialect: {engine.url.get_backend_name()}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialization complete")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise


async def close_db():
    """Close database connection"""
    await engine.dispose()
    logger.info("Database connection closed")
