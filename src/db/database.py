from core.config import settings
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
from utils.logger import setup_logger

logger = setup_logger("DATABASE")


def _engine_options(database_url: str) -> dict:
    """Pool options only apply to server databases"""
    if "postgresql" not in database_url:
        return {}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": 3600,
        "pool_pre_ping": True,
        "connect_args": {
            "server_settings": {
                "jit": "off",
                "application_name": "dental_clinic",
            },
        },
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides one database session per request"""
    async with AsyncSessionLocal() as session:
        try:
            logger.debug("Database session opened")
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.debug(f"Database session rolled back: {exc}")
            raise


async def create_tables():
    """Create every mapped table that does not exist yet"""
    import models  # noqa: F401  register mappers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def check_db_connection() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


async def disconnect_db():
    await engine.dispose()
    logger.info("Database engine disposed")
