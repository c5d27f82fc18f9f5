import asyncio
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool
import logging

from app.core.config import settings
from app.core.exceptions import UpstreamError
from .models import Base

logger = logging.getLogger(__name__)

async def _test_connection(engine):
    """Helper function to test database connection with retries"""
    max_retries = 3
    retry_delays = [1, 2, 4]

    for attempt in range(max_retries):
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text("SELECT 1"))
                logger.info(f"Connection test successful on attempt {attempt + 1}")
                return result.scalar()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Connection test attempt {attempt + 1} failed: {e}")

            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delays[attempt])
            else:
                logger.error("All connection test attempts failed")
                raise

def _async_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url

# Database instances
async_engine = None
SessionLocal = None

async def init_database():
    """Initialize the database engine and session factory"""
    global async_engine, SessionLocal

    if async_engine is not None and SessionLocal is not None:
        logger.info("Database already initialized - reusing existing connection pool")
        return

    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not configured")

    async_url = _async_url(settings.DATABASE_URL)
    logger.info("Initializing database connections...")

    if async_url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive across sessions
        async_engine = create_async_engine(
            async_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=False
        )
    else:
        async_engine = create_async_engine(
            async_url,
            pool_pre_ping=True,          # Enable pre-ping for connection health
            pool_recycle=1800,           # 30 minutes recycle time
            pool_size=5,
            max_overflow=3,
            pool_timeout=30,
            echo=False
        )

    SessionLocal = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    try:
        await _test_connection(async_engine)
    except (SQLAlchemyError, OSError):
        await close_database()
        raise

    logger.info("SUCCESS: Database initialization completed")

async def close_database():
    """Close database connections and reset global state"""
    global async_engine, SessionLocal

    if async_engine:
        await async_engine.dispose()
        logger.info("Database connection pool closed")

    async_engine = None
    SessionLocal = None

async def create_tables():
    """Create all database tables"""
    if not async_engine:
        logger.warning("WARNING:  Database not initialized. Skipping table creation.")
        return

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("SUCCESS: Database tables created successfully")

def get_session() -> AsyncSession:
    """Get database session context manager"""
    if not SessionLocal:
        raise RuntimeError("Database not initialized")
    return SessionLocal()

# Database dependency for FastAPI
async def get_db():
    """Database dependency for FastAPI endpoints"""
    if not SessionLocal:
        logger.error("DATABASE: Database not initialized - application should not have started")
        raise UpstreamError("Database unavailable")

    async with get_session() as session:
        yield session
