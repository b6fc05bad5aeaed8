import logging
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from fastapi import FastAPI

from sqlmodel import SQLModel, select
from sqlalchemy.sql.functions import count
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import engine, async_session_maker

# 更新為領域驅動設計後的模型導入
from app.domains.device.models.device_model import Device, DeviceCategory  # 從領域模型導入

from app.core.config import REDIS_URL, SEED_SAMPLE_DEVICES

# For Redis client management
import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


async def create_db_and_tables():
    """Creates database tables if they don't exist."""
    async with engine.begin() as conn:
        logger.info("Creating database tables...")
        await conn.run_sync(SQLModel.metadata.create_all)  # Creates Device table
        logger.info("Database tables created (if they didn't exist).")


async def seed_sample_devices(session: AsyncSession):
    """Inserts a few sample devices when the device table is empty."""
    logger.info("Checking if sample device seeding is needed...")

    result = await session.execute(select(count(Device.id)))
    existing_count = result.scalar_one_or_none() or 0
    if existing_count > 0:
        logger.info(
            f"Device table already contains {existing_count} devices. Skipping seeding."
        )
        return

    samples = [
        ("Pixel 8", "Google", DeviceCategory.SMARTPHONE, "699.00", date(2023, 10, 12), "8.7"),
        ("iPhone 15", "Apple", DeviceCategory.SMARTPHONE, "799.00", date(2023, 9, 22), "8.9"),
        ("Galaxy Tab S9", "Samsung", DeviceCategory.TABLET, "799.99", date(2023, 8, 11), "8.4"),
        ("ThinkPad X1 Carbon", "Lenovo", DeviceCategory.LAPTOP, "1429.00", date(2023, 3, 1), "8.8"),
        ("WH-1000XM5", "Sony", DeviceCategory.HEADPHONES, "399.99", date(2022, 5, 20), "9.1"),
    ]
    try:
        for name, brand, category, price, release_date, rating in samples:
            session.add(
                Device(
                    name=name,
                    brand=brand,
                    category=category,
                    price=Decimal(price),
                    release_date=release_date,
                    average_rating=Decimal(rating),
                )
            )
        await session.commit()
        logger.info(f"Successfully seeded {len(samples)} sample devices.")
    except Exception as e:
        await session.rollback()
        logger.error(f"Error seeding sample devices: {e}", exc_info=True)


async def initialize_redis_client(app: FastAPI):
    logger.info(f"Attempting to connect to Redis at {REDIS_URL}")
    try:
        # decode_responses=False：快取值為 JSON bytes，由 Pydantic 直接解析
        redis_client = aioredis.Redis.from_url(
            REDIS_URL, encoding="utf-8", decode_responses=False
        )
        await redis_client.ping()
        app.state.redis = redis_client
        logger.info(
            "Successfully connected to Redis and stored client in app.state.redis"
        )
    except Exception as e:
        app.state.redis = None
        logger.error(
            f"Failed to connect to Redis: {e}. Device reads will bypass the cache."
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Context manager for FastAPI startup and shutdown logic."""
    logger.info("Application startup sequence initiated...")

    logger.info("Database initialization sequence...")
    await create_db_and_tables()

    await initialize_redis_client(app)

    if SEED_SAMPLE_DEVICES:
        async with async_session_maker() as db_session:
            await seed_sample_devices(db_session)

    logger.info("Application startup complete.")

    yield

    # 在應用程式關閉前執行
    if hasattr(app.state, "redis") and app.state.redis:
        logger.info("Closing Redis connection...")
        await app.state.redis.aclose()

    await engine.dispose()
    logger.info("Application shutdown complete.")
