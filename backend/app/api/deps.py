from typing import AsyncGenerator, Optional
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from redis.asyncio import Redis as AsyncRedis

from app.db.base import async_session_maker  # Import from the new location


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency to get an async database session."""
    async with async_session_maker() as session:
        yield session


async def get_redis_client(request: Request) -> Optional[AsyncRedis]:  # Return Optional
    if hasattr(request.app.state, "redis") and request.app.state.redis:
        return request.app.state.redis
    # Redis 不可用時回傳 None，快取層會直接查詢資料庫
    return None
