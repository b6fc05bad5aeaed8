import logging
from typing import Awaitable, Callable, Optional, Type

from redis.asyncio import Redis

from app.domains.common.interfaces.cache_interface import CacheInterface, M

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "::"


class RedisCache(CacheInterface):
    """以 Redis 實現的命名空間快取

    值以 Pydantic 模型的 JSON 形式存放，鍵格式為 ``<namespace>::<key>``。
    redis_client 為 None 時直接呼叫 loader，不做任何快取。
    """

    def __init__(
        self,
        redis_client: Optional[Redis],
        namespace: str,
        ttl_seconds: Optional[int] = None,
    ):
        self._redis = redis_client
        self._namespace = namespace
        self._ttl_seconds = ttl_seconds

    @property
    def namespace(self) -> str:
        return self._namespace

    def _full_key(self, key: str) -> str:
        return f"{self._namespace}{KEY_SEPARATOR}{key}"

    async def get_or_compute(
        self, key: str, loader: Callable[[], Awaitable[M]], model: Type[M]
    ) -> M:
        if self._redis is None:
            return await loader()

        full_key = self._full_key(key)
        cached = await self._redis.get(full_key)
        if cached is not None:
            logger.debug(f"Cache hit: {full_key}")
            return model.model_validate_json(cached)

        logger.debug(f"Cache miss: {full_key}")
        value = await loader()
        await self._redis.set(full_key, value.model_dump_json(), ex=self._ttl_seconds)
        return value

    async def evict(self, key: str) -> None:
        if self._redis is None:
            return
        full_key = self._full_key(key)
        await self._redis.delete(full_key)
        logger.debug(f"Evicted cache key: {full_key}")

    async def evict_all(self, prefix: str = "") -> int:
        if self._redis is None:
            return 0

        pattern = f"{self._full_key(prefix)}*"
        keys = [k async for k in self._redis.scan_iter(match=pattern)]
        if not keys:
            return 0

        removed = await self._redis.delete(*keys)
        logger.info(f"Evicted {removed} cache entries matching '{pattern}'")
        return removed
