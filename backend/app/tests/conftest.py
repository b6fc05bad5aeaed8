"""
測試共用設定

- 每個測試使用全新的 in-memory SQLite 資料庫
- Redis 以 fakeredis 取代
- CountingDeviceRepository 記錄儲存庫被呼叫的次數，用來驗證快取命中
"""

import os
from collections import Counter
from datetime import date
from decimal import Decimal

# 在匯入 app 之前設定，避免連線到真實的 PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fakeredis import FakeAsyncRedis, FakeServer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.domains.common.adapters.redis_cache import RedisCache
from app.domains.device.adapters.sqlmodel_device_repository import (
    SQLModelDeviceRepository,
)
from app.domains.device.interfaces.device_repository import DeviceRepository
from app.domains.device.models.device_model import Device, DeviceCategory
from app.domains.device.services.device_service import DeviceService


class CountingDeviceRepository(DeviceRepository):
    """包裝真實儲存庫並記錄每個方法的呼叫次數"""

    def __init__(self, inner: DeviceRepository):
        self.inner = inner
        self.calls = Counter()

    def transaction(self):
        self.calls["transaction"] += 1
        return self.inner.transaction()

    async def find_by_id(self, device_id, *, for_update=False):
        self.calls["find_by_id"] += 1
        return await self.inner.find_by_id(device_id, for_update=for_update)

    async def exists_by_id(self, device_id):
        self.calls["exists_by_id"] += 1
        return await self.inner.exists_by_id(device_id)

    async def save(self, device):
        self.calls["save"] += 1
        return await self.inner.save(device)

    async def delete_by_id(self, device_id):
        self.calls["delete_by_id"] += 1
        return await self.inner.delete_by_id(device_id)

    async def find_all(self, page_request):
        self.calls["find_all"] += 1
        return await self.inner.find_all(page_request)

    async def find_all_matching(self, specification, page_request):
        self.calls["find_all_matching"] += 1
        return await self.inner.find_all_matching(specification, page_request)


def make_device(**overrides) -> Device:
    values = dict(
        name="Pixel 8",
        brand="Google",
        category=DeviceCategory.SMARTPHONE,
        description="Android phone",
        price=Decimal("699.00"),
        release_date=date(2023, 10, 12),
        image_url="https://img.example.com/pixel8.png",
        average_rating=Decimal("8.70"),
    )
    values.update(overrides)
    return Device(**values)


@pytest.fixture
def device_factory():
    return make_device


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def redis_client():
    client = FakeAsyncRedis(server=FakeServer())
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache(redis_client):
    return RedisCache(redis_client, namespace="devices")


@pytest.fixture
def repository(test_db):
    return SQLModelDeviceRepository(session=test_db)


@pytest.fixture
def counting_repository(repository):
    return CountingDeviceRepository(repository)


@pytest.fixture
def device_service(counting_repository, cache):
    return DeviceService(device_repository=counting_repository, cache=cache)


@pytest.fixture
async def seed_devices(test_db):
    """Insert a fixture set with price boundary values 100 and 200."""
    devices = [
        make_device(name="Budget Buds", brand="Anker", category=DeviceCategory.HEADPHONES,
                    price=Decimal("99.99"), average_rating=Decimal("7.10"),
                    release_date=date(2021, 4, 1)),
        make_device(name="Edge 100", brand="Motorola", category=DeviceCategory.SMARTPHONE,
                    price=Decimal("100.00"), average_rating=Decimal("6.50"),
                    release_date=date(2022, 1, 15)),
        make_device(name="Fire HD 10", brand="Amazon", category=DeviceCategory.TABLET,
                    price=Decimal("150.00"), average_rating=Decimal("7.80"),
                    release_date=date(2023, 5, 24)),
        make_device(name="Galaxy Watch", brand="Samsung", category=DeviceCategory.SMARTWATCH,
                    price=Decimal("200.00"), average_rating=Decimal("8.20"),
                    release_date=date(2023, 8, 11)),
        make_device(name="Galaxy S24", brand="Samsung", category=DeviceCategory.SMARTPHONE,
                    price=Decimal("200.01"), average_rating=Decimal("9.00"),
                    release_date=date(2024, 1, 31)),
    ]
    for device in devices:
        test_db.add(device)
    await test_db.commit()
    for device in devices:
        await test_db.refresh(device)
    return devices
