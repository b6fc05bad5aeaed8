import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from redis.asyncio import Redis as AsyncRedis
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_redis_client, get_session
from app.core.config import (
    DEFAULT_PAGE_SIZE,
    DEVICE_CACHE_NAMESPACE,
    DEVICE_CACHE_TTL_SECONDS,
    MAX_PAGE_SIZE,
)
from app.domains.common.adapters.redis_cache import RedisCache
from app.domains.common.models.page import Page, PageRequest
from app.domains.device.exceptions import DeviceDomainError
from app.domains.device.models.device_model import DeviceCategory
from app.domains.device.services.device_service import DeviceService
from app.domains.device.adapters.sqlmodel_device_repository import (
    SQLModelDeviceRepository,
)
from app.domains.device.models.dto import (
    DeviceCreate,
    DeviceUpdate,
    DeviceResponse as DeviceSchema,
)  # 使用領域內的 DTO 模型

logger = logging.getLogger(__name__)
router = APIRouter()


# 依賴注入函數，創建設備服務實例
async def get_device_service(
    session: AsyncSession = Depends(get_session),
    redis_client: Optional[AsyncRedis] = Depends(get_redis_client),
) -> DeviceService:
    """獲取設備服務實例，用於依賴注入"""
    repository = SQLModelDeviceRepository(session=session)
    cache = RedisCache(
        redis_client, namespace=DEVICE_CACHE_NAMESPACE, ttl_seconds=DEVICE_CACHE_TTL_SECONDS
    )
    return DeviceService(device_repository=repository, cache=cache)


@router.get("/", response_model=Page[DeviceSchema])
async def read_devices(
    device_service: DeviceService = Depends(get_device_service),
    page: int = Query(0, ge=0, description="Page number, starting from 0"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    name: Optional[str] = Query(None, description="Name contains (case-insensitive)"),
    brand: Optional[str] = Query(None, description="Brand contains (case-insensitive)"),
    category: Optional[DeviceCategory] = Query(None, description="Exact category"),
    min_price: Optional[Decimal] = Query(None, description="Minimum price, inclusive"),
    max_price: Optional[Decimal] = Query(None, description="Maximum price, inclusive"),
    min_release_date: Optional[date] = Query(None, description="Released on or after"),
    max_release_date: Optional[date] = Query(None, description="Released on or before"),
    min_rating: Optional[Decimal] = Query(None, description="Minimum rating, inclusive"),
    max_rating: Optional[Decimal] = Query(None, description="Maximum rating, inclusive"),
) -> Any:
    """
    分頁獲取設備列表。提供任一過濾參數時改用不經快取的過濾查詢。
    """
    page_request = PageRequest(page=page, size=size)
    filters = dict(
        name=name,
        brand=brand,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_release_date=min_release_date,
        max_release_date=max_release_date,
        min_rating=min_rating,
        max_rating=max_rating,
    )
    active_filters = {k: v for k, v in filters.items() if v is not None}
    logger.info(
        f"API: Received request to read devices (page={page}, size={size}, filters={active_filters})"
    )

    if active_filters:
        return await device_service.get_filtered_devices(page_request, **filters)
    return await device_service.get_all_devices(page_request)


@router.get("/{device_id}", response_model=DeviceSchema)
async def read_device_by_id(
    device_id: int,
    device_service: DeviceService = Depends(get_device_service),
) -> Any:
    """
    根據 ID 獲取單個設備。
    """
    logger.info(f"API: Received request to read device with ID: {device_id}")
    try:
        return await device_service.get_device_by_id(device_id)
    except (HTTPException, DeviceDomainError):
        raise
    except Exception as e:
        logger.error(f"API Error reading device: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while reading the device: {str(e)}",
        )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=DeviceSchema)
async def create_new_device(
    *,
    device_service: DeviceService = Depends(get_device_service),
    device_in: DeviceCreate,
) -> Any:
    """
    創建一個新的設備。
    """
    logger.info(f"API: Received request to create device: {device_in.name}")
    try:
        return await device_service.create_device(device_in)
    except (HTTPException, DeviceDomainError):
        raise
    except Exception as e:
        # 記錄並包裝其他異常
        logger.error(f"API Error creating device: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while creating the device: {str(e)}",
        )


@router.put("/{device_id}", response_model=DeviceSchema)
async def update_existing_device(
    *,
    device_service: DeviceService = Depends(get_device_service),
    device_id: int,
    device_in: DeviceUpdate,
) -> Any:
    """
    部分更新現有設備，不合法的欄位會被略過。
    """
    logger.info(f"API: Received request to update device with ID: {device_id}")
    try:
        return await device_service.update_device(device_id, device_in)
    except (HTTPException, DeviceDomainError):
        raise
    except Exception as e:
        logger.error(f"API Error updating device: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while updating the device: {str(e)}",
        )


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_device_by_id(
    *,
    device_service: DeviceService = Depends(get_device_service),
    device_id: int,
) -> Response:
    """
    刪除一個設備。
    """
    logger.info(f"API: Received request to delete device with ID: {device_id}")
    try:
        await device_service.delete_device(device_id)
    except (HTTPException, DeviceDomainError):
        raise
    except Exception as e:
        logger.error(f"API Error deleting device: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while deleting the device: {str(e)}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
