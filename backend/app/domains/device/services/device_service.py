import logging
import re
from datetime import date
from decimal import Decimal
from typing import Optional

from app.domains.common.interfaces.cache_interface import CacheInterface
from app.domains.common.models.page import Page, PageRequest
from app.domains.device.exceptions import DeviceNotFoundError, InvalidArgumentError
from app.domains.device.interfaces.device_repository import DeviceRepository
from app.domains.device.mappers import device_mapper
from app.domains.device.models.device_model import MAX_RATING, Device, DeviceCategory
from app.domains.device.models.dto import (
    DeviceCreate,
    DeviceResponse,
    DeviceUpdate,
)  # 使用領域內的 DTO 模型
from app.domains.device.services.device_filter import build_device_specification

logger = logging.getLogger(__name__)

PAGE_KEY_PREFIX = "page:"
ID_KEY_PREFIX = "id:"

# 圖片網址格式；目前 update_device 不套用，image_url 一律直接覆寫
IMAGE_URL_PATTERN = re.compile(r"^(http|https)://.*\.(png|jpg|jpeg)$")


def page_cache_key(page_request: PageRequest) -> str:
    return f"{PAGE_KEY_PREFIX}{page_request.cache_key}"


def id_cache_key(device_id: int) -> str:
    return f"{ID_KEY_PREFIX}{device_id}"


def _has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


class DeviceService:
    """設備服務層，實現設備相關的業務邏輯與讀取快取

    快取只使用兩種鍵：未過濾的分頁結果 ``page:{page}-{size}``
    以及單一設備 ``id:{id}``。過濾查詢不經過快取。
    """

    def __init__(self, device_repository: DeviceRepository, cache: CacheInterface):
        self.device_repository = device_repository
        self.cache = cache

    async def get_all_devices(self, page_request: PageRequest) -> Page[DeviceResponse]:
        """分頁獲取所有設備（有快取）"""

        async def load() -> Page[DeviceResponse]:
            page = await self.device_repository.find_all(page_request)
            return device_mapper.to_response_page(page)

        return await self.cache.get_or_compute(
            page_cache_key(page_request), load, Page[DeviceResponse]
        )

    async def get_filtered_devices(
        self,
        page_request: PageRequest,
        name: Optional[str] = None,
        brand: Optional[str] = None,
        category: Optional[DeviceCategory] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_release_date: Optional[date] = None,
        max_release_date: Optional[date] = None,
        min_rating: Optional[Decimal] = None,
        max_rating: Optional[Decimal] = None,
    ) -> Page[DeviceResponse]:
        """分頁獲取符合過濾條件的設備（不經過快取）"""
        specification = build_device_specification(
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
        page = await self.device_repository.find_all_matching(
            specification, page_request
        )
        return device_mapper.to_response_page(page)

    async def get_device_by_id(self, device_id: int) -> DeviceResponse:
        """根據 ID 獲取設備（有快取），不存在時拋出 DeviceNotFoundError"""

        async def load() -> DeviceResponse:
            device = await self.device_repository.find_by_id(device_id)
            if device is None:
                logger.warning(f"Device with ID {device_id} not found.")
                raise DeviceNotFoundError(f"Device not found with id {device_id}")
            return device_mapper.to_response(device)

        return await self.cache.get_or_compute(
            id_cache_key(device_id), load, DeviceResponse
        )

    async def create_device(self, device_data: DeviceCreate) -> DeviceResponse:
        """創建新設備，並清除所有分頁快取"""
        device = device_mapper.to_entity(device_data)
        saved_device = await self.device_repository.save(device)
        response = device_mapper.to_response(saved_device)

        await self.cache.evict_all(PAGE_KEY_PREFIX)
        return response

    async def update_device(
        self, device_id: Optional[int], device_data: Optional[DeviceUpdate]
    ) -> DeviceResponse:
        """部分更新設備資訊

        只套用有提供且合法的欄位，不合法的欄位直接略過。
        讀取、合併與寫入在同一個交易內完成。
        """
        if device_id is None or device_id <= 0:
            raise InvalidArgumentError(f"Invalid device id {device_id}")
        if device_data is None:
            raise InvalidArgumentError("Invalid device data")

        async with self.device_repository.transaction():
            device = await self.device_repository.find_by_id(
                device_id, for_update=True
            )
            if device is None:
                logger.warning(f"Device with ID {device_id} not found for update.")
                raise DeviceNotFoundError(f"No device found with id {device_id}")

            self._merge(device, device_data)
            saved_device = await self.device_repository.save(device)
            response = device_mapper.to_response(saved_device)

        # TODO: 分頁快取未清除，更新後列表可能回傳舊資料
        await self.cache.evict(id_cache_key(device_id))
        return response

    async def delete_device(self, device_id: int) -> None:
        """刪除設備，不存在時拋出 DeviceNotFoundError"""
        if not await self.device_repository.exists_by_id(device_id):
            logger.warning(f"Device with ID {device_id} not found for deletion.")
            raise DeviceNotFoundError(f"No device found with id {device_id}")

        await self.device_repository.delete_by_id(device_id)
        await self.cache.evict(id_cache_key(device_id))

    @staticmethod
    def _merge(device: Device, device_data: DeviceUpdate) -> None:
        if _has_text(device_data.name):
            device.name = device_data.name
        if _has_text(device_data.brand):
            device.brand = device_data.brand
        if device_data.category is not None:
            device.category = device_data.category
        if _has_text(device_data.description):
            device.description = device_data.description

        if device_data.price is not None and device_data.price > 0:
            device.price = device_data.price
        elif device_data.price is not None:
            logger.debug(f"Skipping non-positive price {device_data.price}")

        if device_data.release_date is not None:
            if device_data.release_date <= date.today():
                device.release_date = device_data.release_date
            else:
                logger.debug(f"Skipping future release date {device_data.release_date}")

        # 不檢查 IMAGE_URL_PATTERN，包含 None 在內一律覆寫
        device.image_url = device_data.image_url

        rating = device_data.average_rating
        if rating is not None and 0 <= rating <= MAX_RATING:
            device.average_rating = rating
        elif rating is not None:
            logger.debug(f"Skipping out-of-range rating {rating}")
