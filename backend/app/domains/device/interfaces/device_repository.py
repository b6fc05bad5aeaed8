from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from app.domains.common.models.page import Page, PageRequest
from app.domains.device.models.device_model import Device
from app.domains.device.services.device_filter import DeviceSpecification


class DeviceRepository(ABC):
    """設備存儲庫接口，定義對設備數據的操作方法"""

    @abstractmethod
    async def find_by_id(
        self, device_id: int, *, for_update: bool = False
    ) -> Optional[Device]:
        """根據 ID 獲取設備，for_update 為 True 時鎖定該筆資料"""
        pass

    @abstractmethod
    async def exists_by_id(self, device_id: int) -> bool:
        """檢查設備是否存在"""
        pass

    @abstractmethod
    async def save(self, device: Device) -> Device:
        """保存設備，沒有 ID 時新增，否則更新"""
        pass

    @abstractmethod
    async def delete_by_id(self, device_id: int) -> None:
        """刪除設備，設備不存在時不做任何事"""
        pass

    @abstractmethod
    async def find_all(self, page_request: PageRequest) -> Page[Device]:
        """分頁獲取所有設備"""
        pass

    @abstractmethod
    async def find_all_matching(
        self, specification: DeviceSpecification, page_request: PageRequest
    ) -> Page[Device]:
        """分頁獲取符合條件的設備"""
        pass

    @abstractmethod
    def transaction(self) -> AsyncContextManager[None]:
        """開啟一個交易範圍，範圍內的讀寫一起提交或一起回滾"""
        pass
