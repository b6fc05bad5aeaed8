from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator
from .device_model import MAX_RATING, DeviceBase, DeviceCategory


class DeviceCreate(DeviceBase):
    """創建設備的資料傳輸對象，於 API 邊界完成欄位驗證"""

    @field_validator("name", "brand")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("price")
    @classmethod
    def non_negative_price(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("must be greater than or equal to 0")
        return value

    @field_validator("average_rating")
    @classmethod
    def rating_in_range(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and not (0 <= value <= MAX_RATING):
            raise ValueError("must be between 0 and 10")
        return value

    @field_validator("release_date")
    @classmethod
    def not_in_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("must not be in the future")
        return value


class DeviceUpdate(BaseModel):
    """更新設備的資料傳輸對象

    所有欄位皆為選填且不在此驗證，由服務層逐欄判斷是否套用。
    """

    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[DeviceCategory] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    release_date: Optional[date] = None
    image_url: Optional[str] = None
    average_rating: Optional[Decimal] = None


class DeviceResponse(BaseModel):
    """設備響應的資料傳輸對象"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    brand: str
    category: DeviceCategory
    description: Optional[str] = None
    price: Decimal
    release_date: Optional[date] = None
    image_url: Optional[str] = None
    average_rating: Optional[Decimal] = None
