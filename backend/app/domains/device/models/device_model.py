from datetime import date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, SQLModel
from enum import Enum as PyEnum
from sqlalchemy import Numeric, String

MAX_RATING = Decimal("10")


# --- Enum Definitions ---
class DeviceCategory(str, PyEnum):
    SMARTPHONE = "SMARTPHONE"
    TABLET = "TABLET"
    LAPTOP = "LAPTOP"
    DESKTOP = "DESKTOP"
    SMARTWATCH = "SMARTWATCH"
    HEADPHONES = "HEADPHONES"
    CAMERA = "CAMERA"
    CONSOLE = "CONSOLE"
    TV = "TV"
    OTHER = "OTHER"


# --- SQLModel Definitions ---
class DeviceBase(SQLModel):
    """設備基礎模型，定義設備的共同屬性"""

    name: str = Field(..., index=True)
    brand: str = Field(..., index=True)
    category: DeviceCategory = Field(..., sa_type=String(50), index=True)
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(..., sa_type=Numeric(12, 2))
    release_date: Optional[date] = Field(default=None)
    image_url: Optional[str] = Field(default=None, sa_type=String(2048))
    average_rating: Optional[Decimal] = Field(default=None, sa_type=Numeric(4, 2))


# Represents the table structure, inherits validation from DeviceBase
class Device(DeviceBase, table=True):
    """設備實體模型，對應資料庫中的設備表"""

    id: Optional[int] = Field(default=None, primary_key=True)
