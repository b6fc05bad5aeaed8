"""
設備過濾條件

把選填的查詢參數轉成可組合的查詢條件 (DeviceSpecification)，
交由儲存庫的分頁過濾查詢使用。每個有值的參數對應一個條件，
條件之間以 AND 組合；所有參數皆未提供時回傳恆真條件。
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from app.domains.device.models.device_model import Device, DeviceCategory


class DeviceSpecification:
    """可組合的設備查詢條件"""

    def __init__(self, clause: Optional[ColumnElement] = None):
        self._clause = clause

    @classmethod
    def always(cls) -> "DeviceSpecification":
        """恆真條件，等同不過濾"""
        return cls()

    @property
    def is_universal(self) -> bool:
        return self._clause is None

    def and_(self, other: "DeviceSpecification") -> "DeviceSpecification":
        if other.is_universal:
            return self
        if self.is_universal:
            return other
        return DeviceSpecification(and_(self._clause, other._clause))

    def __and__(self, other: "DeviceSpecification") -> "DeviceSpecification":
        return self.and_(other)

    def to_clause(self) -> ColumnElement:
        """轉成可用於 select().where() 的 SQLAlchemy 條件"""
        return true() if self._clause is None else self._clause

    def __repr__(self) -> str:
        return f"DeviceSpecification({self._clause!r})"


def _contains_ignore_case(column, value: str) -> ColumnElement:
    escaped = (
        value.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return column.ilike(f"%{escaped}%", escape="\\")


def name_contains(name: str) -> DeviceSpecification:
    return DeviceSpecification(_contains_ignore_case(Device.name, name))


def brand_contains(brand: str) -> DeviceSpecification:
    return DeviceSpecification(_contains_ignore_case(Device.brand, brand))


def category_equals(category: DeviceCategory) -> DeviceSpecification:
    return DeviceSpecification(Device.category == category)


def price_at_least(value: Decimal) -> DeviceSpecification:
    return DeviceSpecification(Device.price >= value)


def price_at_most(value: Decimal) -> DeviceSpecification:
    return DeviceSpecification(Device.price <= value)


def released_on_or_after(value: date) -> DeviceSpecification:
    return DeviceSpecification(Device.release_date >= value)


def released_on_or_before(value: date) -> DeviceSpecification:
    return DeviceSpecification(Device.release_date <= value)


def rating_at_least(value: Decimal) -> DeviceSpecification:
    return DeviceSpecification(Device.average_rating >= value)


def rating_at_most(value: Decimal) -> DeviceSpecification:
    return DeviceSpecification(Device.average_rating <= value)


def _has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def build_device_specification(
    name: Optional[str] = None,
    brand: Optional[str] = None,
    category: Optional[DeviceCategory] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    min_release_date: Optional[date] = None,
    max_release_date: Optional[date] = None,
    min_rating: Optional[Decimal] = None,
    max_rating: Optional[Decimal] = None,
) -> DeviceSpecification:
    """根據選填參數建立查詢條件

    字串參數為 None 或空白時略過，其餘參數為 None 時略過。
    範圍條件皆包含邊界值。
    """
    spec = DeviceSpecification.always()

    if _has_text(name):
        spec = spec & name_contains(name)
    if _has_text(brand):
        spec = spec & brand_contains(brand)
    if category is not None:
        spec = spec & category_equals(category)
    if min_price is not None:
        spec = spec & price_at_least(min_price)
    if max_price is not None:
        spec = spec & price_at_most(max_price)
    if min_release_date is not None:
        spec = spec & released_on_or_after(min_release_date)
    if max_release_date is not None:
        spec = spec & released_on_or_before(max_release_date)
    if min_rating is not None:
        spec = spec & rating_at_least(min_rating)
    if max_rating is not None:
        spec = spec & rating_at_most(max_rating)

    return spec
