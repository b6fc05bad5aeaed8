import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

from app.domains.common.models.base_model import DomainBaseModel

T = TypeVar("T")


class PageRequest(DomainBaseModel):
    """分頁請求，頁碼從 0 開始"""

    page: int = Field(0, ge=0, description="頁碼（從 0 開始）")
    size: int = Field(20, ge=1, description="每頁筆數")

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def cache_key(self) -> str:
        return f"{self.page}-{self.size}"


class Page(BaseModel, Generic[T]):
    """分頁結果

    包含當頁資料以及總筆數等中繼資訊
    """

    content: List[T] = Field(default_factory=list, description="當頁資料")
    page: int = Field(..., ge=0, description="頁碼")
    size: int = Field(..., ge=1, description="每頁筆數")
    total_elements: int = Field(..., ge=0, description="總筆數")
    total_pages: int = Field(..., ge=0, description="總頁數")

    @classmethod
    def of(cls, content: List[T], page_request: PageRequest, total: int) -> "Page[T]":
        """根據分頁請求與總筆數建立分頁結果

        Args:
            content: 當頁資料
            page_request: 分頁請求
            total: 符合條件的總筆數

        Returns:
            分頁結果對象
        """
        return cls(
            content=list(content),
            page=page_request.page,
            size=page_request.size,
            total_elements=total,
            total_pages=math.ceil(total / page_request.size) if total else 0,
        )

    @property
    def number_of_elements(self) -> int:
        return len(self.content)
