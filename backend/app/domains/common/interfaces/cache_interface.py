from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Type, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


class CacheInterface(ABC):
    """鍵值快取接口，所有鍵都限定在單一命名空間內"""

    @property
    @abstractmethod
    def namespace(self) -> str:
        """快取命名空間"""
        pass

    @abstractmethod
    async def get_or_compute(
        self, key: str, loader: Callable[[], Awaitable[M]], model: Type[M]
    ) -> M:
        """讀取快取，未命中時呼叫 loader 計算並寫入快取

        Args:
            key: 命名空間內的鍵
            loader: 未命中時用於計算結果的協程函數
            model: 用於反序列化快取內容的 Pydantic 模型類型

        Returns:
            快取中或新計算出的結果
        """
        pass

    @abstractmethod
    async def evict(self, key: str) -> None:
        """清除單一鍵

        Args:
            key: 命名空間內的鍵
        """
        pass

    @abstractmethod
    async def evict_all(self, prefix: str = "") -> int:
        """清除命名空間內所有（或指定前綴的）鍵

        Args:
            prefix: 只清除以此前綴開頭的鍵，空字串代表整個命名空間

        Returns:
            被清除的鍵數量
        """
        pass
