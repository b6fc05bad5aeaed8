"""
共享領域模組

包含所有領域共用的模型、接口和快取實作。
"""

# 從基本模型導出
from app.domains.common.models.base_model import DomainBaseModel

# 從分頁模型導出
from app.domains.common.models.page import Page, PageRequest

# 從快取接口與實作導出
from app.domains.common.interfaces.cache_interface import CacheInterface
from app.domains.common.adapters.redis_cache import RedisCache
