"""
Domain Layer

包含應用程序的核心領域模型和業務邏輯，按功能領域分為多個子模塊：

- common: 分頁模型、快取接口等共用元件
- device: 設備資料的增刪改查、分頁與過濾查詢
"""
