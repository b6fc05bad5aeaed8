"""
設備領域例外

服務層只拋出這些例外，由 API 層的全域處理器轉換為 HTTP 回應。
"""

from fastapi import status


class DeviceDomainError(Exception):
    """設備領域例外的基類"""

    http_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message}


class InvalidArgumentError(DeviceDomainError):
    """呼叫端傳入不合法的識別碼或缺少請求內容"""

    http_status = status.HTTP_400_BAD_REQUEST


class DeviceNotFoundError(DeviceDomainError):
    """指定識別碼的設備不存在"""

    http_status = status.HTTP_404_NOT_FOUND
