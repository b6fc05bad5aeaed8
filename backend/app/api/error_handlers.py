"""
全域例外處理器

把設備領域例外轉換為 JSON 回應：
- DeviceNotFoundError → 404
- InvalidArgumentError → 400
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domains.device.exceptions import DeviceDomainError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(DeviceDomainError)
    async def device_domain_error_handler(request: Request, exc: DeviceDomainError):
        logger.warning(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())
