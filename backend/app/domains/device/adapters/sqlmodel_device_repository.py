import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.domains.common.models.page import Page, PageRequest
from app.domains.device.models.device_model import Device
from app.domains.device.interfaces.device_repository import DeviceRepository
from app.domains.device.services.device_filter import DeviceSpecification


logger = logging.getLogger(__name__)


class SQLModelDeviceRepository(DeviceRepository):
    """SQLModel 設備存儲庫實現

    交易範圍外的寫入會立即提交；在 transaction() 範圍內只做 flush，
    由範圍結束時統一提交。
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._in_transaction_scope = False

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_transaction_scope:
            yield
            return

        # 先前的讀取會自動開啟交易；僅在沒有待寫入變更時結束它
        if self.session.in_transaction():
            if self.session.new or self.session.dirty or self.session.deleted:
                raise RuntimeError(
                    "Cannot open a transaction scope while the session has pending changes"
                )
            await self.session.commit()

        self._in_transaction_scope = True
        try:
            async with self.session.begin():
                yield
        except Exception as e:
            logger.warning(f"Transaction rolled back: {e}")
            raise
        finally:
            self._in_transaction_scope = False

    async def find_by_id(
        self, device_id: int, *, for_update: bool = False
    ) -> Optional[Device]:
        logger.debug(f"Fetching device with ID: {device_id} (for_update={for_update})")
        stmt = select(Device).where(Device.id == device_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def exists_by_id(self, device_id: int) -> bool:
        logger.debug(f"Checking existence of device with ID: {device_id}")
        stmt = select(func.count()).select_from(Device).where(Device.id == device_id)
        result = await self.session.execute(stmt)
        return (result.scalar_one() or 0) > 0

    async def save(self, device: Device) -> Device:
        is_new = device.id is None
        # rollback 之後實體會過期，先記下名稱供錯誤日誌使用
        device_name = device.name
        logger.info(
            f"Attempting to {'create' if is_new else 'update'} device: {device_name}"
        )
        if self._in_transaction_scope:
            self.session.add(device)
            await self.session.flush()
            await self.session.refresh(device)
            return device

        try:
            self.session.add(device)
            await self.session.commit()
            await self.session.refresh(device)
            logger.info(
                f"Successfully saved device '{device.name}' with ID {device.id}"
            )
            return device
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error saving device '{device_name}': {e}", exc_info=True)
            raise  # 重新拋出異常，讓上層處理

    async def delete_by_id(self, device_id: int) -> None:
        logger.debug(f"Removing device with ID: {device_id}")
        try:
            result = await self.session.execute(
                delete(Device).where(Device.id == device_id)
            )
            if self._in_transaction_scope:
                return
            await self.session.commit()
            if result.rowcount:
                logger.info(f"Successfully removed device with ID: {device_id}")
            else:
                logger.warning(f"Device with ID {device_id} not found for removal.")
        except Exception as e:
            if not self._in_transaction_scope:
                await self.session.rollback()
            logger.error(
                f"Error removing device with ID {device_id}: {e}", exc_info=True
            )
            raise

    async def find_all(self, page_request: PageRequest) -> Page[Device]:
        return await self.find_all_matching(DeviceSpecification.always(), page_request)

    async def find_all_matching(
        self, specification: DeviceSpecification, page_request: PageRequest
    ) -> Page[Device]:
        logger.debug(
            f"Fetching devices (page={page_request.page}, size={page_request.size}, spec={specification})"
        )
        clause = specification.to_clause()

        count_stmt = select(func.count()).select_from(Device).where(clause)
        total = (await self.session.execute(count_stmt)).scalar_one()

        query = (
            select(Device)
            .where(clause)
            .order_by(Device.id)
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        result = await self.session.execute(query)
        return Page[Device].of(list(result.scalars().all()), page_request, total)
