from app.domains.common.models.page import Page
from app.domains.device.models.device_model import Device
from app.domains.device.models.dto import DeviceCreate, DeviceResponse


def to_response(device: Device) -> DeviceResponse:
    """將設備實體轉換為響應對象，逐欄複製不做驗證"""
    return DeviceResponse.model_validate(device)


def to_entity(device_in: DeviceCreate) -> Device:
    """將創建請求轉換為新的設備實體，不指派 ID"""
    return Device(
        name=device_in.name,
        brand=device_in.brand,
        category=device_in.category,
        description=device_in.description,
        price=device_in.price,
        release_date=device_in.release_date,
        image_url=device_in.image_url,
        average_rating=device_in.average_rating,
    )


def to_response_page(page: Page[Device]) -> Page[DeviceResponse]:
    return Page[DeviceResponse](
        content=[to_response(device) for device in page.content],
        page=page.page,
        size=page.size,
        total_elements=page.total_elements,
        total_pages=page.total_pages,
    )
