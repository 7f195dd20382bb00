from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from ..deps.devices import get_insert_handler, get_update_handler, require_api_version
from ..schemas.device import DeviceDto
from ..services.commands import (
    InsertDeviceCommand,
    InsertDeviceHandler,
    UpdateDeviceCommand,
    UpdateDeviceHandler,
)

router = APIRouter(prefix="/api/v{version}", tags=["devices"], dependencies=[Depends(require_api_version)])

_ERROR_RESPONSES = {
    400: {"description": "Invalid payload, API version or serial number mismatch"},
    500: {"description": "Unexpected error"},
}


# ``/Device`` mirrors the casing older clients were given; hidden from the schema.
@router.post(
    "/device",
    response_model=DeviceDto,
    status_code=201,
    responses={**_ERROR_RESPONSES, 409: {"description": "Serial number already exists"}},
)
@router.post("/Device", response_model=DeviceDto, status_code=201, include_in_schema=False)
def api_insert_device(payload: DeviceDto, handler: InsertDeviceHandler = Depends(get_insert_handler)):
    return handler.handle(InsertDeviceCommand(device=payload))


@router.patch(
    "/device/{serial_number}",
    response_model=DeviceDto,
    responses={**_ERROR_RESPONSES, 404: {"description": "No device with this serial number"}},
)
@router.patch("/Device/{serial_number}", response_model=DeviceDto, include_in_schema=False)
def api_update_device(
    serial_number: uuid.UUID,
    payload: DeviceDto,
    handler: UpdateDeviceHandler = Depends(get_update_handler),
):
    return handler.handle(UpdateDeviceCommand(serial_number=serial_number, device=payload))
