from __future__ import annotations

import logging

from fastapi import Path, Request

from ..core.versioning import resolve_api_version
from ..crud.devices import DeviceGateway
from ..services.commands import InsertDeviceHandler, UpdateDeviceHandler

# Read when the app-level header setting is absent from the request.
FALLBACK_VERSION_HEADER = "api-version"


def get_gateway(request: Request) -> DeviceGateway:
    return request.app.state.gateway


def get_insert_handler(request: Request) -> InsertDeviceHandler:
    return InsertDeviceHandler(get_gateway(request), logging.getLogger("device_manager.commands.insert"))


def get_update_handler(request: Request) -> UpdateDeviceHandler:
    return UpdateDeviceHandler(get_gateway(request), logging.getLogger("device_manager.commands.update"))


async def require_api_version(
    request: Request,
    version: str = Path(..., description="API version, e.g. 1 or 1.0"),
) -> str:
    settings = request.app.state.settings
    header_value = request.headers.get(settings.API_VERSION_HEADER)
    if header_value is None:
        header_value = request.headers.get(FALLBACK_VERSION_HEADER)
    return resolve_api_version(version, header_value, settings.API_SUPPORTED_VERSIONS)
