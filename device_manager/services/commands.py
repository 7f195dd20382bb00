"""Insert and update commands for device records.

Each handler is built with its collaborators (a ``DeviceGateway`` and a
logger) and keeps no state between calls, so one instance can serve
concurrent requests. A call is a single pass against the gateway: decode the
payload, check it, persist, and return the stored device re-encoded.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

from ..core.errors import AlreadyExistsError, BadRequestError, DuplicateKeyError
from ..crud.devices import DeviceGateway
from ..schemas.device import DeviceDto


@dataclass(frozen=True)
class InsertDeviceCommand:
    device: DeviceDto


@dataclass(frozen=True)
class UpdateDeviceCommand:
    serial_number: uuid.UUID
    device: DeviceDto


class InsertDeviceHandler:
    def __init__(self, gateway: DeviceGateway, logger: logging.Logger | None = None) -> None:
        self._gateway = gateway
        self._logger = logger or logging.getLogger("device_manager.commands.insert")

    def handle(self, command: InsertDeviceCommand) -> DeviceDto:
        device = command.device.to_device()

        existing = self._gateway.fetch(device.serial_number)
        if existing is not None:
            self._logger.warning(
                "Device with Serial Number %s already exists.",
                existing.serial_number,
                extra={"extra_data": {"serial_number": str(existing.serial_number)}},
            )
            raise AlreadyExistsError(existing.serial_number)

        try:
            stored = self._gateway.insert(device)
        except DuplicateKeyError as exc:
            # Another request inserted the same serial number after our check.
            self._logger.warning(
                "Device with Serial Number %s was inserted concurrently.",
                device.serial_number,
                extra={"extra_data": {"serial_number": str(device.serial_number)}},
            )
            raise AlreadyExistsError(device.serial_number) from exc

        self._logger.info(
            "device.inserted",
            extra={"extra_data": {"serial_number": str(stored.serial_number)}},
        )
        return DeviceDto.from_device(stored)


class UpdateDeviceHandler:
    def __init__(self, gateway: DeviceGateway, logger: logging.Logger | None = None) -> None:
        self._gateway = gateway
        self._logger = logger or logging.getLogger("device_manager.commands.update")

    def handle(self, command: UpdateDeviceCommand) -> DeviceDto:
        device = command.device.to_device()
        if device.serial_number != command.serial_number:
            raise BadRequestError(
                "Serial number in the route does not match the serial number in the body."
            )

        stored = self._gateway.update(device)
        self._logger.info(
            "device.updated",
            extra={"extra_data": {"serial_number": str(stored.serial_number)}},
        )
        return DeviceDto.from_device(stored)
