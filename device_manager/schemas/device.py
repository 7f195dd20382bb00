"""Wire representation of a device and its conversion to and from the entity."""

from __future__ import annotations

import uuid

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field

from ..core.device_types import (
    DEVICE_STATUS_CHOICES,
    DEVICE_TYPE_CHOICES,
    parse_device_status,
    parse_device_type,
)
from ..core.errors import InvalidFieldError
from ..models.device import Device


def _parse_serial_number(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidFieldError("serialNumber", value, "must be a valid unique-identifier format") from exc


def _check_email(value: str) -> str:
    # Plain addresses only; "Name <addr>" display-name forms are rejected.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidFieldError("primaryUser", value, "must be a valid email address") from exc
    return value


class DeviceDto(BaseModel):
    """Device payload as sent and received over HTTP.

    Every field is required. ``serialNumber`` carries a UUID string and the
    enum fields carry their names; ``to_device`` checks them.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    serial_number: str = Field(alias="serialNumber")
    model_id: str = Field(alias="modelId")
    model_name: str = Field(alias="modelName")
    manufacturer: str = Field(alias="manufacturer")
    primary_user: str = Field(alias="primaryUser")
    operating_system: str = Field(alias="operatingSystem")
    device_type: str = Field(alias="deviceType")
    device_status: str = Field(alias="deviceStatus")

    def to_device(self) -> Device:
        """Decode into a ``Device``; the first invalid field raises ``InvalidFieldError``."""

        serial_number = _parse_serial_number(self.serial_number)

        device_type = parse_device_type(self.device_type)
        if device_type is None:
            raise InvalidFieldError(
                "deviceType", self.device_type, f"must be one of: {', '.join(DEVICE_TYPE_CHOICES)}"
            )

        device_status = parse_device_status(self.device_status)
        if device_status is None:
            raise InvalidFieldError(
                "deviceStatus", self.device_status, f"must be one of: {', '.join(DEVICE_STATUS_CHOICES)}"
            )

        return Device(
            serial_number=serial_number,
            model_id=self.model_id,
            model_name=self.model_name,
            manufacturer=self.manufacturer,
            primary_user=_check_email(self.primary_user),
            operating_system=self.operating_system,
            device_type=device_type,
            device_status=device_status,
        )

    @classmethod
    def from_device(cls, device: Device) -> "DeviceDto":
        return cls(
            serial_number=str(device.serial_number),
            model_id=device.model_id,
            model_name=device.model_name,
            manufacturer=device.manufacturer,
            primary_user=device.primary_user,
            operating_system=device.operating_system,
            device_type=device.device_type.value,
            device_status=device.device_status.value,
        )
