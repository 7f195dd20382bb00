"""Device classification enums and their string lookups."""

from __future__ import annotations

import enum


class DeviceType(str, enum.Enum):
    LAPTOP = "Laptop"
    DESKTOP = "Desktop"


class DeviceStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    RETIRED = "Retired"


# Accepted spellings are matched case-insensitively against the canonical names.
DEVICE_TYPE_LOOKUP: dict[str, DeviceType] = {member.value.lower(): member for member in DeviceType}
DEVICE_STATUS_LOOKUP: dict[str, DeviceStatus] = {member.value.lower(): member for member in DeviceStatus}

DEVICE_TYPE_CHOICES = tuple(member.value for member in DeviceType)
DEVICE_STATUS_CHOICES = tuple(member.value for member in DeviceStatus)


def parse_device_type(value: str | None) -> DeviceType | None:
    """Return the matching ``DeviceType`` or ``None`` when the value is unknown."""

    if value is None:
        return None
    return DEVICE_TYPE_LOOKUP.get(value.strip().lower())


def parse_device_status(value: str | None) -> DeviceStatus | None:
    """Return the matching ``DeviceStatus`` or ``None`` when the value is unknown."""

    if value is None:
        return None
    return DEVICE_STATUS_LOOKUP.get(value.strip().lower())


__all__ = [
    "DEVICE_STATUS_CHOICES",
    "DEVICE_STATUS_LOOKUP",
    "DEVICE_TYPE_CHOICES",
    "DEVICE_TYPE_LOOKUP",
    "DeviceStatus",
    "DeviceType",
    "parse_device_status",
    "parse_device_type",
]
