from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass

from sqlalchemy import Column, Enum, Index, Text, Uuid

from ..core.device_types import DeviceStatus, DeviceType
from ..db.session import MODEL_SCHEMA, Base

# Set once at insert time; updates may never change them.
IMMUTABLE_FIELDS = ("model_id", "model_name", "manufacturer")
MUTABLE_FIELDS = ("primary_user", "operating_system", "device_type", "device_status")


@dataclass(frozen=True)
class Device:
    """A device inventory record, keyed by its serial number."""

    serial_number: uuid.UUID
    model_id: str
    model_name: str
    manufacturer: str
    primary_user: str
    operating_system: str
    device_type: DeviceType
    device_status: DeviceStatus

    def with_changes(self, **changes) -> "Device":
        return dataclasses.replace(self, **changes)


def _enum_column(enum_cls, name: str) -> Column:
    # Stored by name ("Laptop", "Active") rather than ordinal.
    return Column(
        name,
        Enum(
            enum_cls,
            native_enum=False,
            length=32,
            values_callable=lambda members: [member.value for member in members],
            validate_strings=True,
        ),
        nullable=False,
    )


class DeviceRecord(Base):
    __tablename__ = "Devices"
    __table_args__ = (
        Index("IX_Devices_SerialNumber", "SerialNumber", unique=True),
        {"schema": MODEL_SCHEMA},
    )

    serial_number = Column("SerialNumber", Uuid(as_uuid=True), primary_key=True)
    model_id = Column("ModelId", Text, nullable=False)
    model_name = Column("ModelName", Text, nullable=False)
    manufacturer = Column("Manufacturer", Text, nullable=False)
    primary_user = Column("PrimaryUser", Text, nullable=False)
    operating_system = Column("OperatingSystem", Text, nullable=False)
    device_type = _enum_column(DeviceType, "DeviceType")
    device_status = _enum_column(DeviceStatus, "DeviceStatus")

    @classmethod
    def from_entity(cls, device: Device) -> "DeviceRecord":
        return cls(**dataclasses.asdict(device))

    def to_entity(self) -> Device:
        return Device(
            serial_number=self.serial_number,
            model_id=self.model_id,
            model_name=self.model_name,
            manufacturer=self.manufacturer,
            primary_user=self.primary_user,
            operating_system=self.operating_system,
            device_type=self.device_type,
            device_status=self.device_status,
        )
