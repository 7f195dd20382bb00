# device_manager/crud/devices.py
from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Iterator, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import DuplicateKeyError, ImmutableFieldError, NotFoundError, UnexpectedError
from ..models.device import IMMUTABLE_FIELDS, MUTABLE_FIELDS, Device, DeviceRecord

_FIELD_LABELS = {
    "model_id": "modelId",
    "model_name": "modelName",
    "manufacturer": "manufacturer",
}


def get_device(db: Session, serial_number: uuid.UUID) -> DeviceRecord | None:
    """
    Fetch a single device row by serial number.
    """
    return db.get(DeviceRecord, serial_number)


def create_device(db: Session, device: Device) -> DeviceRecord:
    """
    Insert a new device row. The primary key rejects a second row for the same
    serial number, which surfaces as ``DuplicateKeyError``.
    """
    record = DeviceRecord.from_entity(device)
    db.add(record)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError(device.serial_number) from exc
    db.refresh(record)
    return record


def update_device(db: Session, device: Device) -> DeviceRecord:
    """
    Write the mutable fields of ``device`` onto the stored row.
    A differing model id, model name or manufacturer is rejected.
    """
    stmt = (
        select(DeviceRecord)
        .where(DeviceRecord.serial_number == device.serial_number)
        .with_for_update()
    )
    record = db.execute(stmt).scalars().first()
    if record is None:
        raise NotFoundError(device.serial_number)

    for field in IMMUTABLE_FIELDS:
        if getattr(record, field) != getattr(device, field):
            db.rollback()
            raise ImmutableFieldError(_FIELD_LABELS[field])

    for field in MUTABLE_FIELDS:
        setattr(record, field, getattr(device, field))
    db.commit()
    db.refresh(record)
    return record


class DeviceGateway(Protocol):
    def fetch(self, serial_number: uuid.UUID) -> Device | None: ...

    def insert(self, device: Device) -> Device: ...

    def update(self, device: Device) -> Device: ...


class SqlDeviceGateway:
    """``DeviceGateway`` backed by SQLAlchemy; every call uses its own session."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            raise UnexpectedError() from exc
        finally:
            db.close()

    def fetch(self, serial_number: uuid.UUID) -> Device | None:
        with self._session() as db:
            record = get_device(db, serial_number)
            return record.to_entity() if record is not None else None

    def insert(self, device: Device) -> Device:
        with self._session() as db:
            return create_device(db, device).to_entity()

    def update(self, device: Device) -> Device:
        with self._session() as db:
            return update_device(db, device).to_entity()
