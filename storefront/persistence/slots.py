from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from storefront.persistence import db
from storefront.persistence.models import KeyValueSlotModel


class SlotStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemorySlotStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        self.slots[key] = value

    def delete(self, key: str) -> None:
        self.slots.pop(key, None)


class SqlSlotStore:
    def __init__(self, session_factory: Callable[[], Session] | None = None):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with db.session_scope(self._session_factory) as session:
            return session.scalar(select(KeyValueSlotModel.value).where(KeyValueSlotModel.key == key))

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        with db.session_scope(self._session_factory) as session:
            row = session.get(KeyValueSlotModel, key)
            if row is None:
                session.add(KeyValueSlotModel(key=key, value=value, updated_at=now))
            else:
                row.value = value
                row.updated_at = now

    def delete(self, key: str) -> None:
        with db.session_scope(self._session_factory) as session:
            session.execute(delete(KeyValueSlotModel).where(KeyValueSlotModel.key == key))
