"""
Durable key-value storage for the warehouse collections.

Each slot holds one serialized collection. Writes are announced on an
in-process channel as StorageEvent messages; a listener is only told about
writes made by a different context, the same way a browser only fires the
storage event in the other tabs.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from models.storage_slot import StorageSlot

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageEvent:
    key: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    source: Optional[str]


StorageListener = Callable[[StorageEvent], None]


class KeyValueStorage:
    """Key-value slots stored in the storage_slots table."""

    def __init__(self, session_factory: sessionmaker, prefix: str = ""):
        self._session_factory = session_factory
        self._prefix = prefix
        self._listeners: Dict[int, tuple[Optional[str], StorageListener]] = {}
        self._next_token = 0
        # One lock per storage: every context bound to it runs its mutations,
        # writes and event handlers one at a time.
        self.lock = threading.RLock()

    def _slot_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def _public_key(self, slot_key: str) -> str:
        return slot_key[len(self._prefix):] if self._prefix else slot_key

    def get_item(self, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            slot = db.get(StorageSlot, self._slot_key(key))
            return slot.value if slot else None
        finally:
            db.close()

    def set_item(self, key: str, value: str, source: Optional[str] = None) -> None:
        """Write a slot and notify the other contexts.

        Raises SQLAlchemyError when the write fails; nothing is announced then.
        """
        with self.lock:
            old_value = self._write(key, value, source)
            if old_value != value:
                self._dispatch(StorageEvent(key=key, old_value=old_value, new_value=value, source=source))

    def remove_item(self, key: str, source: Optional[str] = None) -> None:
        with self.lock:
            old_value = self._delete(key)
            if old_value is not None:
                self._dispatch(StorageEvent(key=key, old_value=old_value, new_value=None, source=source))

    def clear(self, source: Optional[str] = None) -> None:
        """Remove every slot under this storage's prefix."""
        with self.lock:
            db = self._session_factory()
            try:
                query = db.query(StorageSlot)
                if self._prefix:
                    query = query.filter(StorageSlot.key.startswith(self._prefix, autoescape=True))
                query.delete(synchronize_session=False)
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise
            finally:
                db.close()
            self._dispatch(StorageEvent(key=None, old_value=None, new_value=None, source=source))

    def keys(self) -> List[str]:
        db = self._session_factory()
        try:
            query = db.query(StorageSlot.key)
            if self._prefix:
                query = query.filter(StorageSlot.key.startswith(self._prefix, autoescape=True))
            return sorted(self._public_key(row[0]) for row in query.all())
        finally:
            db.close()

    def add_listener(self, listener: StorageListener, context_id: Optional[str] = None) -> Callable[[], None]:
        """Register a listener for writes from other contexts; returns its remover."""
        with self.lock:
            token = self._next_token
            self._next_token += 1
            self._listeners[token] = (context_id, listener)

        def remove() -> None:
            with self.lock:
                self._listeners.pop(token, None)

        return remove

    def _write(self, key: str, value: str, source: Optional[str]) -> Optional[str]:
        db = self._session_factory()
        try:
            slot = db.get(StorageSlot, self._slot_key(key))
            old_value = slot.value if slot else None
            if slot is None:
                db.add(StorageSlot(key=self._slot_key(key), value=value, updated_by=source))
            else:
                slot.value = value
                slot.updated_by = source
            db.commit()
            return old_value
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def _delete(self, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            slot = db.get(StorageSlot, self._slot_key(key))
            if slot is None:
                return None
            old_value = slot.value
            db.delete(slot)
            db.commit()
            return old_value
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()

    def _dispatch(self, event: StorageEvent) -> None:
        for context_id, listener in list(self._listeners.values()):
            if event.source is not None and context_id == event.source:
                continue
            try:
                listener(event)
            except Exception as exc:
                log.error("Storage listener failed for key %s: %s", event.key, exc, exc_info=True)
