"""
Binds one in-memory collection to one key-value storage slot.

The slot holds a versioned envelope:

    {"schemaVersion": 1, "items": [...]}

A bare JSON list is the unversioned layout written before the envelope
existed and is read as version 0.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from services.storage_service import KeyValueStorage, StorageEvent

log = logging.getLogger(__name__)

LATEST_SCHEMA_VERSION = 1

T = TypeVar("T", bound=BaseModel)

ItemUpgrade = Callable[[dict], dict]


class BindingState(Enum):
    UNINITIALIZED = "UNINITIALIZED"
    BOUND = "BOUND"


class CorruptPayloadError(ValueError):
    pass


def _coerce_version(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptPayloadError(f"Invalid schemaVersion: {value!r}")
    return value


def upgrade_envelope(payload: Any, legacy_item_upgrade: Optional[ItemUpgrade] = None) -> dict:
    """Upgrade a decoded slot payload to the latest envelope. Never downgrades."""
    if isinstance(payload, list):
        items = payload
        if legacy_item_upgrade is not None:
            items = [legacy_item_upgrade(item) if isinstance(item, dict) else item for item in items]
        return {"schemaVersion": LATEST_SCHEMA_VERSION, "items": items}

    if not isinstance(payload, dict):
        raise CorruptPayloadError(f"Unexpected payload type: {type(payload).__name__}")

    version = _coerce_version(payload.get("schemaVersion"))
    if version > LATEST_SCHEMA_VERSION:
        raise CorruptPayloadError(
            f"Unsupported schemaVersion: {version} (latest={LATEST_SCHEMA_VERSION})"
        )
    if not isinstance(payload.get("items"), list):
        raise CorruptPayloadError("Envelope has no items list")
    return payload


class PersistedCollection(Generic[T]):
    """A collection mirrored into a storage slot.

    Construction reads the slot once, writing the default into an empty slot,
    and subscribes to changes made by other contexts; the binding then stays
    in the BOUND state for its lifetime.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str,
        item_type: Type[T],
        default: Sequence[T],
        *,
        context_id: str,
        on_external_change: Optional[Callable[[str, List[T]], None]] = None,
        legacy_item_upgrade: Optional[ItemUpgrade] = None,
    ):
        self.state = BindingState.UNINITIALIZED
        self.key = key
        self.context_id = context_id
        self._storage = storage
        self._default = list(default)
        self._adapter: TypeAdapter[List[T]] = TypeAdapter(List[item_type])
        self._on_external_change = on_external_change
        self._legacy_item_upgrade = legacy_item_upgrade

        self._items: List[T] = self._load_initial()
        self._remove_listener = storage.add_listener(self._handle_storage_event, context_id=context_id)
        self.state = BindingState.BOUND

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def set(self, items: Sequence[T]) -> None:
        """Replace the collection and write it to the slot."""
        self._items = list(items)
        self._write()

    def close(self) -> None:
        """Stop listening for other contexts' writes."""
        self._remove_listener()

    def encode(self, items: Sequence[T]) -> str:
        return json.dumps({
            "schemaVersion": LATEST_SCHEMA_VERSION,
            "items": self._adapter.dump_python(list(items), mode="json", by_alias=True, exclude_none=True),
        })

    def decode(self, raw: str) -> List[T]:
        """Deserialize a slot value; raises CorruptPayloadError when unreadable."""
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise CorruptPayloadError(str(exc)) from exc
        envelope = upgrade_envelope(payload, self._legacy_item_upgrade)
        try:
            return self._adapter.validate_python(envelope["items"])
        except ValidationError as exc:
            raise CorruptPayloadError(str(exc)) from exc

    def _load_initial(self) -> List[T]:
        try:
            raw = self._storage.get_item(self.key)
        except SQLAlchemyError as exc:
            log.error("Error reading storage key %r: %s", self.key, exc, exc_info=True)
            return list(self._default)
        if raw is None:
            # An empty slot is filled with the default.
            self._items = list(self._default)
            self._write()
            return self._items
        try:
            return self.decode(raw)
        except CorruptPayloadError as exc:
            log.error("Error parsing storage key %r, using defaults: %s", self.key, exc)
            return list(self._default)

    def _write(self) -> None:
        try:
            payload = self.encode(self._items)
        except (TypeError, ValueError) as exc:
            log.error("Error serializing storage key %r: %s", self.key, exc, exc_info=True)
            return
        try:
            self._storage.set_item(self.key, payload, source=self.context_id)
        except SQLAlchemyError as exc:
            log.error("Error setting storage key %r: %s", self.key, exc, exc_info=True)

    def _handle_storage_event(self, event: StorageEvent) -> None:
        # key None means the whole storage was cleared.
        if event.key is not None and event.key != self.key:
            return
        if event.new_value is None:
            self._items = list(self._default)
        else:
            try:
                self._items = self.decode(event.new_value)
            except CorruptPayloadError as exc:
                log.error("Error parsing stored value on storage event for key %r: %s", self.key, exc)
                return
        if self._on_external_change is not None:
            self._on_external_change(self.key, self.items)
