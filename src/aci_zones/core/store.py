"""In-memory zone directory."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from aci_zones.resources.zone import Zone

logger = logging.getLogger(__name__)


class ZoneRecord(BaseModel):
    """A stored zone and the fabric that owns it."""

    fabric_id: str
    zone: Zone


class ZoneStore:
    """Directory of zone records keyed by resource URI.

    Also the read-only fabric-existence lookup. All map access is guarded by
    an internal lock and records are copied in and out, so a caller holding a
    record cannot change stored state without calling :meth:`put`.

    The store does not serialize multi-step operations; callers mutating a
    fabric's zone subtree hold :meth:`fabric_lock` for the whole sequence.
    """

    def __init__(self, fabrics: Iterable[str] = ()) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, ZoneRecord] = {}
        self._fabrics: set[str] = set(fabrics)
        self._fabric_locks: dict[str, threading.Lock] = {}

    # Fabrics

    def register_fabric(self, fabric_id: str) -> None:
        with self._lock:
            self._fabrics.add(fabric_id)

    def has_fabric(self, fabric_id: str) -> bool:
        with self._lock:
            return fabric_id in self._fabrics

    def fabric_lock(self, fabric_id: str) -> threading.Lock:
        """Return the mutex serializing mutations of one fabric's zones."""
        with self._lock:
            return self._fabric_locks.setdefault(fabric_id, threading.Lock())

    # Zones

    def put(self, uri: str, record: ZoneRecord) -> None:
        with self._lock:
            self._records[uri] = record.model_copy(deep=True)
        logger.debug("Stored zone %s (fabric %s)", uri, record.fabric_id)

    def get(self, uri: str) -> ZoneRecord | None:
        with self._lock:
            record = self._records.get(uri)
            return record.model_copy(deep=True) if record is not None else None

    def delete(self, uri: str) -> None:
        with self._lock:
            self._records.pop(uri, None)
        logger.debug("Removed zone %s", uri)

    def list_by_fabric(self, fabric_id: str) -> list[ZoneRecord]:
        with self._lock:
            return [
                r.model_copy(deep=True) for r in self._records.values() if r.fabric_id == fabric_id
            ]

    def find_by_name(self, name: str) -> ZoneRecord | None:
        """Return the first stored zone named *name*, across all fabrics and types."""
        with self._lock:
            for record in self._records.values():
                if record.zone.name == name:
                    return record.model_copy(deep=True)
        return None

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """JSON-compatible dump of every record, keyed by URI."""
        with self._lock:
            return {uri: r.model_dump(mode="json") for uri, r in self._records.items()}

    def clear(self) -> None:
        """Drop all zone records. Registered fabrics are kept."""
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._records
