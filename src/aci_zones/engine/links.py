"""Parent/child containment link maintenance."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aci_zones.engine.errors import ZoneNotFoundError
from aci_zones.resources.zone import Link, ZoneLinks

if TYPE_CHECKING:
    from aci_zones.core.store import ZoneRecord, ZoneStore

logger = logging.getLogger(__name__)


class LinkMaintainer:
    """Keeps ``ContainsZones`` and its count on parent records in sync.

    Callers hold the owning fabric's lock; each method is a
    load-modify-store on a single parent record.
    """

    def __init__(self, store: ZoneStore) -> None:
        self._store = store

    def _load_parent(self, parent_uri: str) -> ZoneRecord:
        record = self._store.get(parent_uri)
        if record is None:
            raise ZoneNotFoundError(
                f"Parent zone {parent_uri} not found",
                message_args=["Zone", parent_uri],
            )
        return record

    def attach(self, parent_uri: str, child_uri: str) -> None:
        """Append *child_uri* to the parent's ``ContainsZones``."""
        record = self._load_parent(parent_uri)
        links = record.zone.links or ZoneLinks()
        links.contains_zones.append(Link(oid=child_uri))
        links.contains_zones_count = len(links.contains_zones)
        record.zone.links = links
        self._store.put(parent_uri, record)
        logger.debug(
            "Attached %s to %s (%d children)", child_uri, parent_uri, links.contains_zones_count
        )

    def detach(self, parent_uri: str, child_uri: str) -> None:
        """Remove the reference to *child_uri* from the parent's ``ContainsZones``.

        Raises:
            ZoneNotFoundError: If the parent is missing or does not reference
                the child. Nothing is removed in that case.
        """
        record = self._load_parent(parent_uri)
        links = record.zone.links
        uris = links.child_uris()
        if child_uri not in uris:
            raise ZoneNotFoundError(
                f"Zone {parent_uri} has no containment link to {child_uri}",
                message_args=["Zone", child_uri],
            )
        del links.contains_zones[uris.index(child_uri)]
        links.contains_zones_count = len(links.contains_zones)
        self._store.put(parent_uri, record)
        logger.debug(
            "Detached %s from %s (%d children)", child_uri, parent_uri, links.contains_zones_count
        )
