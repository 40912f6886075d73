"""
Spectrum ledger for one solve.

The ledger is the only mutable state of a solve. It records, per
(link, zone) bucket, which slots are occupied and by whom.

Design Principles:
    - One ledger per solve, owned and passed explicitly (no global state)
    - Read methods are query-only (no side effects)
    - All mutations go through commit/release, validated up front so a
      failing commit never leaves a partial write behind
    - Writes are serialised through a re-entrant lock; ``try_commit``
      re-validates under that lock for optimistic check-then-commit

Bucket Array Values:
    - 0: Slot is free
    - Positive int: Slot occupied by the request with that owner token
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterable
from typing import TYPE_CHECKING, ClassVar

import numpy as np
import numpy.typing as npt

from eonac.domain.catalog import Link, SlotRange, Zone
from eonac.domain.errors import LedgerConflictError

if TYPE_CHECKING:
    from eonac.domain.catalog import RequestCatalog


class SpectrumLedger:
    """
    Per-(link, zone) slot occupancy.

    Buckets are numpy arrays of length ``B`` created lazily on first write;
    slot ``s`` lives at index ``s - 1``. A per-bucket counter keeps the
    occupied-slot count so capacity checks are O(1).

    :param links: Links known to the ledger (the topology)
    :param zones: Zones with their per-link capacities
    :param slot_ceiling: Number of slots ``B`` per link

    Example:
        >>> ledger = SpectrumLedger(catalog.links, catalog.zones, 140)
        >>> ledger.is_free(Link(1, 2), "z1", SlotRange(1, 2))
        True
        >>> ledger.commit([Link(1, 2)], "z1", SlotRange(1, 2), owner="r1")
        >>> ledger.occupied_count(Link(1, 2), "z1")
        2
    """

    FREE_SLOT: ClassVar[int] = 0

    def __init__(
        self, links: Iterable[Link], zones: Iterable[Zone], slot_ceiling: int
    ) -> None:
        self._links = {Link(*link) for link in links}
        self._zones = {zone.zone_id: zone for zone in zones}
        self._slot_ceiling = slot_ceiling
        self._buckets: dict[tuple[Link, str], npt.NDArray[np.int64]] = {}
        self._counts: dict[tuple[Link, str], int] = {}
        self._owner_tokens: dict[Hashable, int] = {}
        self._token_owners: dict[int, Hashable] = {}
        self._lock = threading.RLock()

    @classmethod
    def for_catalog(cls, catalog: RequestCatalog) -> SpectrumLedger:
        """Build an empty ledger sized for ``catalog``."""
        return cls(catalog.links, catalog.zones, catalog.slot_ceiling)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def slot_ceiling(self) -> int:
        """Global slot ceiling ``B``."""
        return self._slot_ceiling

    def has_link(self, link: Link) -> bool:
        """True if the ledger tracks ``link``."""
        return link in self._links

    def zone(self, zone_id: str) -> Zone:
        """Zone tracked by the ledger."""
        try:
            return self._zones[zone_id]
        except KeyError:
            raise KeyError(f"Zone '{zone_id}' is not tracked by the ledger") from None

    def is_free(self, link: Link, zone_id: str, slot_range: SlotRange) -> bool:
        """
        Check whether every slot of ``slot_range`` is free in the bucket.

        :param link: Link to inspect
        :param zone_id: Zone bucket to inspect
        :param slot_range: Inclusive, 1-based slot range
        :return: True if no slot in the range is occupied
        :raises KeyError: If the link or zone is unknown
        :raises IndexError: If the range falls outside ``[1, B]``
        """
        bucket = self._bucket(link, zone_id, create=False)
        self._check_bounds(slot_range)
        if bucket is None:
            return True
        return bool(
            np.all(bucket[slot_range.start - 1 : slot_range.end] == self.FREE_SLOT)
        )

    def capacity_ok(self, link: Link, zone_id: str, slot_range: SlotRange) -> bool:
        """
        Check whether adding ``slot_range`` keeps the bucket within capacity.

        :param link: Link to inspect
        :param zone_id: Zone bucket to inspect
        :param slot_range: Inclusive, 1-based slot range
        :return: True if occupied + ``slot_range.length`` <= zone capacity
        :raises KeyError: If the link or zone is unknown
        """
        self._require_link(link)
        capacity = self.zone(zone_id).capacity
        return self._counts.get((link, zone_id), 0) + slot_range.length <= capacity

    def occupied_count(self, link: Link, zone_id: str) -> int:
        """Number of occupied slots in the bucket."""
        self._require_link(link)
        self.zone(zone_id)
        return self._counts.get((link, zone_id), 0)

    def occupied_slots(self, link: Link, zone_id: str) -> list[int]:
        """Sorted 1-based indices of occupied slots in the bucket."""
        bucket = self._bucket(link, zone_id, create=False)
        if bucket is None:
            return []
        return [int(index) + 1 for index in np.flatnonzero(bucket)]

    def owners(self, link: Link, zone_id: str) -> dict[int, Hashable]:
        """Mapping of occupied slot index to owning request."""
        bucket = self._bucket(link, zone_id, create=False)
        if bucket is None:
            return {}
        return {
            int(index) + 1: self._token_owners[int(bucket[index])]
            for index in np.flatnonzero(bucket)
        }

    def link_total(self, link: Link) -> int:
        """Occupied slots on ``link`` summed over every zone."""
        self._require_link(link)
        return sum(
            count for (bucket_link, _), count in self._counts.items() if bucket_link == link
        )

    def buckets(self) -> list[tuple[Link, str]]:
        """Non-empty (link, zone) buckets, in first-write order."""
        return [key for key, count in self._counts.items() if count > 0]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def commit(
        self,
        links: Iterable[Link],
        zone_id: str,
        slot_range: SlotRange,
        owner: Hashable,
    ) -> None:
        """
        Mark ``slot_range`` occupied by ``owner`` on every link, in one zone.

        Every bucket is validated before anything is written.

        :param links: Links of the chosen path
        :param zone_id: Zone bucket to write
        :param slot_range: Inclusive, 1-based slot range
        :param owner: Request identifier owning the slots
        :raises LedgerConflictError: If a slot is occupied or capacity would
            be exceeded on any link
        :raises KeyError: If a link or the zone is unknown

        Side Effects:
            - Sets bucket[start-1:end] = owner token on every link
            - Increases every bucket's occupied count by ``slot_range.length``
        """
        links = list(links)
        with self._lock:
            for link in links:
                if not self.is_free(link, zone_id, slot_range):
                    raise LedgerConflictError(
                        f"Slots {slot_range} on {link} zone {zone_id} are not free"
                    )
                if not self.capacity_ok(link, zone_id, slot_range):
                    raise LedgerConflictError(
                        f"Committing {slot_range.length} slots on {link} would "
                        f"exceed zone {zone_id} capacity "
                        f"{self.zone(zone_id).capacity}"
                    )
            if len(set(links)) != len(links):
                raise LedgerConflictError(f"Duplicate links in commit: {links}")

            token = self._token_for(owner)
            for link in links:
                bucket = self._bucket(link, zone_id, create=True)
                bucket[slot_range.start - 1 : slot_range.end] = token
                self._counts[(link, zone_id)] = (
                    self._counts.get((link, zone_id), 0) + slot_range.length
                )

    def try_commit(
        self,
        links: Iterable[Link],
        zone_id: str,
        slot_range: SlotRange,
        owner: Hashable,
    ) -> bool:
        """
        Re-validate and commit atomically.

        Used by concurrent callers whose feasibility result may be stale.

        :return: True if committed, False if the slots are no longer available
        """
        with self._lock:
            try:
                self.commit(links, zone_id, slot_range, owner)
            except LedgerConflictError:
                return False
            return True

    def release(
        self,
        links: Iterable[Link],
        zone_id: str,
        slot_range: SlotRange,
        owner: Hashable,
    ) -> None:
        """
        Free ``slot_range`` held by ``owner`` on every link, in one zone.

        The undo of :meth:`commit`, used when backtracking. Every bucket is
        validated before anything is freed.

        :param owner: Request identifier the slots were committed for
        :raises LedgerConflictError: If any slot of the range on any link is
            not held by ``owner``
        :raises KeyError: If a link or the zone is unknown

        Side Effects:
            - Sets the range back to 0 on every link
            - Decreases every bucket's occupied count by ``slot_range.length``
        """
        links = list(links)
        with self._lock:
            self._check_bounds(slot_range)
            if len(set(links)) != len(links):
                raise LedgerConflictError(f"Duplicate links in release: {links}")
            token = self._owner_tokens.get(owner)
            windows = []
            for link in links:
                bucket = self._bucket(link, zone_id, create=False)
                window = (
                    None if bucket is None else bucket[slot_range.start - 1 : slot_range.end]
                )
                if window is None or token is None or not np.all(window == token):
                    raise LedgerConflictError(
                        f"Slots {slot_range} on {link} zone {zone_id} are not "
                        f"held by {owner!r}"
                    )
                windows.append((link, window))

            for link, window in windows:
                window[:] = self.FREE_SLOT
                self._counts[(link, zone_id)] -= slot_range.length

    def clear(self) -> None:
        """Release everything."""
        with self._lock:
            self._buckets.clear()
            self._counts.clear()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require_link(self, link: Link) -> None:
        if link not in self._links:
            raise KeyError(f"Link {link} is not part of the topology")

    def _check_bounds(self, slot_range: SlotRange) -> None:
        if slot_range.start < 1 or slot_range.end > self._slot_ceiling:
            raise IndexError(
                f"Slot range {slot_range} outside [1, {self._slot_ceiling}]"
            )
        if slot_range.end < slot_range.start:
            raise IndexError(f"Slot range {slot_range} is empty")

    def _bucket(
        self, link: Link, zone_id: str, create: bool
    ) -> npt.NDArray[np.int64] | None:
        self._require_link(link)
        self.zone(zone_id)
        key = (link, zone_id)
        bucket = self._buckets.get(key)
        if bucket is None and create:
            bucket = np.zeros(self._slot_ceiling, dtype=np.int64)
            self._buckets[key] = bucket
        return bucket

    def _token_for(self, owner: Hashable) -> int:
        token = self._owner_tokens.get(owner)
        if token is None:
            token = len(self._owner_tokens) + 1
            self._owner_tokens[owner] = token
            self._token_owners[token] = owner
        return token
