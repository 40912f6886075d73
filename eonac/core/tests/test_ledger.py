"""Unit tests for eonac.core.ledger module."""

import numpy as np
import pytest

from eonac.core.ledger import SpectrumLedger
from eonac.domain.catalog import Link, RequestCatalog, SlotRange, Zone
from eonac.domain.errors import LedgerConflictError

L12 = Link(1, 2)
L23 = Link(2, 3)


class TestLedgerQueries:
    """Tests for read-only ledger queries."""

    def test_new_ledger_is_empty(self, ledger: SpectrumLedger) -> None:
        """Test every bucket starts free."""
        assert ledger.is_free(L12, "za", SlotRange(1, 10))
        assert ledger.occupied_count(L12, "za") == 0
        assert ledger.occupied_slots(L12, "za") == []
        assert ledger.buckets() == []

    def test_unknown_link_raises_key_error(self, ledger: SpectrumLedger) -> None:
        """Test lookups on links outside the topology fail."""
        with pytest.raises(KeyError, match="not part of the topology"):
            ledger.is_free(Link(3, 1), "za", SlotRange(1, 2))

    def test_unknown_zone_raises_key_error(self, ledger: SpectrumLedger) -> None:
        """Test lookups on unknown zones fail."""
        with pytest.raises(KeyError, match="not tracked"):
            ledger.occupied_count(L12, "zz")

    @pytest.mark.parametrize("slot_range", [SlotRange(0, 1), SlotRange(9, 11)])
    def test_out_of_bounds_range_raises_index_error(
        self, ledger: SpectrumLedger, slot_range: SlotRange
    ) -> None:
        """Test ranges outside [1, B] are rejected."""
        with pytest.raises(IndexError, match="outside"):
            ledger.is_free(L12, "za", slot_range)


class TestLedgerCommit:
    """Tests for commit, release and capacity accounting."""

    def test_commit_marks_every_link(self, ledger: SpectrumLedger) -> None:
        """Test a commit writes the same range on all path links."""
        # Act
        ledger.commit([L12, L23], "za", SlotRange(3, 4), owner="r1")

        # Assert
        for link in (L12, L23):
            assert ledger.occupied_slots(link, "za") == [3, 4]
            assert ledger.owners(link, "za") == {3: "r1", 4: "r1"}
            assert ledger.occupied_count(link, "za") == 2
        assert not ledger.is_free(L12, "za", SlotRange(4, 5))
        assert ledger.is_free(L12, "za", SlotRange(5, 6))

    def test_zones_are_independent_buckets(self, ledger: SpectrumLedger) -> None:
        """Test the same slots may be used by different zones on one link."""
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")

        assert ledger.is_free(L12, "zb", SlotRange(1, 3))
        ledger.commit([L12], "zb", SlotRange(1, 3), owner="r2")

        assert ledger.link_total(L12) == 5
        assert sorted(ledger.buckets()) == [(L12, "za"), (L12, "zb")]

    def test_overlapping_commit_raises_and_writes_nothing(
        self, ledger: SpectrumLedger
    ) -> None:
        """Test a conflicting commit leaves no partial write."""
        ledger.commit([L23], "za", SlotRange(2, 3), owner="r1")

        with pytest.raises(LedgerConflictError, match="not free"):
            ledger.commit([L12, L23], "za", SlotRange(3, 4), owner="r2")

        assert ledger.occupied_count(L12, "za") == 0
        assert ledger.occupied_slots(L23, "za") == [2, 3]

    def test_capacity_is_enforced(self, ledger: SpectrumLedger) -> None:
        """Test a zone never holds more slots than its capacity per link."""
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")
        ledger.commit([L12], "za", SlotRange(5, 6), owner="r2")

        assert not ledger.capacity_ok(L12, "za", SlotRange(8, 9))
        with pytest.raises(LedgerConflictError, match="capacity"):
            ledger.commit([L12], "za", SlotRange(8, 9), owner="r3")
        assert ledger.occupied_count(L12, "za") == 4

    def test_duplicate_links_raise(self, ledger: SpectrumLedger) -> None:
        """Test a commit cannot list the same link twice."""
        with pytest.raises(LedgerConflictError, match="Duplicate links"):
            ledger.commit([L12, L12], "zb", SlotRange(1, 3), owner="r1")

    def test_conflict_error_is_a_value_error(self, ledger: SpectrumLedger) -> None:
        """Test conflicts can be caught as ValueError."""
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")

        with pytest.raises(ValueError):
            ledger.commit([L12], "za", SlotRange(1, 2), owner="r2")

    def test_release_restores_previous_state(self, ledger: SpectrumLedger) -> None:
        """Test release is the exact undo of commit."""
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")
        ledger.commit([L12, L23], "za", SlotRange(5, 6), owner="r2")

        ledger.release([L12, L23], "za", SlotRange(5, 6), owner="r2")

        assert ledger.occupied_slots(L12, "za") == [1, 2]
        assert ledger.occupied_count(L23, "za") == 0
        assert ledger.is_free(L23, "za", SlotRange(5, 6))

    def test_release_by_other_owner_raises_and_keeps_slots(
        self, ledger: SpectrumLedger
    ) -> None:
        """Test a release cannot free slots another request holds."""
        # Arrange
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")
        ledger.commit([L23], "za", SlotRange(1, 2), owner="r2")

        # Act / Assert
        with pytest.raises(LedgerConflictError, match="not held by 'r2'"):
            ledger.release([L23, L12], "za", SlotRange(1, 2), owner="r2")

        assert ledger.owners(L12, "za") == {1: "r1", 2: "r1"}
        assert ledger.owners(L23, "za") == {1: "r2", 2: "r2"}
        assert ledger.occupied_count(L23, "za") == 2

    @pytest.mark.parametrize(
        "slot_range",
        [SlotRange(2, 3), SlotRange(5, 6)],
        ids=["partially_held", "never_committed"],
    )
    def test_release_outside_owned_range_raises(
        self, ledger: SpectrumLedger, slot_range: SlotRange
    ) -> None:
        """Test releasing slots the owner does not fully hold fails."""
        ledger.commit([L12], "za", SlotRange(1, 2), owner="r1")

        with pytest.raises(LedgerConflictError):
            ledger.release([L12], "za", slot_range, owner="r1")

        assert ledger.occupied_slots(L12, "za") == [1, 2]

    def test_try_commit_reports_conflicts(self, ledger: SpectrumLedger) -> None:
        """Test try_commit returns False instead of raising."""
        assert ledger.try_commit([L12], "za", SlotRange(1, 2), owner="r1")
        assert not ledger.try_commit([L12], "za", SlotRange(2, 3), owner="r2")
        assert ledger.owners(L12, "za") == {1: "r1", 2: "r1"}

    def test_clear_releases_everything(self, ledger: SpectrumLedger) -> None:
        """Test clear empties every bucket."""
        ledger.commit([L12, L23], "zb", SlotRange(1, 3), owner="r1")

        ledger.clear()

        assert ledger.buckets() == []
        assert ledger.is_free(L12, "zb", SlotRange(1, 3))


class TestLedgerIsolation:
    """Tests for ledgers being independent per solve."""

    def test_ledgers_share_no_state(self, catalog: RequestCatalog) -> None:
        """Test two ledgers for one catalog do not interact."""
        first = SpectrumLedger.for_catalog(catalog)
        second = SpectrumLedger.for_catalog(catalog)

        first.commit([L12], "za", SlotRange(1, 2), owner="r1")

        assert second.is_free(L12, "za", SlotRange(1, 2))
        assert second.occupied_count(L12, "za") == 0

    def test_buckets_are_numpy_arrays_of_length_b(self) -> None:
        """Test bucket storage spans the whole slot ceiling."""
        ledger = SpectrumLedger([L12], [Zone("z1", "m1", 20)], slot_ceiling=20)
        ledger.commit([L12], "z1", SlotRange(20, 20), owner="r1")

        bucket = ledger._buckets[(L12, "z1")]
        assert isinstance(bucket, np.ndarray)
        assert bucket.shape == (20,)
        assert ledger.occupied_slots(L12, "z1") == [20]
