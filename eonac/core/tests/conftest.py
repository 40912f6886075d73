"""Shared fixtures for core tests."""

from typing import Any

import pytest

from eonac.core.ledger import SpectrumLedger
from eonac.domain.catalog import RequestCatalog


@pytest.fixture
def instance_data() -> dict[str, Any]:
    """Provide a three-node instance with two request types."""
    return {
        "slot_ceiling": 10,
        "topology": {"nodes": [1, 2, 3], "links": [[1, 2], [2, 3], [1, 3]]},
        "request_types": {"a": 2, "b": 3},
        "zones": [
            {"id": "za", "accepted_type": "a", "capacity": 4},
            {"id": "zb", "accepted_type": "b", "capacity": 6},
        ],
        "requests": [
            {"id": "r1", "type": "a", "paths": [[1, 2, 3], [1, 3]], "starts": [1, 3]},
            {"id": "r2", "type": "b", "paths": [[1, 2]], "starts": [1, 4]},
        ],
    }


@pytest.fixture
def catalog(instance_data: dict[str, Any]) -> RequestCatalog:
    """Provide the validated three-node catalog."""
    return RequestCatalog.from_dict(instance_data)


@pytest.fixture
def ledger(catalog: RequestCatalog) -> SpectrumLedger:
    """Provide an empty ledger for the three-node catalog."""
    return SpectrumLedger.for_catalog(catalog)
