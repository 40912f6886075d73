"""Shared fixtures for admission control strategy tests."""

from typing import Any

import pytest

from eonac.domain.catalog import RequestCatalog


@pytest.fixture
def trap_data() -> dict[str, Any]:
    """
    Provide an instance where first-fit rejects a request needlessly.

    r1 takes slots 1-2 first, which blocks r2's only range 2-3. Moving r1
    to start 5 admits both.
    """
    return {
        "slot_ceiling": 10,
        "topology": {"nodes": [1, 2], "links": [[1, 2]]},
        "request_types": {"a": 2},
        "zones": [{"id": "za", "accepted_type": "a", "capacity": 10}],
        "requests": [
            {"id": "r1", "type": "a", "paths": [[1, 2]], "starts": [1, 5]},
            {"id": "r2", "type": "a", "paths": [[1, 2]], "starts": [2]},
        ],
    }


@pytest.fixture
def trap_catalog(trap_data: dict[str, Any]) -> RequestCatalog:
    """Provide the first-fit trap catalog."""
    return RequestCatalog.from_dict(trap_data)


@pytest.fixture
def mixed_catalog() -> RequestCatalog:
    """Provide a catalog with several demands on a three-node line."""
    return RequestCatalog.from_dict(
        {
            "slot_ceiling": 8,
            "topology": {"nodes": [1, 2, 3], "links": [[1, 2], [2, 3]]},
            "request_types": {"small": 1, "large": 3},
            "zones": [
                {"id": "zs", "accepted_type": "small", "capacity": 8},
                {"id": "zl", "accepted_type": "large", "capacity": 3},
            ],
            "requests": [
                {"id": "s1", "type": "small", "paths": [[1, 2]], "starts": [1, 2]},
                {"id": "l1", "type": "large", "paths": [[1, 2, 3]], "starts": [1, 4]},
                {"id": "l2", "type": "large", "paths": [[2, 3]], "starts": [1, 4]},
                {"id": "s2", "type": "small", "paths": [[1, 2, 3]], "starts": [1]},
            ],
        }
    )
