"""
Request catalog and static problem data.

This module defines the immutable inputs of one solve:
- Link / SlotRange: Value types for directed links and inclusive slot ranges
- RequestType: Request class with its contiguous slot demand
- Zone: Type-segregated capacity partition applied on every link
- Path: Loop-free ordered sequence of chained links
- Request: Connection request with candidate paths and starting slots
- RequestCatalog: Validated container for topology, types, zones and requests

The catalog is built once (usually from a plain mapping, see
:meth:`RequestCatalog.from_dict`) and treated as read-only afterwards.
"""

from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Hashable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

import networkx as nx

from eonac.domain.errors import ConfigurationError
from eonac.utils.logging_config import get_logger

logger = get_logger(__name__)

UNKNOWN_LINK_POLICIES = ("reject", "error")


# =============================================================================
# Value Types
# =============================================================================


class Link(NamedTuple):
    """Directed link between two nodes, usable directly as a networkx edge."""

    source: Hashable
    destination: Hashable

    def __str__(self) -> str:
        return f"{self.source}->{self.destination}"


class SlotRange(NamedTuple):
    """
    Inclusive, 1-based range of spectrum slots.

    Example:
        >>> SlotRange.for_demand(5, 3)
        SlotRange(start=5, end=7)
        >>> SlotRange(5, 7).length
        3
    """

    start: int
    end: int

    @classmethod
    def for_demand(cls, start: int, slot_demand: int) -> SlotRange:
        """Build the range occupied by ``slot_demand`` slots from ``start``."""
        return cls(start, start + slot_demand - 1)

    @property
    def length(self) -> int:
        """Number of slots in the range."""
        return self.end - self.start + 1

    def slots(self) -> range:
        """Iterate slot indices in the range."""
        return range(self.start, self.end + 1)

    def overlaps(self, other: SlotRange) -> bool:
        """True if both ranges share at least one slot."""
        return self.start <= other.end and other.start <= self.end

    def __str__(self) -> str:
        return f"[{self.start}, {self.end}]"


# =============================================================================
# Request Types and Zones
# =============================================================================


@dataclass(frozen=True)
class RequestType:
    """
    Request class (e.g. ``m1``) and the contiguous slots it consumes.

    Attributes:
        name: Type identifier
        slot_demand: Number of contiguous slots a request of this type needs
    """

    name: str
    slot_demand: int

    def __post_init__(self) -> None:
        if not _is_integer(self.slot_demand):
            raise ConfigurationError(
                f"slot_demand of type '{self.name}' must be an integer, "
                f"got {self.slot_demand!r}"
            )
        object.__setattr__(self, "slot_demand", int(self.slot_demand))
        if self.slot_demand <= 0:
            raise ConfigurationError(
                f"slot_demand of type '{self.name}' must be positive, "
                f"got {self.slot_demand}"
            )


@dataclass(frozen=True)
class Zone:
    """
    Type-segregated spectrum partition applied uniformly to every link.

    Attributes:
        zone_id: Zone identifier
        accepted_type: The only request type allowed to allocate in this zone
        capacity: Maximum slots simultaneously allocated to the zone per link
    """

    zone_id: str
    accepted_type: str
    capacity: int

    def __post_init__(self) -> None:
        if not _is_integer(self.capacity):
            raise ConfigurationError(
                f"capacity of zone '{self.zone_id}' must be an integer, "
                f"got {self.capacity!r}"
            )
        object.__setattr__(self, "capacity", int(self.capacity))
        if self.capacity < 0:
            raise ConfigurationError(
                f"capacity of zone '{self.zone_id}' must be non-negative, "
                f"got {self.capacity}"
            )


# =============================================================================
# Paths and Requests
# =============================================================================


@dataclass(frozen=True)
class Path:
    """
    Loop-free route made of chained directed links.

    Example:
        >>> path = Path.from_nodes([1, 2, 3])
        >>> path.links
        (Link(source=1, destination=2), Link(source=2, destination=3))
        >>> path.nodes
        (1, 2, 3)
    """

    links: tuple[Link, ...]

    def __post_init__(self) -> None:
        links = tuple(Link(*link) for link in self.links)
        object.__setattr__(self, "links", links)

        if not links:
            raise ConfigurationError("A path must contain at least one link")

        for previous, current in zip(links, links[1:]):
            if previous.destination != current.source:
                raise ConfigurationError(
                    f"Path links do not chain: {previous} is followed by {current}"
                )

        nodes = self.nodes
        if len(set(nodes)) != len(nodes):
            raise ConfigurationError(f"Path {self} revisits a node")

    @classmethod
    def from_nodes(cls, nodes: Sequence[Hashable]) -> Path:
        """Build a path from an ordered node sequence."""
        if len(nodes) < 2:
            raise ConfigurationError(
                f"A path needs at least two nodes, got {list(nodes)}"
            )
        return cls(tuple(Link(src, dst) for src, dst in zip(nodes, nodes[1:])))

    @property
    def nodes(self) -> tuple[Hashable, ...]:
        """Ordered nodes visited by the path."""
        return (self.links[0].source,) + tuple(link.destination for link in self.links)

    def __len__(self) -> int:
        return len(self.links)

    def __iter__(self) -> Iterator[Link]:
        return iter(self.links)

    def __str__(self) -> str:
        return "-".join(str(node) for node in self.nodes)


@dataclass(frozen=True)
class Request:
    """
    Connection request with its pre-computed candidates.

    Candidate starts are normalised to a sorted tuple without duplicates so
    strategies scan them in ascending order.

    Attributes:
        request_id: Request identifier
        request_type: Name of the request type
        candidate_paths: Ordered candidate paths, as given by routing
        candidate_starts: Candidate starting slots, ascending
    """

    request_id: str
    request_type: str
    candidate_paths: tuple[Path, ...]
    candidate_starts: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidate_paths", tuple(self.candidate_paths))
        for start in self.candidate_starts:
            if not _is_integer(start):
                raise ConfigurationError(
                    f"Request '{self.request_id}' has a non-integer start {start!r}"
                )
        object.__setattr__(
            self,
            "candidate_starts",
            tuple(sorted({int(start) for start in self.candidate_starts})),
        )

    def has_path(self, path: Path) -> bool:
        """True if ``path`` is one of the request's candidate paths."""
        return path in self.candidate_paths

    def has_start(self, start: int) -> bool:
        """True if ``start`` is one of the request's candidate starts."""
        return start in self.candidate_starts


# =============================================================================
# RequestCatalog
# =============================================================================


class RequestCatalog:
    """
    Validated, read-only problem data for one solve.

    Holds the directed topology, the request types, the zones (in the order
    they were given), the requests (in input order) and the global slot
    ceiling ``B``. Construction validates everything a search relies on and
    raises :class:`ConfigurationError` for fatal problems. Candidate starts
    that cannot fit in ``[1, B]`` are dropped with a warning.

    :param topology: Directed topology; every path link should be an edge
    :param request_types: Request types and their slot demands
    :param zones: Zones in priority order
    :param requests: Requests in input order
    :param slot_ceiling: Number of slots ``B`` per link
    :param unknown_link_policy: ``"reject"`` keeps paths over links missing
        from the topology (they are infeasible at solve time); ``"error"``
        raises :class:`ConfigurationError`
    """

    def __init__(
        self,
        topology: nx.DiGraph,
        request_types: Iterable[RequestType],
        zones: Iterable[Zone],
        requests: Iterable[Request],
        slot_ceiling: int,
        unknown_link_policy: str = "reject",
    ) -> None:
        if not _is_integer(slot_ceiling):
            raise ConfigurationError(
                f"slot_ceiling must be an integer, got {slot_ceiling!r}"
            )
        slot_ceiling = int(slot_ceiling)
        if slot_ceiling <= 0:
            raise ConfigurationError(
                f"slot_ceiling must be positive, got {slot_ceiling}"
            )
        if unknown_link_policy not in UNKNOWN_LINK_POLICIES:
            raise ConfigurationError(
                f"unknown_link_policy must be one of {UNKNOWN_LINK_POLICIES}, "
                f"got '{unknown_link_policy}'"
            )

        self._topology = topology
        self._slot_ceiling = slot_ceiling
        self._unknown_link_policy = unknown_link_policy
        self._types = self._index_types(request_types)
        self._zones = tuple(zones)
        self._zones_by_id = self._index_zones(self._zones)
        self._zones_by_type = self._group_zones_by_type()
        self.dropped_starts: dict[str, tuple[int, ...]] = {}
        self._requests = tuple(self._validate_request(request) for request in requests)
        self._requests_by_id = self._index_requests(self._requests)

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _index_types(request_types: Iterable[RequestType]) -> dict[str, RequestType]:
        types: dict[str, RequestType] = {}
        for request_type in request_types:
            if request_type.name in types:
                raise ConfigurationError(
                    f"Duplicate request type '{request_type.name}'"
                )
            types[request_type.name] = request_type
        if not types:
            raise ConfigurationError("At least one request type is required")
        return types

    def _index_zones(self, zones: tuple[Zone, ...]) -> dict[str, Zone]:
        by_id: dict[str, Zone] = {}
        for zone in zones:
            if zone.zone_id in by_id:
                raise ConfigurationError(f"Duplicate zone '{zone.zone_id}'")
            if zone.accepted_type not in self._types:
                raise ConfigurationError(
                    f"Zone '{zone.zone_id}' accepts unknown request type "
                    f"'{zone.accepted_type}'"
                )
            by_id[zone.zone_id] = zone
        return by_id

    def _group_zones_by_type(self) -> dict[str, tuple[Zone, ...]]:
        grouped: dict[str, tuple[Zone, ...]] = {}
        for type_name in self._types:
            grouped[type_name] = tuple(
                zone for zone in self._zones if zone.accepted_type == type_name
            )
            if not grouped[type_name]:
                raise ConfigurationError(
                    f"Request type '{type_name}' has no zone accepting it"
                )
        return grouped

    @staticmethod
    def _index_requests(requests: tuple[Request, ...]) -> dict[str, Request]:
        by_id: dict[str, Request] = {}
        for request in requests:
            if request.request_id in by_id:
                raise ConfigurationError(
                    f"Duplicate request '{request.request_id}'"
                )
            by_id[request.request_id] = request
        return by_id

    def _validate_request(self, request: Request) -> Request:
        """Check one request and drop candidate starts that cannot fit."""
        if request.request_type not in self._types:
            raise ConfigurationError(
                f"Request '{request.request_id}' has unknown type "
                f"'{request.request_type}'"
            )
        if not request.candidate_paths:
            raise ConfigurationError(
                f"Request '{request.request_id}' has no candidate paths"
            )
        if not request.candidate_starts:
            raise ConfigurationError(
                f"Request '{request.request_id}' has no candidate starts"
            )

        for path in request.candidate_paths:
            missing = self.unknown_links(path)
            if not missing:
                continue
            missing_str = ", ".join(str(link) for link in missing)
            if self._unknown_link_policy == "error":
                raise ConfigurationError(
                    f"Request '{request.request_id}' path {path} uses links "
                    f"absent from the topology: {missing_str}"
                )
            logger.warning(
                "Request '%s' path %s uses links absent from the topology (%s); "
                "the path can never be assigned",
                request.request_id,
                path,
                missing_str,
            )

        demand = self._types[request.request_type].slot_demand
        kept = tuple(
            start
            for start in request.candidate_starts
            if start >= 1 and start + demand - 1 <= self._slot_ceiling
        )
        if len(kept) == len(request.candidate_starts):
            return request

        dropped = tuple(
            start for start in request.candidate_starts if start not in kept
        )
        self.dropped_starts[request.request_id] = dropped
        logger.warning(
            "Request '%s': dropping candidate starts %s that cannot fit %d slots "
            "within [1, %d]",
            request.request_id,
            list(dropped),
            demand,
            self._slot_ceiling,
        )
        return dataclasses.replace(request, candidate_starts=kept)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def topology(self) -> nx.DiGraph:
        """Directed topology graph."""
        return self._topology

    @property
    def slot_ceiling(self) -> int:
        """Global slot ceiling ``B``."""
        return self._slot_ceiling

    @property
    def unknown_link_policy(self) -> str:
        """How paths over missing links were treated."""
        return self._unknown_link_policy

    @property
    def requests(self) -> tuple[Request, ...]:
        """Requests in input order."""
        return self._requests

    @property
    def zones(self) -> tuple[Zone, ...]:
        """Zones in priority order."""
        return self._zones

    @property
    def request_types(self) -> tuple[RequestType, ...]:
        """Request types in input order."""
        return tuple(self._types.values())

    @property
    def links(self) -> tuple[Link, ...]:
        """Topology links in graph insertion order."""
        return tuple(Link(src, dst) for src, dst in self._topology.edges)

    def __len__(self) -> int:
        return len(self._requests)

    def __iter__(self) -> Iterator[Request]:
        return iter(self._requests)

    def has_link(self, link: Link) -> bool:
        """True if ``link`` is an edge of the topology."""
        return self._topology.has_edge(link.source, link.destination)

    def unknown_links(self, path: Path) -> list[Link]:
        """Links of ``path`` missing from the topology, in path order."""
        return [link for link in path.links if not self.has_link(link)]

    def get_request(self, request_id: str) -> Request:
        """Look up a request by identifier."""
        try:
            return self._requests_by_id[request_id]
        except KeyError:
            raise KeyError(f"Unknown request '{request_id}'") from None

    def get_zone(self, zone_id: str) -> Zone:
        """Look up a zone by identifier."""
        try:
            return self._zones_by_id[zone_id]
        except KeyError:
            raise KeyError(f"Unknown zone '{zone_id}'") from None

    def get_type(self, type_name: str) -> RequestType:
        """Look up a request type by name."""
        try:
            return self._types[type_name]
        except KeyError:
            raise ConfigurationError(f"Unknown request type '{type_name}'") from None

    def slot_demand(self, request: Request) -> int:
        """Contiguous slots needed by ``request``."""
        return self.get_type(request.request_type).slot_demand

    def eligible_zones(self, type_name: str) -> tuple[Zone, ...]:
        """Zones accepting ``type_name``, in priority order."""
        return self._zones_by_type.get(type_name, ())

    def with_requests(self, requests: Iterable[Request]) -> RequestCatalog:
        """Return a new catalog sharing everything but the requests."""
        return RequestCatalog(
            topology=self._topology,
            request_types=self._types.values(),
            zones=self._zones,
            requests=requests,
            slot_ceiling=self._slot_ceiling,
            unknown_link_policy=self._unknown_link_policy,
        )

    # -------------------------------------------------------------------------
    # Mapping conversion
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], unknown_link_policy: str | None = None
    ) -> RequestCatalog:
        """
        Build a catalog from a plain mapping (as loaded from YAML / JSON).

        Expected layout::

            slot_ceiling: 140
            topology:
              nodes: [1, 2, 3]
              links: [[1, 2], [2, 3]]
            request_types: {m1: 2, m2: 3}
            zones:
              - {id: z1, accepted_type: m1, capacity: 10}
            requests:
              - id: r1
                type: m1
                paths: [[1, 2, 3]]          # node sequences
                starts: [1, 5, 9]

        A path may also be given as ``{"links": [[1, 2], [2, 3]]}``.

        :param data: Instance mapping
        :param unknown_link_policy: Overrides ``data["unknown_link_policy"]``
        :return: Validated catalog
        :raises ConfigurationError: If the mapping is malformed or invalid
        """
        try:
            topology_data = data["topology"]
            graph = nx.DiGraph()
            graph.add_nodes_from(topology_data.get("nodes", []))
            graph.add_edges_from(tuple(link) for link in topology_data["links"])

            request_types = [
                RequestType(name=str(name), slot_demand=demand)
                for name, demand in data["request_types"].items()
            ]
            zones = [
                Zone(
                    zone_id=str(zone["id"]),
                    accepted_type=str(zone["accepted_type"]),
                    capacity=zone["capacity"],
                )
                for zone in data["zones"]
            ]
            requests = [
                Request(
                    request_id=str(request["id"]),
                    request_type=str(request["type"]),
                    candidate_paths=tuple(
                        _path_from_data(path) for path in request["paths"]
                    ),
                    candidate_starts=tuple(request["starts"]),
                )
                for request in data["requests"]
            ]
            slot_ceiling = data["slot_ceiling"]
        except KeyError as e:
            raise ConfigurationError(f"Instance data is missing key {e}") from e
        except (TypeError, AttributeError) as e:
            raise ConfigurationError(f"Instance data is malformed: {e}") from e

        policy = unknown_link_policy or data.get("unknown_link_policy", "reject")
        return cls(
            topology=graph,
            request_types=request_types,
            zones=zones,
            requests=requests,
            slot_ceiling=slot_ceiling,
            unknown_link_policy=policy,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert the catalog back to the :meth:`from_dict` layout."""
        return {
            "slot_ceiling": self._slot_ceiling,
            "unknown_link_policy": self._unknown_link_policy,
            "topology": {
                "nodes": list(self._topology.nodes),
                "links": [list(link) for link in self.links],
            },
            "request_types": {
                name: request_type.slot_demand
                for name, request_type in self._types.items()
            },
            "zones": [
                {
                    "id": zone.zone_id,
                    "accepted_type": zone.accepted_type,
                    "capacity": zone.capacity,
                }
                for zone in self._zones
            ],
            "requests": [
                {
                    "id": request.request_id,
                    "type": request.request_type,
                    "paths": [list(path.nodes) for path in request.candidate_paths],
                    "starts": list(request.candidate_starts),
                }
                for request in self._requests
            ],
        }


def _is_integer(value: Any) -> bool:
    """Integral values, numpy integers included; bools are not integers here."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _path_from_data(path_data: Any) -> Path:
    if isinstance(path_data, Mapping):
        return Path(tuple(Link(*link) for link in path_data["links"]))
    return Path.from_nodes(list(path_data))
