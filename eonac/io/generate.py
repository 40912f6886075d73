"""Random instance generation for experiments and property tests."""

from itertools import islice

import networkx as nx
import numpy as np

from eonac.domain.catalog import Path, Request, RequestCatalog, RequestType, Zone
from eonac.domain.errors import ConfigurationError


def create_ring_topology(
    num_nodes: int, num_chords: int, rng: np.random.Generator
) -> nx.DiGraph:
    """Bidirectional ring with random bidirectional chords.

    :param num_nodes: Number of nodes, at least 3
    :type num_nodes: int
    :param num_chords: Chords to try to add across the ring
    :type num_chords: int
    :param rng: Random generator
    :type rng: np.random.Generator
    :return: Strongly connected directed topology with nodes ``1..num_nodes``
    :rtype: nx.DiGraph
    """
    if num_nodes < 3:
        raise ConfigurationError(f"num_nodes must be at least 3, got {num_nodes}")

    graph = nx.DiGraph()
    nodes = list(range(1, num_nodes + 1))
    graph.add_nodes_from(nodes)
    for node in nodes:
        neighbor = node % num_nodes + 1
        graph.add_edge(node, neighbor)
        graph.add_edge(neighbor, node)

    for _ in range(num_chords):
        source, destination = (int(node) for node in rng.choice(nodes, 2, replace=False))
        graph.add_edge(source, destination)
        graph.add_edge(destination, source)

    return graph


def k_shortest_paths(
    graph: nx.DiGraph, source: int, destination: int, k_paths: int
) -> list[Path]:
    """Up to ``k_paths`` loop-free paths by hop count."""
    node_paths = islice(nx.shortest_simple_paths(graph, source, destination), k_paths)
    return [Path.from_nodes(nodes) for nodes in node_paths]


def generate_random_catalog(
    seed: int,
    num_nodes: int = 6,
    num_requests: int = 10,
    num_types: int = 3,
    k_paths: int = 2,
    starts_per_request: int = 4,
    slot_ceiling: int = 24,
    max_demand: int = 4,
    capacity_range: tuple[int, int] = (2, 16),
    shared_zone_probability: float = 0.25,
    num_chords: int = 2,
) -> RequestCatalog:
    """Build a reproducible random catalog.

    Each request type gets one zone; with probability
    ``shared_zone_probability`` it gets a second zone as well. Candidate
    starts always fit inside ``[1, slot_ceiling]``.

    :param seed: Seed for :func:`numpy.random.default_rng`
    :type seed: int
    :param num_nodes: Ring size
    :type num_nodes: int
    :param num_requests: Number of requests
    :type num_requests: int
    :param num_types: Number of request types ``m1..mN``
    :type num_types: int
    :param k_paths: Candidate paths per request
    :type k_paths: int
    :param starts_per_request: Candidate starts per request (capped by room)
    :type starts_per_request: int
    :param slot_ceiling: Slots per link
    :type slot_ceiling: int
    :param max_demand: Largest slot demand of a type
    :type max_demand: int
    :param capacity_range: Inclusive zone capacity bounds
    :type capacity_range: tuple[int, int]
    :param shared_zone_probability: Chance a type gets a second zone
    :type shared_zone_probability: float
    :param num_chords: Extra chords added to the ring
    :type num_chords: int
    :return: Validated catalog
    :rtype: RequestCatalog
    """
    if max_demand > slot_ceiling:
        raise ConfigurationError(
            f"max_demand ({max_demand}) cannot exceed slot_ceiling ({slot_ceiling})"
        )

    rng = np.random.default_rng(seed)
    graph = create_ring_topology(num_nodes, num_chords, rng)

    request_types = [
        RequestType(name=f"m{index}", slot_demand=int(rng.integers(1, max_demand + 1)))
        for index in range(1, num_types + 1)
    ]

    low, high = capacity_range
    zones = []
    for request_type in request_types:
        zones.append(
            Zone(
                zone_id=f"z{len(zones) + 1}",
                accepted_type=request_type.name,
                capacity=int(rng.integers(low, high + 1)),
            )
        )
        if rng.random() < shared_zone_probability:
            zones.append(
                Zone(
                    zone_id=f"z{len(zones) + 1}",
                    accepted_type=request_type.name,
                    capacity=int(rng.integers(low, high + 1)),
                )
            )

    nodes = list(graph.nodes)
    requests = []
    for index in range(1, num_requests + 1):
        request_type = request_types[int(rng.integers(len(request_types)))]
        source, destination = (int(node) for node in rng.choice(nodes, 2, replace=False))
        room = slot_ceiling - request_type.slot_demand + 1
        starts = rng.choice(
            np.arange(1, room + 1), size=min(starts_per_request, room), replace=False
        )
        requests.append(
            Request(
                request_id=f"r{index}",
                request_type=request_type.name,
                candidate_paths=tuple(
                    k_shortest_paths(graph, source, destination, k_paths)
                ),
                candidate_starts=tuple(int(start) for start in starts),
            )
        )

    return RequestCatalog(
        topology=graph,
        request_types=request_types,
        zones=zones,
        requests=requests,
        slot_ceiling=slot_ceiling,
    )
