"""Domain model: static problem data, solver settings and solve outcomes."""

from eonac.domain.assignment import Assignment, SearchStats, SolveResult
from eonac.domain.catalog import (
    Link,
    Path,
    Request,
    RequestCatalog,
    RequestType,
    SlotRange,
    Zone,
)
from eonac.domain.config import SolverConfig

__all__ = [
    "Assignment",
    "Link",
    "Path",
    "Request",
    "RequestCatalog",
    "RequestType",
    "SearchStats",
    "SlotRange",
    "SolveResult",
    "SolverConfig",
    "Zone",
]
