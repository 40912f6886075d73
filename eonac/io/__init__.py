"""Data I/O module for EONAC.

This module provides functionality for:
- Instance loading and saving (instance_loader.py)
- Random instance generation (generate.py)
"""

from .generate import create_ring_topology, generate_random_catalog, k_shortest_paths
from .instance_loader import (
    REFERENCE_FILES,
    load_catalog,
    load_instance_data,
    load_reference_catalog,
    save_catalog,
)

__all__ = [
    "REFERENCE_FILES",
    "create_ring_topology",
    "generate_random_catalog",
    "k_shortest_paths",
    "load_catalog",
    "load_instance_data",
    "load_reference_catalog",
    "save_catalog",
]
