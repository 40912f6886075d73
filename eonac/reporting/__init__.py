"""
Reporting module for EONAC solve output.

This module provides read-only views over finished solves, separating
presentation concerns from the search itself.
"""

from eonac.reporting.solution_report import LinkUsage, SolutionReport, ZoneLinkUsage

__all__ = [
    "LinkUsage",
    "SolutionReport",
    "ZoneLinkUsage",
]
