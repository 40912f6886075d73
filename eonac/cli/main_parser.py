"""Main CLI argument parser for EONAC."""

from argparse import ArgumentParser

from eonac.domain.config import LOG_LEVEL_CHOICES, PRIORITY_CHOICES
from eonac.io.instance_loader import REFERENCE_FILES
from eonac.modules.assignment.registry import DEFAULT_ALIASES, list_strategies


def build_main_argument_parser() -> ArgumentParser:
    """
    Build the ``eonac-solve`` argument parser.

    Exactly one of ``--instance`` and ``--reference`` selects the input.
    Solver options left unset fall back to the ``--config`` file, then to
    the :class:`~eonac.domain.config.SolverConfig` defaults.

    :return: Configured argument parser
    :rtype: ArgumentParser
    """
    parser = ArgumentParser(
        prog="eonac-solve",
        description="Admission control and spectrum assignment for elastic optical networks",
    )

    input_group = parser.add_argument_group("input")
    source = input_group.add_mutually_exclusive_group(required=True)
    source.add_argument("--instance", help="Path to a YAML or JSON instance file")
    source.add_argument(
        "--reference",
        choices=sorted(REFERENCE_FILES),
        help="Use a bundled reference instance",
    )
    input_group.add_argument(
        "--config", help="INI, JSON or YAML file with a [solver_settings] section"
    )

    solver_group = parser.add_argument_group("solver")
    solver_group.add_argument(
        "--strategy",
        choices=sorted(list_strategies() + list(DEFAULT_ALIASES)),
        help="Assignment strategy (default: branch_and_bound)",
    )
    solver_group.add_argument(
        "--priority", choices=PRIORITY_CHOICES, help="Request ordering"
    )
    solver_group.add_argument(
        "--time-limit",
        dest="time_limit_s",
        type=float,
        help="Wall-clock budget of the exact search in seconds",
    )
    solver_group.add_argument(
        "--max-steps", type=int, help="Node budget of the exact search"
    )
    solver_group.add_argument(
        "--workers", type=int, help="Threads for greedy candidate checks"
    )
    solver_group.add_argument(
        "--unknown-link-policy",
        choices=("reject", "error"),
        help="Treat paths over missing links as infeasible or as fatal",
    )

    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVEL_CHOICES,
        help="Logging level (default: INFO)",
    )
    output_group.add_argument(
        "--output", help="Write the full report as JSON to this path"
    )

    return parser
