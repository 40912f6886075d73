"""CLI entry point for solving one admission control instance.

Loads an instance file (or a bundled reference instance), merges solver
settings from an optional config file and the command line, runs the
assignment engine and prints a per-request summary. ``--output`` also
writes the full report as JSON.
"""

import json
import sys
import traceback
from argparse import Namespace
from pathlib import Path

from eonac.cli.constants import (
    DEFAULT_MAX_TRACEBACK_LINES,
    ERROR_EXIT_CODE,
    INTERRUPT_EXIT_CODE,
    SUCCESS_EXIT_CODE,
)
from eonac.cli.main_parser import build_main_argument_parser
from eonac.configs.config import ConfigManager
from eonac.core.engine import AssignmentEngine
from eonac.domain.catalog import RequestCatalog
from eonac.domain.config import SolverConfig
from eonac.domain.errors import AdmissionControlError
from eonac.io.instance_loader import load_catalog, load_reference_catalog
from eonac.reporting.solution_report import SolutionReport
from eonac.utils.logging_config import configure_solve_logging


def resolve_solver_config(arguments: Namespace) -> SolverConfig:
    """
    Merge the config file (if any) with command line overrides.

    :param arguments: Parsed command line arguments
    :type arguments: Namespace
    :return: Validated solver settings
    :rtype: SolverConfig
    """
    manager = ConfigManager()
    if arguments.config:
        manager.load_config(arguments.config)
    return manager.get_solver_config(
        strategy=arguments.strategy,
        priority=arguments.priority,
        time_limit_s=arguments.time_limit_s,
        max_steps=arguments.max_steps,
        workers=arguments.workers,
        unknown_link_policy=arguments.unknown_link_policy,
        log_level=arguments.log_level,
    )


def load_input_catalog(arguments: Namespace, config: SolverConfig) -> RequestCatalog:
    """Load the instance selected by ``--instance`` or ``--reference``."""
    if arguments.reference:
        return load_reference_catalog(
            arguments.reference, unknown_link_policy=config.unknown_link_policy
        )
    return load_catalog(arguments.instance, unknown_link_policy=config.unknown_link_policy)


def run_solve(arguments: Namespace) -> SolutionReport:
    """
    Run one solve described by parsed arguments.

    :param arguments: Parsed command line arguments
    :type arguments: Namespace
    :return: Report over the finished solve
    :rtype: SolutionReport
    """
    config = resolve_solver_config(arguments)
    configure_solve_logging("eonac-solve", log_level=config.log_level)

    catalog = load_input_catalog(arguments, config)
    result = AssignmentEngine(catalog, config).solve()
    report = SolutionReport(result)

    for line in report.summary_lines():
        print(line)

    if arguments.output:
        output_fp = Path(arguments.output)
        output_fp.parent.mkdir(parents=True, exist_ok=True)
        with output_fp.open("w", encoding="utf-8") as file_obj:
            json.dump(report.to_dict(), file_obj, indent=2, default=str)
        print(f"Report written to {output_fp}")

    return report


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for ``eonac-solve``.

    :param argv: Argument list, defaults to ``sys.argv[1:]``
    :type argv: list[str] | None
    :return: Exit code (0 for success, 1 for error or interruption)
    :rtype: int
    :raises SystemExit: On argument parsing errors (handled by argparse)
    """
    try:
        arguments = build_main_argument_parser().parse_args(argv)
        run_solve(arguments)
    except KeyboardInterrupt:
        print("\n🛑 Solve interrupted by user")
        return INTERRUPT_EXIT_CODE
    except AdmissionControlError as e:
        print(f"❌ Configuration error: {e}")
        print("💡 Check your instance file, config file and command line arguments")
        return ERROR_EXIT_CODE
    except KeyError as e:
        print(f"❌ Unknown name: {e}")
        return ERROR_EXIT_CODE
    except OSError as e:
        print(f"❌ File system error: {e}")
        print("💡 Check file paths and permissions")
        return ERROR_EXIT_CODE
    except (ValueError, TypeError, RuntimeError) as e:
        print(f"❌ Runtime error: {e}")
        _display_detailed_error_info(e)
        return ERROR_EXIT_CODE

    return SUCCESS_EXIT_CODE


def _display_detailed_error_info(exception: Exception) -> None:
    """Print the exception chain and the last traceback lines."""
    if exception.__cause__:
        print(f"  ↳ Caused by: {exception.__cause__}")

    print(f"  Exception type: {type(exception).__name__}")

    print("  Last few calls:")
    traceback_lines = traceback.format_tb(exception.__traceback__)
    for line in traceback_lines[-DEFAULT_MAX_TRACEBACK_LINES:]:
        print(f"    {line.strip()}")


def run_solve_main() -> None:
    """Execute :func:`main` and exit with its code."""
    sys.exit(main())


if __name__ == "__main__":
    run_solve_main()
