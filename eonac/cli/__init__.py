"""
eonac.cli: Command-line interface entry points and argument parsing.

Entry Points:
- run_solve.py: Solve one instance and print or export the report

Core Modules:
- main_parser.py: Argument parser construction
- constants.py: Shared CLI constants including exit codes
"""

from .constants import ERROR_EXIT_CODE, INTERRUPT_EXIT_CODE, SUCCESS_EXIT_CODE
from .main_parser import build_main_argument_parser

__all__ = [
    "build_main_argument_parser",
    # CLI constants
    "SUCCESS_EXIT_CODE",
    "ERROR_EXIT_CODE",
    "INTERRUPT_EXIT_CODE",
]
