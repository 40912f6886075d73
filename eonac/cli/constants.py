"""CLI-specific constants for EONAC command-line interfaces.

Provides exit codes and display settings shared by the CLI entry points.
"""

# Standard CLI exit codes following Unix conventions
SUCCESS_EXIT_CODE: int = 0
"""Exit code indicating successful program completion."""

ERROR_EXIT_CODE: int = 1
"""Exit code indicating program failure or error condition."""

INTERRUPT_EXIT_CODE: int = 1
"""Exit code indicating program interruption by user (Ctrl+C)."""

# Debugging and display settings
DEFAULT_MAX_TRACEBACK_LINES: int = 3
"""Default number of traceback lines to display in error messages."""
