"""Shared fixtures for CLI tests."""

import logging
from collections.abc import Iterator

import pytest

from eonac.utils import logging_config


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Detach handlers the CLI installs on the ``eonac`` logger."""
    yield
    package_logger = logging.getLogger("eonac")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    logging_config._loggers.pop("eonac", None)
