import logging

import pytest

from structval import Context


@pytest.fixture
def make_schema():
    """Compile a schema document in a fresh Context."""

    def _make(document, **kwargs):
        return Context(**kwargs).compile(document)

    return _make


@pytest.fixture
def restore_package_logging():
    """Drop the handlers installed by the CLI logging setup."""
    logger = logging.getLogger("structval")
    level = logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)
