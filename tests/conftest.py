"""Pytest configuration and fixtures for bundlex tests."""
import logging
import sys

import pytest


@pytest.fixture(autouse=True)
def _reset_bundlex_logging():
    """Undo handlers installed by CLI invocations between tests."""
    yield
    logger = logging.getLogger("bundlex")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def pytest_sessionfinish(session, exitstatus):
    """Fail a ``--cov`` run in which no test imported the bundlex package.

    pytest-cov records its sources on ``config.option.cov_source``; the option
    is absent when the plugin is not installed.
    """
    if not getattr(session.config.option, "cov_source", None):
        return
    if "bundlex" not in sys.modules:
        pytest.exit(
            "--cov was requested but no test imported bundlex; coverage would report nothing",
            returncode=1,
        )
