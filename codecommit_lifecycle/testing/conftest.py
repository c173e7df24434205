"""
Pytest plugin for codecommit-lifecycle testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["codecommit_lifecycle.testing.conftest"]
"""

from codecommit_lifecycle.testing.fixtures import (
    clone_destination,
    lifecycle_config,
    lifecycle_service,
    listener,
    mock_client,
    mock_cloner,
    sample_repository,
    scheduler,
)

__all__ = [
    "mock_client",
    "mock_cloner",
    "lifecycle_config",
    "listener",
    "scheduler",
    "lifecycle_service",
    "sample_repository",
    "clone_destination",
]
