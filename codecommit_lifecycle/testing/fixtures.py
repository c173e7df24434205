"""
Pytest fixtures for testing code built on codecommit-lifecycle.
"""

from pathlib import Path
from typing import Generator

import pytest

from codecommit_lifecycle.config import LifecycleConfig
from codecommit_lifecycle.scheduler import JobScheduler
from codecommit_lifecycle.service import RepositoryLifecycleService
from codecommit_lifecycle.testing.mock import (
    MockCodeCommitClient,
    MockGitCloner,
    RecordingListener,
    create_mock_repository,
)
from codecommit_lifecycle.types.repos import Repository


# ============================================================================
# Mock Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Generator[MockCodeCommitClient, None, None]:
    """
    Provide a MockCodeCommitClient for testing.

    Example:
        ```python
        def test_my_feature(mock_client):
            mock_client.repos.configure_create(response=my_repo)
            result = my_function(mock_client.repos)
            assert mock_client.was_called("repos.create")
        ```
    """
    client = MockCodeCommitClient()
    yield client
    client.reset()


@pytest.fixture
def mock_cloner() -> MockGitCloner:
    return MockGitCloner()


@pytest.fixture
def lifecycle_config() -> LifecycleConfig:
    """A config pinned to us-west-2 with a fake account."""
    return LifecycleConfig(region="us-west-2", account_id="111122223333", token="test-token")


# ============================================================================
# Scheduler Fixtures
# ============================================================================


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def scheduler(listener: RecordingListener) -> Generator[JobScheduler, None, None]:
    """A scheduler reporting to ``listener``; shut down after the test."""
    sched = JobScheduler(refresh_notifier=listener, event_tracker=listener, max_workers=4)
    yield sched
    sched.shutdown(wait=True, cancel_pending=True)


@pytest.fixture
def lifecycle_service(
    mock_client: MockCodeCommitClient,
    scheduler: JobScheduler,
    lifecycle_config: LifecycleConfig,
    mock_cloner: MockGitCloner,
) -> RepositoryLifecycleService:
    return RepositoryLifecycleService(
        mock_client.repos, scheduler, lifecycle_config, cloner=mock_cloner
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> Repository:
    """Provide a sample Repository object."""
    return create_mock_repository(name="sample-repo", description="A sample repository")


@pytest.fixture
def clone_destination(tmp_path: Path) -> Path:
    """A destination path that does not exist yet, inside an existing directory."""
    return tmp_path / "checkout"
