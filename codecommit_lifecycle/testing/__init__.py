"""codecommit-lifecycle testing utilities.

Provides mock clients, recording listeners and fixtures for testing
applications that use codecommit-lifecycle.
"""

from codecommit_lifecycle.testing.mock import (
    MockCall,
    MockCodeCommitClient,
    MockGitCloner,
    MockResponse,
    RecordingListener,
    create_mock_repository,
    not_found,
)

__all__ = [
    # Mock client
    "MockCodeCommitClient",
    "MockCall",
    "MockResponse",
    "MockGitCloner",
    "RecordingListener",
    # Helper functions
    "create_mock_repository",
    "not_found",
]
