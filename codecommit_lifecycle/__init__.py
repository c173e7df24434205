"""codecommit-lifecycle - background lifecycle jobs for CodeCommit repositories."""

from codecommit_lifecycle.client import CodeCommitClient
from codecommit_lifecycle.clients import AwsReposClient, ReposClient, RepositoryClient
from codecommit_lifecycle.config import LifecycleConfig
from codecommit_lifecycle.confirmation import ConfirmationGate
from codecommit_lifecycle.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CodeCommitError,
    ConfigurationError,
    ConflictError,
    GitCommandError,
    InvalidRequestError,
    JobNotFoundError,
    RateLimitedError,
    RemoteError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    ServerError,
    ValidationError,
)
from codecommit_lifecycle.git import GitCloner
from codecommit_lifecycle.jobs import (
    CloneRepositoryJob,
    CreateRepositoryJob,
    DeleteRepositoryJob,
    LifecycleJob,
    OpenRepositoryJob,
)
from codecommit_lifecycle.logging import configure_logging, get_logger
from codecommit_lifecycle.notifications import (
    EventTracker,
    LoggingEventTracker,
    RefreshNotifier,
    RefreshRegistry,
)
from codecommit_lifecycle.scheduler import JobScheduler
from codecommit_lifecycle.service import RepositoryLifecycleService, available_operations
from codecommit_lifecycle.transport import HTTPTransport, RetryConfig
from codecommit_lifecycle.types import (
    JobHandle,
    JobState,
    JobStatus,
    LifecycleRequest,
    OperationKind,
    Repository,
    RepositoryReference,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Clients
    "CodeCommitClient",
    "RepositoryClient",
    "AwsReposClient",
    "ReposClient",
    "LifecycleConfig",
    # Orchestration
    "ConfirmationGate",
    "LifecycleJob",
    "CreateRepositoryJob",
    "DeleteRepositoryJob",
    "CloneRepositoryJob",
    "OpenRepositoryJob",
    "JobScheduler",
    "RepositoryLifecycleService",
    "available_operations",
    # Listeners
    "RefreshNotifier",
    "EventTracker",
    "RefreshRegistry",
    "LoggingEventTracker",
    # Git
    "GitCloner",
    # Types
    "Repository",
    "RepositoryReference",
    "OperationKind",
    "JobState",
    "JobStatus",
    "JobHandle",
    "LifecycleRequest",
    # Exceptions
    "CodeCommitError",
    "ConfigurationError",
    "ValidationError",
    "ConflictError",
    "JobNotFoundError",
    "RemoteError",
    "AuthenticationError",
    "AuthorizationError",
    "RepositoryNotFoundError",
    "RepositoryExistsError",
    "RateLimitedError",
    "InvalidRequestError",
    "ServerError",
    "GitCommandError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
