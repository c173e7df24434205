"""codecommit-lifecycle type definitions.

This module exports all data model types used by the package.
"""

from codecommit_lifecycle.types.jobs import (
    JobHandle,
    JobState,
    JobStatus,
    LifecycleRequest,
    OperationKind,
)
from codecommit_lifecycle.types.repos import Repository, RepositoryReference

__all__ = [
    # Repository types
    "Repository",
    "RepositoryReference",
    # Job types
    "OperationKind",
    "JobState",
    "JobStatus",
    "JobHandle",
    "LifecycleRequest",
]
