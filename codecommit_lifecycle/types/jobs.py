"""Lifecycle request and job status models."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class OperationKind(str, Enum):
    """A repository lifecycle operation."""

    CREATE = "create"
    DELETE = "delete"
    CLONE = "clone"
    OPEN = "open"


class JobState(str, Enum):
    """State of a scheduled job."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({JobState.SUCCEEDED, JobState.FAILED, JobState.CANCELED})


@dataclass(frozen=True)
class JobStatus:
    """Immutable snapshot of a job's state.

    ``reason`` is set only for FAILED, ``result`` only for SUCCEEDED.
    """

    state: JobState
    reason: str | None = None
    result: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    @classmethod
    def pending(cls) -> "JobStatus":
        return cls(JobState.PENDING)

    @classmethod
    def running(cls) -> "JobStatus":
        return cls(JobState.RUNNING)

    @classmethod
    def succeeded(cls, result: Any = None) -> "JobStatus":
        return cls(JobState.SUCCEEDED, result=result)

    @classmethod
    def failed(cls, reason: str) -> "JobStatus":
        return cls(JobState.FAILED, reason=reason)

    @classmethod
    def canceled(cls) -> "JobStatus":
        return cls(JobState.CANCELED)


@dataclass(frozen=True)
class JobHandle:
    """Opaque reference to a submitted job."""

    operation: OperationKind
    repository_name: str
    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class LifecycleRequest:
    """A caller's request for one lifecycle operation.

    Only the payload field matching ``operation`` is read: ``description``
    for CREATE, ``confirmation`` for DELETE, ``destination`` for CLONE.
    """

    operation: OperationKind
    repository_name: str
    description: str | None = None
    confirmation: str | None = None
    destination: str | Path | None = None
