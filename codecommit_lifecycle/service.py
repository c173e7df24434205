"""
Caller-facing entry points for repository lifecycle operations.

Each method validates its input, builds the matching job and submits it.
Validation errors are raised here, before anything is scheduled.
"""

from collections.abc import Sequence
from pathlib import Path

from codecommit_lifecycle.clients.repos import RepositoryClient
from codecommit_lifecycle.config import LifecycleConfig
from codecommit_lifecycle.exceptions import ValidationError
from codecommit_lifecycle.git import GitCloner
from codecommit_lifecycle.jobs import (
    CloneRepositoryJob,
    CreateRepositoryJob,
    DeleteRepositoryJob,
    OpenRepositoryJob,
)
from codecommit_lifecycle.logging import get_logger
from codecommit_lifecycle.scheduler import JobCallback, JobScheduler
from codecommit_lifecycle.types.jobs import JobHandle, LifecycleRequest, OperationKind
from codecommit_lifecycle.types.repos import Repository

logger = get_logger()


def available_operations(
    root_selected: bool, repository_names: Sequence[str]
) -> list[OperationKind]:
    """
    Operations offered for a selection in a repository explorer.

    The root node alone offers Create; exactly one repository (without the
    root) offers Clone, Open and Delete; any other selection offers nothing.
    """
    if root_selected and not repository_names:
        return [OperationKind.CREATE]
    if not root_selected and len(repository_names) == 1:
        return [OperationKind.CLONE, OperationKind.OPEN, OperationKind.DELETE]
    return []


class RepositoryLifecycleService:
    """
    Validates lifecycle requests and schedules them.

    Example:
        ```python
        config = LifecycleConfig.from_env()
        client = CodeCommitClient(config)
        scheduler = JobScheduler(refresh_notifier=registry, max_workers=config.max_workers)
        service = RepositoryLifecycleService(client.repos, scheduler, config)

        handle = service.delete_repository("demo", confirmation=typed_text)
        ```
    """

    def __init__(
        self,
        client: RepositoryClient,
        scheduler: JobScheduler,
        config: LifecycleConfig | None = None,
        cloner: GitCloner | None = None,
    ) -> None:
        self.client = client
        self.scheduler = scheduler
        self.config = config or LifecycleConfig()
        self.cloner = cloner or GitCloner(credential_helper=self.config.credential_helper)

    def create_repository(
        self,
        name: str,
        description: str | None = None,
        callback: JobCallback | None = None,
    ) -> JobHandle:
        """
        Raises:
            ValidationError: If the name is empty or too long, or the
                description is too long
        """
        job = CreateRepositoryJob(self.client, name, description)
        return self.scheduler.submit(job, callback)

    def delete_repository(
        self,
        name: str,
        confirmation: str | None,
        callback: JobCallback | None = None,
    ) -> JobHandle:
        """
        Raises:
            ValidationError: If ``confirmation`` is not exactly ``name``
            ConflictError: If a delete of ``name`` is already in flight
        """
        job = DeleteRepositoryJob(self.client, name, confirmation)
        return self.scheduler.submit(job, callback)

    def clone_repository(
        self,
        name: str,
        destination: str | Path,
        callback: JobCallback | None = None,
        depth: int | None = None,
        branch: str | None = None,
    ) -> JobHandle:
        job = CloneRepositoryJob(
            self.client,
            name,
            destination,
            self.cloner,
            self.config,
            depth=depth,
            branch=branch,
        )
        return self.scheduler.submit(job, callback)

    def open_repository(self, name: str, callback: JobCallback | None = None) -> JobHandle:
        job = OpenRepositoryJob(self.client, name, self.config)
        return self.scheduler.submit(job, callback)

    def submit(self, request: LifecycleRequest, callback: JobCallback | None = None) -> JobHandle:
        """Dispatch a LifecycleRequest to the matching operation."""
        if request.operation is OperationKind.CREATE:
            return self.create_repository(request.repository_name, request.description, callback)
        if request.operation is OperationKind.DELETE:
            return self.delete_repository(request.repository_name, request.confirmation, callback)
        if request.operation is OperationKind.CLONE:
            if request.destination is None:
                raise ValidationError("Clone destination is required", code="DESTINATION_REQUIRED")
            return self.clone_repository(request.repository_name, request.destination, callback)
        if request.operation is OperationKind.OPEN:
            return self.open_repository(request.repository_name, callback)
        raise ValidationError(f"Unsupported operation: {request.operation!r}")

    def list_repositories(self) -> list[Repository]:
        """Synchronous listing for a repository tree; errors propagate."""
        return self.client.list()

    def dismiss(self, operation: OperationKind) -> None:
        """Record that the user backed out of an operation before confirming it."""
        logger.debug("%s dismissed by user", operation.value)
        self.scheduler.record_dismissed(operation)
