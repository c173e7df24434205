"""
Lifecycle jobs: one unit of work per repository operation.

A job only does the work; its status record, cancellation bookkeeping and
notifications belong to JobScheduler. Input that can be checked up front
is checked in the constructor, so an invalid job never reaches the
scheduler.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from codecommit_lifecycle.confirmation import (
    require_confirmation,
    require_description,
    require_repository_name,
)
from codecommit_lifecycle.exceptions import ValidationError
from codecommit_lifecycle.types.jobs import OperationKind
from codecommit_lifecycle.types.repos import Repository, RepositoryReference

if TYPE_CHECKING:
    from codecommit_lifecycle.clients.repos import RepositoryClient
    from codecommit_lifecycle.config import LifecycleConfig
    from codecommit_lifecycle.git import GitCloner

_CLONE_URL_SCHEMES = ("https://", "ssh://")


class LifecycleJob(ABC):
    """Base class for cancellable repository operations."""

    operation: OperationKind

    def __init__(self, client: "RepositoryClient", repository_name: str) -> None:
        self.client = client
        self.repository_name = repository_name
        self._cancel_event = threading.Event()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Request cooperative cancellation. In-flight remote calls are not interrupted."""
        self._cancel_event.set()

    @abstractmethod
    def run(self) -> Any:
        """Perform the operation. Raises on failure."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.repository_name!r})"


class CreateRepositoryJob(LifecycleJob):
    operation = OperationKind.CREATE

    def __init__(
        self,
        client: "RepositoryClient",
        name: str,
        description: str | None = None,
    ) -> None:
        require_repository_name(name)
        require_description(description)
        super().__init__(client, name)
        self.description = description

    def run(self) -> Repository:
        return self.client.create(self.repository_name, self.description)


class DeleteRepositoryJob(LifecycleJob):
    """
    Deletes a repository.

    Cannot be constructed unless ``confirmation`` is exactly the
    repository name.
    """

    operation = OperationKind.DELETE

    def __init__(self, client: "RepositoryClient", name: str, confirmation: str | None) -> None:
        require_repository_name(name)
        require_confirmation(name, confirmation)
        super().__init__(client, name)

    def run(self) -> None:
        self.client.delete(self.repository_name)


class CloneRepositoryJob(LifecycleJob):
    """
    Clones a repository into a local directory.

    The URL comes from the repository metadata for the configured protocol,
    falling back to the regional URL template. Destination and URL problems
    fail the job before git runs.
    """

    operation = OperationKind.CLONE

    def __init__(
        self,
        client: "RepositoryClient",
        name: str,
        destination: str | Path | None,
        cloner: "GitCloner",
        config: "LifecycleConfig",
        depth: int | None = None,
        branch: str | None = None,
    ) -> None:
        require_repository_name(name)
        if destination is None or str(destination) == "":
            raise ValidationError("Clone destination is required", code="DESTINATION_REQUIRED")
        super().__init__(client, name)
        self.destination = destination
        self.cloner = cloner
        self.config = config
        self.depth = depth
        self.branch = branch

    def resolve_destination(self) -> Path:
        """
        Raises:
            ValidationError: If the destination is a file, a non-empty
                directory, or its parent does not exist
        """
        path = Path(self.destination).expanduser()
        if path.is_file():
            raise ValidationError(f"Clone destination is a file: {path}", code="INVALID_DESTINATION")
        if path.is_dir() and any(path.iterdir()):
            raise ValidationError(
                f"Clone destination is not empty: {path}", code="INVALID_DESTINATION"
            )
        if not path.parent.is_dir():
            raise ValidationError(
                f"Parent directory does not exist: {path.parent}", code="INVALID_DESTINATION"
            )
        return path

    def resolve_clone_url(self) -> str:
        """
        Raises:
            RemoteError: If the repository cannot be described
            ValidationError: If the URL uses an unsupported scheme
        """
        repository = self.client.describe(self.repository_name)
        protocol = self.config.clone_protocol
        url = repository.clone_url_http if protocol == "https" else repository.clone_url_ssh
        if not url:
            url = self.config.clone_url(self.repository_name, protocol)
        if not url.startswith(_CLONE_URL_SCHEMES):
            raise ValidationError(f"Unsupported clone URL: {url}", code="INVALID_CLONE_URL")
        return url

    def run(self) -> Path | None:
        destination = self.resolve_destination()
        url = self.resolve_clone_url()
        if self.cancel_requested:
            return None
        return self.cloner.clone(url, destination, depth=self.depth, branch=self.branch)


class OpenRepositoryJob(LifecycleJob):
    """Resolves repository metadata and endpoint for a presentation layer. Read-only."""

    operation = OperationKind.OPEN

    def __init__(self, client: "RepositoryClient", name: str, config: "LifecycleConfig") -> None:
        require_repository_name(name)
        super().__init__(client, name)
        self.config = config

    def run(self) -> RepositoryReference:
        repository = self.client.describe(self.repository_name)
        return RepositoryReference(
            repository=repository,
            endpoint=self.config.service_endpoint,
            region=self.config.region,
            account_id=repository.account_id or self.config.account_id,
            console_url=self.config.console_url(self.repository_name),
        )
