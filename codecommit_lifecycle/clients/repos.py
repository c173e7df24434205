"""Repositories resource client."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from urllib.parse import quote

from codecommit_lifecycle.types.repos import Repository

if TYPE_CHECKING:
    from codecommit_lifecycle.transport import HTTPTransport


@runtime_checkable
class RepositoryClient(Protocol):
    """Contract of the remote repository service used by lifecycle jobs."""

    def create(self, name: str, description: str | None = None) -> Repository: ...

    def delete(self, name: str) -> None: ...

    def describe(self, name: str) -> Repository: ...

    def list(self) -> list[Repository]: ...


def _get(data: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    """Get value from dict, trying camelCase first then snake_case."""
    return data.get(camel) if camel in data else data.get(snake, default)


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse datetimes, ISO-8601 strings or epoch seconds into aware UTC-based datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    # Offset-less values are taken as UTC so every timestamp compares.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_repository(data: dict[str, Any]) -> Repository:
    """Parse repository metadata handling both camelCase and snake_case."""
    return Repository(
        name=_get(data, "repositoryName", "name"),
        repository_id=_get(data, "repositoryId", "repository_id"),
        description=_get(data, "repositoryDescription", "description"),
        arn=_get(data, "Arn", "arn"),
        account_id=_get(data, "accountId", "account_id"),
        default_branch=_get(data, "defaultBranch", "default_branch"),
        clone_url_http=_get(data, "cloneUrlHttp", "clone_url_http"),
        clone_url_ssh=_get(data, "cloneUrlSsh", "clone_url_ssh"),
        created_at=_parse_timestamp(_get(data, "creationDate", "created_at")),
        last_modified_at=_parse_timestamp(_get(data, "lastModifiedDate", "last_modified_at")),
    )


class ReposClient:
    """RepositoryClient for a REST gateway in front of the service, over HTTPTransport."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the repos client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def create(self, name: str, description: str | None = None) -> Repository:
        """
        Create a new repository.

        Args:
            name: Repository name
            description: Optional repository description

        Returns:
            Repository with its id and clone URLs

        Raises:
            RepositoryExistsError: If the name is already taken
            InvalidRequestError: If the service rejects the name or description
        """
        body: dict[str, Any] = {"repositoryName": name}
        if description:
            body["repositoryDescription"] = description

        response = self.transport.request(
            method="POST",
            path="/v1/repositories",
            body=body,
        )

        data = response.get("data", {})
        return _parse_repository(data)

    def delete(self, name: str) -> None:
        """
        Delete a repository.

        Raises:
            RepositoryNotFoundError: If the repository does not exist
        """
        self.transport.request(
            method="DELETE",
            path=f"/v1/repositories/{quote(name, safe='')}",
        )

    def describe(self, name: str) -> Repository:
        """
        Get repository metadata.

        Raises:
            RepositoryNotFoundError: If the repository does not exist
        """
        response = self.transport.request(
            method="GET",
            path=f"/v1/repositories/{quote(name, safe='')}",
        )

        data = response.get("data", {})
        return _parse_repository(data)

    def list(self) -> list[Repository]:
        """
        List all repositories in the configured account and region.

        Follows ``nextToken`` until the listing is exhausted.
        """
        repositories: list[Repository] = []
        params: dict[str, Any] = {}

        while True:
            response = self.transport.request(
                method="GET",
                path="/v1/repositories",
                params=params or None,
            )

            data = response.get("data", {})
            repositories.extend(_parse_repository(repo) for repo in data.get("repositories", []))

            next_token = _get(data, "nextToken", "next_token")
            if not next_token:
                return repositories
            params = {"nextToken": next_token}
