"""
RepositoryClient backed by the AWS CodeCommit API through boto3.

Requests are signed with the standard AWS credential chain (environment,
shared config, instance role). botocore errors are translated into the
package's RemoteError family so job failure reasons read the same for
every client.
"""

from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
)

from codecommit_lifecycle.clients.repos import _parse_repository
from codecommit_lifecycle.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidRequestError,
    RateLimitedError,
    RemoteError,
    RepositoryExistsError,
    RepositoryNotFoundError,
    ServerError,
)
from codecommit_lifecycle.logging import get_logger
from codecommit_lifecycle.types.repos import Repository

if TYPE_CHECKING:
    from codecommit_lifecycle.config import LifecycleConfig

logger = get_logger("aws")

# BatchGetRepositories accepts at most 25 names per call.
BATCH_GET_LIMIT = 25

_NOT_FOUND_CODES = {"RepositoryDoesNotExistException"}
_EXISTS_CODES = {"RepositoryNameExistsException"}
_AUTHENTICATION_CODES = {
    "UnrecognizedClientException",
    "InvalidClientTokenId",
    "InvalidSignatureException",
    "ExpiredTokenException",
    "SignatureDoesNotMatch",
}
_AUTHORIZATION_CODES = {"AccessDeniedException", "AccessDenied"}
_THROTTLING_CODES = {"ThrottlingException", "TooManyRequestsException", "RequestLimitExceeded"}


def translate_client_error(error: ClientError) -> RemoteError:
    """Map a botocore ClientError onto the RemoteError family."""
    details = error.response.get("Error", {})
    metadata = error.response.get("ResponseMetadata", {})
    code = details.get("Code", "UNKNOWN_ERROR")
    message = details.get("Message") or str(error)
    request_id = metadata.get("RequestId")
    status_code = metadata.get("HTTPStatusCode", 400)

    if code in _NOT_FOUND_CODES:
        return RepositoryNotFoundError(code, message, request_id)
    if code in _EXISTS_CODES:
        return RepositoryExistsError(code, message, request_id)
    if code in _AUTHENTICATION_CODES:
        return AuthenticationError(code, message, request_id)
    if code in _AUTHORIZATION_CODES:
        return AuthorizationError(code, message, request_id)
    if code in _THROTTLING_CODES or status_code == 429:
        return RateLimitedError(code, message, 60, request_id)
    if status_code >= 500:
        return ServerError(code, message, request_id)
    return InvalidRequestError(code, message, request_id)


def translate_botocore_error(error: BotoCoreError) -> RemoteError:
    """Map client-side botocore failures (no credentials, unreachable endpoint)."""
    if isinstance(error, NoCredentialsError):
        return AuthenticationError("NO_CREDENTIALS", str(error))
    if isinstance(error, EndpointConnectionError):
        return ServerError("CONNECTION_ERROR", str(error))
    return ServerError("SDK_ERROR", str(error))


class AwsReposClient:
    """
    RepositoryClient for the AWS CodeCommit API.

    Example:
        ```python
        from codecommit_lifecycle.clients.aws import AwsReposClient

        repos = AwsReposClient.from_config(LifecycleConfig(region="eu-west-1"))
        repos.describe("demo").clone_url_http
        ```
    """

    def __init__(self, codecommit: Any) -> None:
        """
        Args:
            codecommit: A boto3 ``codecommit`` client
        """
        self.codecommit = codecommit

    @classmethod
    def from_config(cls, config: "LifecycleConfig") -> "AwsReposClient":
        """
        Build a boto3 client for ``config.region``.

        botocore's retries are off, so every operation is sent exactly once.
        """
        botocore_config = Config(
            connect_timeout=config.timeout,
            read_timeout=config.timeout,
            retries={"mode": "standard", "total_max_attempts": 1},
        )
        session = boto3.session.Session(region_name=config.region)
        return cls(session.client("codecommit", config=botocore_config))

    def create(self, name: str, description: str | None = None) -> Repository:
        """
        Raises:
            RepositoryExistsError: If the name is already taken
            InvalidRequestError: If the service rejects the name or description
        """
        params: dict[str, Any] = {"repositoryName": name}
        if description:
            params["repositoryDescription"] = description

        response = self._call("create_repository", **params)
        return _parse_repository(response.get("repositoryMetadata", {}))

    def delete(self, name: str) -> None:
        """
        Delete a repository.

        CodeCommit answers a delete of an unknown name with an empty
        ``repositoryId``; that is reported as RepositoryNotFoundError.
        """
        response = self._call("delete_repository", repositoryName=name)
        if not response.get("repositoryId"):
            raise RepositoryNotFoundError(
                "RepositoryDoesNotExistException", f"{name} does not exist"
            )

    def describe(self, name: str) -> Repository:
        """
        Raises:
            RepositoryNotFoundError: If the repository does not exist
        """
        response = self._call("get_repository", repositoryName=name)
        return _parse_repository(response.get("repositoryMetadata", {}))

    def list(self) -> list[Repository]:
        """
        List all repositories in the region with full metadata.

        ListRepositories only returns names and ids, so metadata is fetched
        with BatchGetRepositories in chunks. Listing order is preserved.
        """
        names: list[str] = []
        try:
            paginator = self.codecommit.get_paginator("list_repositories")
            for page in paginator.paginate(sortBy="repositoryName", order="ascending"):
                names.extend(r["repositoryName"] for r in page.get("repositories", []))
        except ClientError as e:
            raise translate_client_error(e) from e
        except BotoCoreError as e:
            raise translate_botocore_error(e) from e

        by_name: dict[str, Repository] = {}
        for start in range(0, len(names), BATCH_GET_LIMIT):
            chunk = names[start:start + BATCH_GET_LIMIT]
            response = self._call("batch_get_repositories", repositoryNames=chunk)
            for metadata in response.get("repositories", []):
                repo = _parse_repository(metadata)
                by_name[repo.name] = repo

        # Repositories deleted between the two calls are skipped.
        return [by_name[name] for name in names if name in by_name]

    def close(self) -> None:
        self.codecommit.close()

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        logger.debug("codecommit.%s %s", operation, params)
        try:
            return getattr(self.codecommit, operation)(**params)
        except ClientError as e:
            raise translate_client_error(e) from e
        except BotoCoreError as e:
            raise translate_botocore_error(e) from e
