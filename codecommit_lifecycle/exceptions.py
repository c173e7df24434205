"""codecommit-lifecycle exception classes."""


class CodeCommitError(Exception):
    """Base exception for all codecommit-lifecycle errors."""

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(CodeCommitError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(CodeCommitError):
    """Raised when caller input is rejected before a job is scheduled."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR") -> None:
        super().__init__(code, message)


class ConflictError(CodeCommitError):
    """Raised when a Delete for the same repository is already in flight."""

    def __init__(self, repository_name: str) -> None:
        super().__init__(
            "DELETE_IN_PROGRESS",
            f"A delete of repository {repository_name} is already in progress",
        )
        self.repository_name = repository_name


class JobNotFoundError(CodeCommitError):
    """Raised when a handle does not belong to the scheduler."""

    def __init__(self, job_id: str) -> None:
        super().__init__("JOB_NOT_FOUND", f"Unknown job: {job_id}")
        self.job_id = job_id


class RemoteError(CodeCommitError):
    """Base class for failures reported by the repository service."""

    pass


class AuthenticationError(RemoteError):
    """Raised when the service rejects the credentials."""

    pass


class AuthorizationError(RemoteError):
    """Raised when access is denied."""

    pass


class RepositoryNotFoundError(RemoteError):
    """Raised when a repository is not found."""

    pass


class RepositoryExistsError(RemoteError):
    """Raised when creating a repository whose name is already taken."""

    pass


class RateLimitedError(RemoteError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class InvalidRequestError(RemoteError):
    """Raised when the service rejects a request as malformed (other 4xx)."""

    pass


class ServerError(RemoteError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class GitCommandError(RemoteError):
    """Raised when the external git process fails or cannot be started."""

    pass


def failure_reason(error: BaseException) -> str:
    """Return the underlying message of an error, without the code prefix."""
    if isinstance(error, CodeCommitError):
        return error.message
    return str(error)
