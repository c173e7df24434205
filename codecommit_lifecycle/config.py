"""
Explicit configuration for the repository service and git collaborator.

The region, endpoint and account are passed into the client and jobs
rather than read from process-wide state.
"""

import os
import re
from dataclasses import dataclass, field

from codecommit_lifecycle.exceptions import ConfigurationError
from codecommit_lifecycle.transport import RetryConfig

DEFAULT_REGION = "us-east-1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_WORKERS = 4

SERVICE_ENDPOINT_TEMPLATE = "https://codecommit.{region}.amazonaws.com"
CLONE_URL_TEMPLATES = {
    "https": "https://git-codecommit.{region}.amazonaws.com/v1/repos/{name}",
    "ssh": "ssh://git-codecommit.{region}.amazonaws.com/v1/repos/{name}",
}
CONSOLE_URL_TEMPLATE = (
    "https://{region}.console.aws.amazon.com/codesuite/codecommit/"
    "repositories/{name}/browse?region={region}"
)

_REGION_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d$")


@dataclass
class LifecycleConfig:
    """Connection and scheduling settings.

    Example:
        ```python
        config = LifecycleConfig(region="eu-west-1", token="...")
        config.clone_url("demo")
        # 'https://git-codecommit.eu-west-1.amazonaws.com/v1/repos/demo'
        ```
    """

    region: str = DEFAULT_REGION
    endpoint: str | None = None
    account_id: str | None = None
    token: str | None = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    retry_config: RetryConfig | None = None
    clone_protocol: str = "https"
    credential_helper: str | None = None
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        if not _REGION_PATTERN.match(self.region):
            raise ConfigurationError(f"Invalid region: {self.region!r}")
        if self.clone_protocol not in CLONE_URL_TEMPLATES:
            raise ConfigurationError(
                f"Invalid clone protocol: {self.clone_protocol}. "
                f"Must be one of {sorted(CLONE_URL_TEMPLATES)}"
            )
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be at least 1")

    @property
    def service_endpoint(self) -> str:
        """The configured endpoint, or the regional default."""
        if self.endpoint:
            return self.endpoint.rstrip("/")
        return SERVICE_ENDPOINT_TEMPLATE.format(region=self.region)

    def clone_url(self, name: str, protocol: str | None = None) -> str:
        """
        Build the regional git URL of a repository.

        Raises:
            ConfigurationError: If the protocol is not https or ssh
        """
        protocol = protocol or self.clone_protocol
        try:
            template = CLONE_URL_TEMPLATES[protocol]
        except KeyError:
            raise ConfigurationError(f"Invalid clone protocol: {protocol}") from None
        return template.format(region=self.region, name=name)

    def console_url(self, name: str) -> str:
        return CONSOLE_URL_TEMPLATE.format(region=self.region, name=name)

    @classmethod
    def from_env(cls) -> "LifecycleConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            CODECOMMIT_REGION: Region (falls back to AWS_REGION, AWS_DEFAULT_REGION)
            CODECOMMIT_ENDPOINT: REST gateway endpoint (unset: AWS CodeCommit API via boto3)
            CODECOMMIT_TOKEN: Bearer token for the REST gateway
            AWS_ACCOUNT_ID: Account id reported when opening repositories
            CODECOMMIT_CLONE_PROTOCOL: "https" or "ssh" (default: https)
            CODECOMMIT_CREDENTIAL_HELPER: git credential helper used for clones
            CODECOMMIT_MAX_WORKERS: Worker threads for the scheduler (default: 4)

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        region = (
            os.environ.get("CODECOMMIT_REGION")
            or os.environ.get("AWS_REGION")
            or os.environ.get("AWS_DEFAULT_REGION")
            or DEFAULT_REGION
        )

        max_workers_str = os.environ.get("CODECOMMIT_MAX_WORKERS")
        max_workers = DEFAULT_MAX_WORKERS
        if max_workers_str:
            try:
                max_workers = int(max_workers_str)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid CODECOMMIT_MAX_WORKERS: {max_workers_str}"
                ) from None

        return cls(
            region=region,
            endpoint=os.environ.get("CODECOMMIT_ENDPOINT") or None,
            account_id=os.environ.get("AWS_ACCOUNT_ID") or None,
            token=os.environ.get("CODECOMMIT_TOKEN") or None,
            clone_protocol=os.environ.get("CODECOMMIT_CLONE_PROTOCOL", "https").lower(),
            credential_helper=os.environ.get("CODECOMMIT_CREDENTIAL_HELPER") or None,
            max_workers=max_workers,
        )
