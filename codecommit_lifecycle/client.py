"""
Main repository service client.

Provides the primary interface for talking to the repository service.
"""

from typing import Any

from codecommit_lifecycle.clients import AwsReposClient, ReposClient, RepositoryClient
from codecommit_lifecycle.config import LifecycleConfig
from codecommit_lifecycle.transport import HTTPTransport


class CodeCommitClient:
    """
    Main client for the repository service.

    Without an ``endpoint`` in the config, ``repos`` talks to the AWS
    CodeCommit API through boto3. With an endpoint, it talks to a REST
    gateway at that address through HTTPTransport.

    Example:
        ```python
        from codecommit_lifecycle import CodeCommitClient, LifecycleConfig

        with CodeCommitClient(LifecycleConfig(region="eu-west-1")) as client:
            for repo in client.repos.list():
                print(repo.name)
        ```
    """

    def __init__(self, config: LifecycleConfig | None = None) -> None:
        """
        Initialize the client.

        Args:
            config: Connection settings (default: LifecycleConfig())
        """
        self.config = config or LifecycleConfig()
        self._transport: HTTPTransport | None = None

        self.repos: RepositoryClient
        if self.config.endpoint:
            self._transport = HTTPTransport(
                base_url=self.config.service_endpoint,
                region=self.config.region,
                token=self.config.token,
                timeout=self.config.timeout,
                retry_config=self.config.retry_config,
            )
            self.repos = ReposClient(self._transport)
        else:
            self.repos = AwsReposClient.from_config(self.config)

    @classmethod
    def from_env(cls) -> "CodeCommitClient":
        """
        Create a client from environment variables.

        See LifecycleConfig.from_env for the variables read. AWS credentials
        come from the standard boto3 credential chain.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        return cls(LifecycleConfig.from_env())

    @property
    def transport(self) -> HTTPTransport | None:
        """The HTTP transport of a gateway client; None when talking to AWS directly."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        if self._transport is not None:
            self._transport.close()
        elif isinstance(self.repos, AwsReposClient):
            self.repos.close()

    def __enter__(self) -> "CodeCommitClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
