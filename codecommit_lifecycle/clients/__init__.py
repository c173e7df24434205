"""codecommit-lifecycle resource clients."""

from codecommit_lifecycle.clients.aws import AwsReposClient
from codecommit_lifecycle.clients.repos import ReposClient, RepositoryClient

__all__ = [
    "RepositoryClient",
    "AwsReposClient",
    "ReposClient",
]
