"""Repository-related data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Repository:
    """Repository metadata as reported by the repository service."""

    name: str
    repository_id: str | None = None
    description: str | None = None
    arn: str | None = None
    account_id: str | None = None
    default_branch: str | None = None
    clone_url_http: str | None = None
    clone_url_ssh: str | None = None
    created_at: datetime | None = None
    last_modified_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name


@dataclass
class RepositoryReference:
    """Everything a presentation layer needs to render an opened repository."""

    repository: Repository
    endpoint: str
    region: str
    account_id: str | None
    console_url: str
