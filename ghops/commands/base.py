"""Shared plumbing for command groups."""

import logging
from typing import Optional

from ..config import Configuration
from ..github.client import RestClient
from ..github.errors import InvalidArgumentError
from ..github.uri import RepositoryCoordinates, resolve_repository

logger = logging.getLogger(__name__)


class CommandGroup:
    """Base for a family of commands sharing one REST client."""

    def __init__(self, client: RestClient, config: Optional[Configuration] = None):
        self.client = client
        self.config = config or client.config

    @property
    def decorate(self) -> bool:
        return self.config.decorate_results

    @property
    def host(self) -> str:
        return self.config.web_host

    def repository(
        self,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> RepositoryCoordinates:
        return resolve_repository(uri, owner_name, repository_name, self.config)

    @staticmethod
    def require_choice(name: str, value: Optional[str], choices) -> Optional[str]:
        if value is None:
            return None
        if value not in choices:
            raise InvalidArgumentError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
        return value

    @staticmethod
    def compact(values: dict) -> dict:
        """Drop unset parameters so they are not sent to GitHub."""
        return {k: v for k, v in values.items() if v is not None}
