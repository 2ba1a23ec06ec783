"""Command groups over the GitHub REST API."""

from typing import Optional

from ..config import Configuration, load_configuration
from ..github.client import RestClient
from .meta import MetaCommands
from .pull_requests import PullRequestCommands
from .references import ReferenceCommands
from .review_requests import ReviewRequestCommands
from .reviews import ReviewCommands
from .users import UserCommands


class GitHubCommands:
    """Entry point bundling every command group over one REST client."""

    def __init__(self, config: Optional[Configuration] = None, client: Optional[RestClient] = None):
        if config is None:
            config = client.config if client is not None else load_configuration()
        self.config = config
        self.client = client or RestClient(config)

        self.users = UserCommands(self.client, config)
        self.references = ReferenceCommands(self.client, config)
        self.pull_requests = PullRequestCommands(self.client, config)
        self.reviews = ReviewCommands(self.client, config)
        self.review_requests = ReviewRequestCommands(self.client, config)
        self.meta = MetaCommands(self.client, config)


__all__ = [
    "GitHubCommands",
    "UserCommands",
    "ReferenceCommands",
    "PullRequestCommands",
    "ReviewCommands",
    "ReviewRequestCommands",
    "MetaCommands",
]
