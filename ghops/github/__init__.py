"""GitHub API integration."""

from .client import RestClient
from .errors import GitHubCommandError, InvalidArgumentError, InvalidFormatError
from .models import Branch, Commit, PullRequest, Reference, Review, ReviewRequest, Team, User
from .references import RefType, resolve_reference
from .uri import join_repository_uri, resolve_repository, split_repository_uri

__all__ = [
    "RestClient",
    "GitHubCommandError",
    "InvalidArgumentError",
    "InvalidFormatError",
    "Branch",
    "Commit",
    "PullRequest",
    "Reference",
    "Review",
    "ReviewRequest",
    "Team",
    "User",
    "RefType",
    "resolve_reference",
    "join_repository_uri",
    "resolve_repository",
    "split_repository_uri",
]
