"""User commands."""

import logging
from typing import Optional, Union
from urllib.parse import quote

from github import GithubException

from ..github.errors import InvalidArgumentError
from ..github.models import User, UserContextualInformation
from .base import CommandGroup

logger = logging.getLogger(__name__)

SUBJECT_TYPES = ("organization", "repository", "issue", "pull_request")


class UserCommands(CommandGroup):
    """Look up and update GitHub users."""

    def get_user(self, user_name: Optional[str] = None, current: bool = False) -> Union[User, list[User]]:
        """Fetch one user by name, the authenticated user, or every user.

        Listing every user walks the whole site and can take a very long time.
        """
        if user_name and current:
            raise InvalidArgumentError("Specify a user name or current, not both")

        if user_name:
            data = self.client.invoke(f"users/{quote(user_name)}", description=f"Getting user {user_name}")
            return User.from_json(data, decorate=self.decorate)

        if current:
            data = self.client.invoke("user", description="Getting current authenticated user")
            return User.from_json(data, decorate=self.decorate)

        logger.warning("Listing all GitHub users, this may take a long time")
        items = self.client.invoke_multi("users", description="Getting all users")
        return [User.from_json(item, decorate=self.decorate) for item in items]

    def get_contextual_information(
        self,
        user_name: str,
        subject_type: Optional[str] = None,
        subject_id: Optional[Union[int, str]] = None,
    ) -> UserContextualInformation:
        """Fetch hovercard information, optionally about a specific subject."""
        if not user_name:
            raise InvalidArgumentError("A user name is required")
        if (subject_type is None) != (subject_id is None):
            raise InvalidArgumentError("subject_type and subject_id must be given together")
        self.require_choice("subject_type", subject_type, SUBJECT_TYPES)

        parameters = None
        if subject_type:
            parameters = {"subject_type": subject_type, "subject_id": str(subject_id)}

        data = self.client.invoke(
            f"users/{quote(user_name)}/hovercard",
            parameters=parameters,
            description=f"Getting hovercard information for {user_name}",
        )
        return UserContextualInformation.from_json(data, user_name=user_name, decorate=self.decorate)

    def update_current_user(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        blog: Optional[str] = None,
        company: Optional[str] = None,
        location: Optional[str] = None,
        bio: Optional[str] = None,
        hireable: Optional[bool] = None,
    ) -> User:
        """Update the authenticated user's profile. Only supplied fields change."""
        body = self.compact({
            "name": name, "email": email, "blog": blog, "company": company,
            "location": location, "bio": bio, "hireable": hireable,
        })
        if not body:
            raise InvalidArgumentError("Nothing to update")

        try:
            data = self.client.invoke("user", method="PATCH", body=body, description="Updating current user")
        except GithubException as e:
            logger.error(f"Failed to update current user: {e}")
            raise
        return User.from_json(data, decorate=self.decorate)
