"""Review request commands."""

import logging
from typing import Optional, Sequence

from ..github.errors import InvalidArgumentError
from ..github.models import PullRequest, ReviewRequest
from .base import CommandGroup

logger = logging.getLogger(__name__)


class ReviewRequestCommands(CommandGroup):
    """Ask users and teams to review a pull request, or withdraw the ask."""

    @staticmethod
    def _reviewers_body(user_names: Sequence[str], team_names: Sequence[str]) -> dict:
        user_names = [u for u in user_names or () if u]
        team_names = [t for t in team_names or () if t]
        if not user_names and not team_names:
            raise InvalidArgumentError("At least one user or team is required")
        return {"reviewers": user_names, "team_reviewers": team_names}

    def get_review_requests(
        self,
        number: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> ReviewRequest:
        repo = self.repository(uri, owner_name, repository_name)
        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/requested_reviewers",
            description=f"Getting review requests of PR #{number} in {repo.owner}/{repo.name}",
        )
        return ReviewRequest.from_json(
            data, pull_request_number=number, repository_url=repo.url, decorate=self.decorate,
        )

    def new_review_request(
        self,
        number: int,
        user_names: Sequence[str] = (),
        team_names: Sequence[str] = (),
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> PullRequest:
        body = self._reviewers_body(user_names, team_names)
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/requested_reviewers",
            method="POST",
            body=body,
            description=f"Requesting reviews on PR #{number}",
        )
        logger.info(
            f"Requested review on PR #{number} from {len(body['reviewers'])} users "
            f"and {len(body['team_reviewers'])} teams"
        )
        return PullRequest.from_json(data, repository_url=repo.url, host=self.host, decorate=self.decorate)

    def remove_review_request(
        self,
        number: int,
        user_names: Sequence[str] = (),
        team_names: Sequence[str] = (),
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> PullRequest:
        body = self._reviewers_body(user_names, team_names)
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/requested_reviewers",
            method="DELETE",
            body=body,
            description=f"Removing review requests on PR #{number}",
        )
        return PullRequest.from_json(data, repository_url=repo.url, host=self.host, decorate=self.decorate)
