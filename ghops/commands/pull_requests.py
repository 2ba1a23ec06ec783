"""Pull request commands."""

import logging
from typing import Optional

from github import GithubException

from ..github.errors import InvalidArgumentError
from ..github.models import Commit, PullRequest
from .base import CommandGroup

logger = logging.getLogger(__name__)

STATES = ("open", "closed", "all")
SORTS = ("created", "updated", "popularity", "long-running")
DIRECTIONS = ("asc", "desc")
MERGE_METHODS = ("merge", "squash", "rebase")


class PullRequestCommands(CommandGroup):
    """List, open, edit and merge pull requests."""

    def _pull_request(self, data: dict, repository_url: str) -> PullRequest:
        return PullRequest.from_json(data, repository_url=repository_url, host=self.host, decorate=self.decorate)

    def list_pull_requests(
        self,
        state: str = "open",
        head: Optional[str] = None,
        base: Optional[str] = None,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> list[PullRequest]:
        """List pull requests.

        ``head`` filters by ``user:branch``; a bare branch name is qualified
        with the repository owner.
        """
        self.require_choice("state", state, STATES)
        self.require_choice("sort", sort, SORTS)
        self.require_choice("direction", direction, DIRECTIONS)
        repo = self.repository(uri, owner_name, repository_name)

        if head and ":" not in head:
            head = f"{repo.owner}:{head}"

        parameters = self.compact({
            "state": state, "head": head, "base": base, "sort": sort, "direction": direction,
        })
        items = self.client.invoke_multi(
            f"{repo.api_fragment}/pulls",
            parameters=parameters,
            description=f"Getting {state} pull requests in {repo.owner}/{repo.name}",
        )
        return [self._pull_request(item, repo.url) for item in items]

    def get_pull_request(
        self,
        number: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> PullRequest:
        """Fetch a single pull request by number."""
        repo = self.repository(uri, owner_name, repository_name)
        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}",
            description=f"Getting PR #{number} in {repo.owner}/{repo.name}",
        )
        return self._pull_request(data, repo.url)

    def new_pull_request(
        self,
        head: str,
        base: str,
        title: Optional[str] = None,
        body: Optional[str] = None,
        issue: Optional[int] = None,
        maintainer_can_modify: Optional[bool] = None,
        draft: bool = False,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> PullRequest:
        """Open a pull request, either new (``title``) or from an existing ``issue``."""
        if not head or not base:
            raise InvalidArgumentError("Both head and base branches are required")
        if (title is None) == (issue is None):
            raise InvalidArgumentError("Specify exactly one of title or issue")
        if issue is not None and body is not None:
            raise InvalidArgumentError("A body cannot be set when converting an issue")
        repo = self.repository(uri, owner_name, repository_name)

        payload = self.compact({
            "head": head,
            "base": base,
            "title": title,
            "body": body,
            "issue": issue,
            "maintainer_can_modify": maintainer_can_modify,
        })
        if draft:
            payload["draft"] = True

        try:
            data = self.client.invoke(
                f"{repo.api_fragment}/pulls",
                method="POST",
                body=payload,
                description=f"Creating pull request {head} -> {base} in {repo.owner}/{repo.name}",
            )
        except GithubException as e:
            logger.error(f"Failed to create pull request {head} -> {base}: {e}")
            raise
        return self._pull_request(data, repo.url)

    def update_pull_request(
        self,
        number: int,
        title: Optional[str] = None,
        body: Optional[str] = None,
        state: Optional[str] = None,
        base: Optional[str] = None,
        maintainer_can_modify: Optional[bool] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> PullRequest:
        """Edit a pull request. Only supplied fields change."""
        self.require_choice("state", state, ("open", "closed"))
        payload = self.compact({
            "title": title, "body": body, "state": state, "base": base,
            "maintainer_can_modify": maintainer_can_modify,
        })
        if not payload:
            raise InvalidArgumentError("Nothing to update")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}",
            method="PATCH",
            body=payload,
            description=f"Updating PR #{number} in {repo.owner}/{repo.name}",
        )
        return self._pull_request(data, repo.url)

    def list_commits(
        self,
        number: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> list[Commit]:
        """List the commits on a pull request."""
        repo = self.repository(uri, owner_name, repository_name)
        items = self.client.invoke_multi(
            f"{repo.api_fragment}/pulls/{number}/commits",
            description=f"Getting commits of PR #{number} in {repo.owner}/{repo.name}",
        )
        return [
            Commit.from_json(item, repository_url=repo.url, host=self.host, decorate=self.decorate)
            for item in items
        ]

    def is_merged(
        self,
        number: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> bool:
        """Whether the pull request has been merged.

        GitHub answers 204 when merged and 404 otherwise; any status but 204
        counts as not merged.
        """
        repo = self.repository(uri, owner_name, repository_name)
        status = self.client.invoke_status(f"{repo.api_fragment}/pulls/{number}/merge")
        logger.debug(f"Merge check for PR #{number} returned {status}")
        return status == 204

    def merge_pull_request(
        self,
        number: int,
        merge_method: str = "merge",
        commit_title: Optional[str] = None,
        commit_message: Optional[str] = None,
        sha: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> dict:
        """Merge a pull request. ``sha`` guards against merging a moved head."""
        self.require_choice("merge_method", merge_method, MERGE_METHODS)
        repo = self.repository(uri, owner_name, repository_name)

        payload = self.compact({
            "merge_method": merge_method,
            "commit_title": commit_title,
            "commit_message": commit_message,
            "sha": sha,
        })
        result = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/merge",
            method="PUT",
            body=payload,
            description=f"Merging PR #{number} in {repo.owner}/{repo.name}",
        )
        logger.info(f"Merged PR #{number}: {result.get('sha') if result else None}")
        return result
