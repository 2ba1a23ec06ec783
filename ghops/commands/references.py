"""Reference (branch and tag) commands."""

import logging
from typing import Optional, Union
from urllib.parse import quote

from github import GithubException

from ..github.errors import InvalidArgumentError
from ..github.models import Branch, Reference
from ..github.references import resolve_reference
from ..github.uri import RepositoryCoordinates
from .base import CommandGroup

logger = logging.getLogger(__name__)


class ReferenceCommands(CommandGroup):
    """Create, read, move and delete git refs, plus the branches endpoints."""

    def _reference(self, data: dict, repo: RepositoryCoordinates) -> Reference:
        return Reference.from_json(data, repository_url=repo.url, host=self.host, decorate=self.decorate)

    def _branch(self, data: dict, repo: RepositoryCoordinates) -> Branch:
        return Branch.from_json(data, repository_url=repo.url, host=self.host, decorate=self.decorate)

    @staticmethod
    def _single_reference(tag_name: Optional[str], branch_name: Optional[str]) -> str:
        ref = resolve_reference(tag_name, branch_name)
        if not (tag_name or branch_name):
            raise InvalidArgumentError("Specify a tag or a branch")
        return ref

    def get_reference(
        self,
        tag_name: Optional[str] = None,
        branch_name: Optional[str] = None,
        match_prefix: bool = False,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Union[Reference, list[Reference]]:
        """Fetch one ref, the refs matching a prefix, or every ref.

        With neither a tag nor a branch every ref in the repository is listed.
        """
        ref = resolve_reference(tag_name, branch_name)
        repo = self.repository(uri, owner_name, repository_name)

        if not (tag_name or branch_name):
            items = self.client.invoke_multi(
                f"{repo.api_fragment}/git/matching-refs/",
                description=f"Getting all references in {repo.owner}/{repo.name}",
            )
            return [self._reference(item, repo) for item in items]

        if match_prefix:
            items = self.client.invoke_multi(
                f"{repo.api_fragment}/git/matching-refs/{quote(ref)}",
                description=f"Getting references matching {ref} in {repo.owner}/{repo.name}",
            )
            return [self._reference(item, repo) for item in items]

        data = self.client.invoke(
            f"{repo.api_fragment}/git/ref/{quote(ref)}",
            description=f"Getting reference {ref} in {repo.owner}/{repo.name}",
        )
        return self._reference(data, repo)

    def new_reference(
        self,
        sha: str,
        tag_name: Optional[str] = None,
        branch_name: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Reference:
        """Create a branch or tag pointing at ``sha``."""
        ref = self._single_reference(tag_name, branch_name)
        if not sha:
            raise InvalidArgumentError("A SHA is required to create a reference")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/git/refs",
            method="POST",
            body={"ref": f"refs/{ref}", "sha": sha},
            description=f"Creating reference {ref} in {repo.owner}/{repo.name}",
        )
        return self._reference(data, repo)

    def set_reference(
        self,
        sha: str,
        tag_name: Optional[str] = None,
        branch_name: Optional[str] = None,
        force: bool = False,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Reference:
        """Move a ref to ``sha``. Without ``force`` the update must be a fast-forward."""
        ref = self._single_reference(tag_name, branch_name)
        if not sha:
            raise InvalidArgumentError("A SHA is required to update a reference")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/git/refs/{quote(ref)}",
            method="PATCH",
            body={"sha": sha, "force": force},
            description=f"Updating reference {ref} in {repo.owner}/{repo.name}",
        )
        return self._reference(data, repo)

    def remove_reference(
        self,
        tag_name: Optional[str] = None,
        branch_name: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> None:
        """Delete a branch or tag ref."""
        ref = self._single_reference(tag_name, branch_name)
        repo = self.repository(uri, owner_name, repository_name)

        self.client.invoke(
            f"{repo.api_fragment}/git/refs/{quote(ref)}",
            method="DELETE",
            description=f"Deleting reference {ref} in {repo.owner}/{repo.name}",
        )

    def list_branches(
        self,
        protected: Optional[bool] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> list[Branch]:
        """List branches, optionally only protected (or unprotected) ones."""
        repo = self.repository(uri, owner_name, repository_name)
        parameters = None
        if protected is not None:
            parameters = {"protected": "true" if protected else "false"}

        items = self.client.invoke_multi(
            f"{repo.api_fragment}/branches",
            parameters=parameters,
            description=f"Getting branches in {repo.owner}/{repo.name}",
        )
        return [self._branch(item, repo) for item in items]

    def get_branch(
        self,
        name: str,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Branch:
        """Fetch a branch with its tip commit and protection status."""
        if not name:
            raise InvalidArgumentError("A branch name is required")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/branches/{quote(name)}",
            description=f"Getting branch {name} in {repo.owner}/{repo.name}",
        )
        return self._branch(data, repo)

    def new_branch(
        self,
        name: str,
        origin_branch_name: Optional[str] = None,
        sha: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Reference:
        """Create a branch from ``sha`` or from the tip of another branch.

        The origin defaults to the repository's default branch.
        """
        if not name:
            raise InvalidArgumentError("A branch name is required")
        if sha and origin_branch_name:
            raise InvalidArgumentError("Specify an origin branch or a SHA, not both")
        repo = self.repository(uri, owner_name, repository_name)

        if not sha:
            if not origin_branch_name:
                repository = self.client.invoke(
                    repo.api_fragment, description=f"Getting default branch of {repo.owner}/{repo.name}",
                )
                origin_branch_name = repository["default_branch"]

            try:
                origin = self.client.invoke(
                    f"{repo.api_fragment}/git/ref/{quote(resolve_reference(branch_name=origin_branch_name))}",
                    description=f"Getting origin branch {origin_branch_name}",
                )
            except GithubException as e:
                logger.error(f"Origin branch {origin_branch_name} not found in {repo.owner}/{repo.name}: {e}")
                raise
            sha = origin["object"]["sha"]

        return self.new_reference(sha, branch_name=name, owner_name=repo.owner, repository_name=repo.name)

    def remove_branch(
        self,
        name: str,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> None:
        """Delete a branch."""
        if not name:
            raise InvalidArgumentError("A branch name is required")
        self.remove_reference(branch_name=name, uri=uri, owner_name=owner_name, repository_name=repository_name)
