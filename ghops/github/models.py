"""Typed results for GitHub REST responses.

Each result keeps the JSON body it was built from in ``raw`` and carries a
small set of derived fields computed once, in ``from_json``. Derived fields
are what downstream commands consume (a PR number, a branch name, the owning
repository's URI), so results can be passed straight into the next call.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Optional

from .references import RefType, classify_reference
from .uri import DEFAULT_HOST, repository_url_from_api_url

_PULL_NUMBER = re.compile(r"/pulls/(\d+)(?:/|$)")


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a key is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _pull_number_from_url(url: Optional[str]) -> Optional[int]:
    if not url:
        return None
    match = _PULL_NUMBER.search(url)
    return int(match.group(1)) if match else None


@dataclass
class GitHubObject:
    """Base for all results."""
    raw: dict = field(default_factory=dict, repr=False)

    type_name: ClassVar[str] = "GitHub.Object"

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def to_dict(self) -> dict:
        """Raw JSON plus the derived fields that are set."""
        result = dict(self.raw)
        for f in fields(self):
            if f.name == "raw":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = _export(value)
        result["type_name"] = self.type_name
        return result


def _export(value: Any) -> Any:
    if isinstance(value, GitHubObject):
        return value.to_dict()
    if isinstance(value, list):
        return [_export(v) for v in value]
    if isinstance(value, RefType):
        return value.value
    return value


@dataclass
class User(GitHubObject):
    """A GitHub user (or bot/organization account)."""
    user_name: Optional[str] = None
    user_id: Optional[int] = None

    type_name: ClassVar[str] = "GitHub.User"

    @classmethod
    def from_json(cls, data: Optional[dict], decorate: bool = True) -> Optional["User"]:
        if data is None:
            return None
        if not decorate:
            return cls(raw=data)
        return cls(raw=data, user_name=data.get("login"), user_id=data.get("id"))


@dataclass
class Team(GitHubObject):
    """A team named in a review request."""
    team_name: Optional[str] = None
    team_id: Optional[int] = None

    type_name: ClassVar[str] = "GitHub.Team"

    @classmethod
    def from_json(cls, data: dict, decorate: bool = True) -> "Team":
        if not decorate:
            return cls(raw=data)
        return cls(raw=data, team_name=data.get("slug") or data.get("name"), team_id=data.get("id"))


@dataclass
class UserContextualInformation(GitHubObject):
    """Hovercard contexts for a user."""
    user_name: Optional[str] = None
    contexts: Optional[list] = None

    type_name: ClassVar[str] = "GitHub.UserContextualInformation"

    @classmethod
    def from_json(cls, data: dict, user_name: str, decorate: bool = True) -> "UserContextualInformation":
        if not decorate:
            return cls(raw=data)
        return cls(raw=data, user_name=user_name, contexts=list(data.get("contexts") or []))


@dataclass
class Reference(GitHubObject):
    """A git ref. Exactly one of branch_name/tag_name is set for heads and tags."""
    ref_type: Optional[RefType] = None
    branch_name: Optional[str] = None
    tag_name: Optional[str] = None
    sha: Optional[str] = None
    repository_url: Optional[str] = None

    @property
    def type_name(self) -> str:
        if self.ref_type == RefType.BRANCH:
            return "GitHub.Branch"
        if self.ref_type == RefType.TAG:
            return "GitHub.Tag"
        return "GitHub.Reference"

    @property
    def is_branch(self) -> bool:
        return self.ref_type == RefType.BRANCH

    @property
    def is_tag(self) -> bool:
        return self.ref_type == RefType.TAG

    @classmethod
    def from_json(
        cls,
        data: dict,
        repository_url: Optional[str] = None,
        host: str = DEFAULT_HOST,
        decorate: bool = True,
    ) -> "Reference":
        if not decorate:
            return cls(raw=data)

        ref_type, short_name = classify_reference(data.get("ref", ""))
        return cls(
            raw=data,
            ref_type=ref_type,
            branch_name=short_name if ref_type == RefType.BRANCH else None,
            tag_name=short_name if ref_type == RefType.TAG else None,
            sha=_dig(data, "object", "sha"),
            repository_url=repository_url or repository_url_from_api_url(data.get("url"), host),
        )


@dataclass
class Branch(GitHubObject):
    """A branch as returned by the branches endpoints."""
    branch_name: Optional[str] = None
    sha: Optional[str] = None
    protected: Optional[bool] = None
    repository_url: Optional[str] = None

    type_name: ClassVar[str] = "GitHub.Branch"

    @classmethod
    def from_json(
        cls,
        data: dict,
        repository_url: Optional[str] = None,
        host: str = DEFAULT_HOST,
        decorate: bool = True,
    ) -> "Branch":
        if not decorate:
            return cls(raw=data)
        return cls(
            raw=data,
            branch_name=data.get("name"),
            sha=_dig(data, "commit", "sha"),
            protected=data.get("protected"),
            repository_url=repository_url or repository_url_from_api_url(_dig(data, "commit", "url"), host),
        )


@dataclass
class Commit(GitHubObject):
    """A commit listed on a pull request; the author may be absent for unlinked emails."""

    sha: Optional[str] = None
    message: Optional[str] = None
    author: Optional[User] = None
    repository_url: Optional[str] = None

    type_name: ClassVar[str] = "GitHub.Commit"

    @classmethod
    def from_json(
        cls,
        data: dict,
        repository_url: Optional[str] = None,
        host: str = DEFAULT_HOST,
        decorate: bool = True,
    ) -> "Commit":
        if not decorate:
            return cls(raw=data)
        return cls(
            raw=data,
            sha=data.get("sha"),
            message=_dig(data, "commit", "message"),
            author=User.from_json(data.get("author")),
            repository_url=repository_url or repository_url_from_api_url(data.get("url"), host),
        )


@dataclass
class PullRequest(GitHubObject):
    """A GitHub Pull Request."""
    pull_request_number: Optional[int] = None
    pull_request_id: Optional[int] = None
    title: Optional[str] = None
    state: Optional[str] = None
    head_branch: Optional[str] = None
    base_branch: Optional[str] = None
    user: Optional[User] = None
    repository_url: Optional[str] = None

    type_name: ClassVar[str] = "GitHub.PullRequest"

    @classmethod
    def from_json(
        cls,
        data: dict,
        repository_url: Optional[str] = None,
        host: str = DEFAULT_HOST,
        decorate: bool = True,
    ) -> "PullRequest":
        if not decorate:
            return cls(raw=data)

        if not repository_url:
            repository_url = _dig(data, "base", "repo", "html_url") or repository_url_from_api_url(
                data.get("url"), host
            )

        return cls(
            raw=data,
            pull_request_number=data.get("number"),
            pull_request_id=data.get("id"),
            title=data.get("title"),
            state=data.get("state"),
            head_branch=_dig(data, "head", "ref"),
            base_branch=_dig(data, "base", "ref"),
            user=User.from_json(data.get("user")),
            repository_url=repository_url,
        )


@dataclass
class Review(GitHubObject):
    """A pull request review."""
    review_id: Optional[int] = None
    pull_request_number: Optional[int] = None
    state: Optional[str] = None
    user: Optional[User] = None
    repository_url: Optional[str] = None

    type_name: ClassVar[str] = "GitHub.PullRequestReview"

    @classmethod
    def from_json(
        cls,
        data: dict,
        repository_url: Optional[str] = None,
        pull_request_number: Optional[int] = None,
        host: str = DEFAULT_HOST,
        decorate: bool = True,
    ) -> "Review":
        if not decorate:
            return cls(raw=data)

        pull_request_url = data.get("pull_request_url")
        return cls(
            raw=data,
            review_id=data.get("id"),
            pull_request_number=pull_request_number or _pull_number_from_url(pull_request_url),
            state=data.get("state"),
            user=User.from_json(data.get("user")),
            repository_url=repository_url or repository_url_from_api_url(pull_request_url, host),
        )


@dataclass
class ReviewRequest(GitHubObject):
    """Users and teams whose review is pending on a pull request."""
    users: Optional[list[User]] = None
    teams: Optional[list[Team]] = None
    pull_request_number: Optional[int] = None
    repository_url: Optional[str] = None

    type_name: ClassVar[str] = "GitHub.PullRequestReviewRequest"

    @classmethod
    def from_json(
        cls,
        data: dict,
        pull_request_number: int,
        repository_url: Optional[str] = None,
        decorate: bool = True,
    ) -> "ReviewRequest":
        if not decorate:
            return cls(raw=data)
        return cls(
            raw=data,
            users=[User.from_json(u) for u in data.get("users") or []],
            teams=[Team.from_json(t) for t in data.get("teams") or []],
            pull_request_number=pull_request_number,
            repository_url=repository_url,
        )
