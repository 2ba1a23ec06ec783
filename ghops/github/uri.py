"""Repository URI parsing and owner/name resolution."""

import re
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .errors import InvalidArgumentError, InvalidFormatError

if TYPE_CHECKING:
    from ..config import Configuration

logger = logging.getLogger(__name__)

DEFAULT_HOST = "github.com"

# Characters GitHub allows in owner and repository names.
_SEGMENT = r"[A-Za-z0-9._-]+"
_TAIL = r"(?:[/?#].*)?$"

_WEB_URI = re.compile(rf"^https?://(?:www\.)?(?P<host>[^/]+)/(?P<owner>{_SEGMENT})/(?P<name>{_SEGMENT}){_TAIL}")
_API_URI = re.compile(rf"^https?://api\.(?P<host>[^/]+)/repos/(?P<owner>{_SEGMENT})/(?P<name>{_SEGMENT}){_TAIL}")
_ENTERPRISE_API_URI = re.compile(
    rf"^https?://(?P<host>[^/]+)/api/v3/repos/(?P<owner>{_SEGMENT})/(?P<name>{_SEGMENT}){_TAIL}"
)
_VALID_SEGMENT = re.compile(rf"^{_SEGMENT}$")


@dataclass(frozen=True)
class RepositoryCoordinates:
    """Owner/name pair identifying a repository, plus its derived URIs."""
    owner: str
    name: str
    host: str = DEFAULT_HOST

    @property
    def url(self) -> str:
        return join_repository_uri(self.owner, self.name, self.host)

    @property
    def api_fragment(self) -> str:
        return f"repos/{self.owner}/{self.name}"


def parse_repository_uri(uri: str) -> tuple[str, str, str]:
    """Split a repository URI into ``(host, owner, name)``.

    Accepts web URIs (``https://github.com/owner/name``, with or without a
    trailing path or ``.git``) and REST URIs
    (``https://api.github.com/repos/owner/name/...`` or the Enterprise
    ``https://host/api/v3/repos/owner/name/...``).
    """
    uri = (uri or "").strip()
    for pattern in (_API_URI, _ENTERPRISE_API_URI, _WEB_URI):
        match = pattern.match(uri)
        if not match:
            continue
        name = match.group("name")
        if name.endswith(".git"):
            name = name[:-len(".git")]
        if name:
            return match.group("host"), match.group("owner"), name

    raise InvalidFormatError(f"Not a repository URI: {uri!r}")


def split_repository_uri(uri: str) -> tuple[str, str]:
    """Split a repository URI into ``(owner, name)``."""
    _, owner, name = parse_repository_uri(uri)
    return owner, name


def validate_repository_name(owner: str, name: str) -> None:
    """Reject owner/name pairs that cannot appear in a repository URI."""
    for label, value in (("owner", owner), ("repository name", name)):
        if not value or not _VALID_SEGMENT.match(value):
            raise InvalidFormatError(f"Invalid {label}: {value!r}")
    if name.endswith(".git"):
        raise InvalidFormatError(f"Repository names cannot end in .git: {name!r}")


def join_repository_uri(owner: str, name: str, host: str = DEFAULT_HOST) -> str:
    """Compose the canonical web URI of a repository."""
    validate_repository_name(owner, name)
    return f"https://{host}/{owner}/{name}"



def resolve_repository(
    uri: Optional[str] = None,
    owner_name: Optional[str] = None,
    repository_name: Optional[str] = None,
    config: Optional["Configuration"] = None,
) -> RepositoryCoordinates:
    """Normalize the "URI or owner+name" parameter sets into coordinates.

    Owner and name not given explicitly fall back to the configured defaults.
    A URI must point at the configured host, since requests go there.
    """
    host = config.web_host if config is not None else DEFAULT_HOST

    if uri:
        if owner_name or repository_name:
            raise InvalidArgumentError("Specify a repository URI or an owner/name pair, not both")
        uri_host, owner, name = parse_repository_uri(uri)
        if config is None:
            host = uri_host
        elif uri_host.lower() != host.lower():
            raise InvalidArgumentError(
                f"Repository URI host {uri_host!r} does not match the configured host {host!r}"
            )
        return RepositoryCoordinates(owner=owner, name=name, host=host)

    if config is not None:
        owner_name = owner_name or config.default_owner_name
        repository_name = repository_name or config.default_repository_name

    if not owner_name or not repository_name:
        raise InvalidArgumentError(
            "Unable to determine the repository. Pass a URI, an owner and name, "
            "or configure GITHUB_REPOSITORY."
        )

    validate_repository_name(owner_name, repository_name)
    logger.debug(f"Resolved repository {owner_name}/{repository_name}")
    return RepositoryCoordinates(owner=owner_name, name=repository_name, host=host)


def repository_url_from_api_url(api_url: Optional[str], host: str = DEFAULT_HOST) -> Optional[str]:
    """Derive a canonical web URI from any REST URL under ``repos/<owner>/<name>``."""
    if not api_url:
        return None
    try:
        owner, name = split_repository_uri(api_url)
    except InvalidFormatError:
        return None
    return join_repository_uri(owner, name, host)
