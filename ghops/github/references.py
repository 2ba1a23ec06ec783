"""Git reference names: branch/tag resolution and classification."""

from enum import Enum
from typing import Optional

from .errors import InvalidArgumentError

HEADS_PREFIX = "refs/heads/"
TAGS_PREFIX = "refs/tags/"


class RefType(str, Enum):
    """Kinds of git reference GitHub exposes."""
    BRANCH = "branch"
    TAG = "tag"


def resolve_reference(tag_name: Optional[str] = "", branch_name: Optional[str] = "") -> str:
    """Build the ref path segment used by the git/refs endpoints.

    Returns ``tags/<tag_name>`` when a tag is given, otherwise
    ``heads/<branch_name>``. Supplying both is ambiguous.
    """
    tag_name = tag_name or ""
    branch_name = branch_name or ""

    if tag_name and branch_name:
        raise InvalidArgumentError(
            f"Specify either a tag or a branch, not both (tag={tag_name!r}, branch={branch_name!r})"
        )

    if tag_name:
        return f"tags/{tag_name}"
    return f"heads/{branch_name}"


def classify_reference(ref: str) -> tuple[Optional[RefType], str]:
    """Split a full ref path into its kind and short name.

    Refs outside ``refs/heads/`` and ``refs/tags/`` (notes, pull heads...)
    come back with no kind and the path unchanged.
    """
    if ref.startswith(HEADS_PREFIX):
        return RefType.BRANCH, ref[len(HEADS_PREFIX):]
    if ref.startswith(TAGS_PREFIX):
        return RefType.TAG, ref[len(TAGS_PREFIX):]
    return None, ref
