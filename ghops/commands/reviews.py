"""Pull request review commands."""

import logging
from typing import Optional

from ..github.errors import InvalidArgumentError
from ..github.models import Review
from .base import CommandGroup

logger = logging.getLogger(__name__)

EVENTS = ("APPROVE", "REQUEST_CHANGES", "COMMENT")
EVENTS_REQUIRING_BODY = ("REQUEST_CHANGES", "COMMENT")


class ReviewCommands(CommandGroup):
    """Read, create, submit and dismiss pull request reviews."""

    def _review(self, data: dict, number: int, repository_url: str) -> Review:
        return Review.from_json(
            data, repository_url=repository_url, pull_request_number=number,
            host=self.host, decorate=self.decorate,
        )

    @classmethod
    def _check_event(cls, event: Optional[str], body: Optional[str]) -> Optional[str]:
        if event is None:
            return None
        event = event.upper()
        cls.require_choice("event", event, EVENTS)
        if event in EVENTS_REQUIRING_BODY and not body:
            raise InvalidArgumentError(f"A body is required for {event} reviews")
        return event

    def list_reviews(
        self,
        number: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> list[Review]:
        """List every review on a pull request, oldest first."""
        repo = self.repository(uri, owner_name, repository_name)
        items = self.client.invoke_multi(
            f"{repo.api_fragment}/pulls/{number}/reviews",
            description=f"Getting reviews of PR #{number} in {repo.owner}/{repo.name}",
        )
        return [self._review(item, number, repo.url) for item in items]

    def get_review(
        self,
        number: int,
        review_id: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Fetch a single review by id."""
        repo = self.repository(uri, owner_name, repository_name)
        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews/{review_id}",
            description=f"Getting review {review_id} of PR #{number}",
        )
        return self._review(data, number, repo.url)

    def new_review(
        self,
        number: int,
        event: Optional[str] = None,
        body: Optional[str] = None,
        commit_id: Optional[str] = None,
        comments: Optional[list[dict]] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Create a review. Without an event the review is left pending.

        ``comments`` are draft review comments as GitHub expects them
        (``path``, ``body`` and ``line`` or ``position``).
        """
        event = self._check_event(event, body)
        repo = self.repository(uri, owner_name, repository_name)

        payload = self.compact({"event": event, "body": body, "commit_id": commit_id})
        if comments:
            payload["comments"] = comments

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews",
            method="POST",
            body=payload,
            description=f"Creating {event or 'PENDING'} review on PR #{number}",
        )
        logger.info(f"Created review {data.get('id')} on PR #{number} with {len(comments or [])} comments")
        return self._review(data, number, repo.url)

    def submit_review(
        self,
        number: int,
        review_id: int,
        event: str,
        body: Optional[str] = None,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Submit a pending review with an event (and a body for REQUEST_CHANGES or COMMENT)."""
        if not event:
            raise InvalidArgumentError("An event is required to submit a review")
        event = self._check_event(event, body)
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews/{review_id}/events",
            method="POST",
            body=self.compact({"event": event, "body": body}),
            description=f"Submitting review {review_id} on PR #{number} as {event}",
        )
        return self._review(data, number, repo.url)

    def update_review(
        self,
        number: int,
        review_id: int,
        body: str,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Replace the summary body of a review."""
        if not body:
            raise InvalidArgumentError("A body is required to update a review")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews/{review_id}",
            method="PUT",
            body={"body": body},
            description=f"Updating review {review_id} on PR #{number}",
        )
        return self._review(data, number, repo.url)

    def remove_review(
        self,
        number: int,
        review_id: int,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Delete a review that has not been submitted yet."""
        repo = self.repository(uri, owner_name, repository_name)
        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews/{review_id}",
            method="DELETE",
            description=f"Deleting pending review {review_id} on PR #{number}",
        )
        return self._review(data, number, repo.url)

    def dismiss_review(
        self,
        number: int,
        review_id: int,
        message: str,
        uri: Optional[str] = None,
        owner_name: Optional[str] = None,
        repository_name: Optional[str] = None,
    ) -> Review:
        """Dismiss a submitted review, recording ``message`` as the reason."""
        if not message:
            raise InvalidArgumentError("A message is required to dismiss a review")
        repo = self.repository(uri, owner_name, repository_name)

        data = self.client.invoke(
            f"{repo.api_fragment}/pulls/{number}/reviews/{review_id}/dismissals",
            method="PUT",
            body={"message": message, "event": "DISMISS"},
            description=f"Dismissing review {review_id} on PR #{number}",
        )
        return self._review(data, number, repo.url)
