"""REST invocation over PyGithub's requester."""

import re
import logging
from typing import Any, Optional

from github import Auth, Github

from ..config import Configuration
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

_NEXT_LINK = re.compile(r'<([^>]+)>;\s*rel="next"')


class RestClient:
    """Issues REST v3 calls for the command modules.

    Authentication, the base URL and error mapping come from PyGithub; a
    4xx/5xx response raises ``github.GithubException`` (or one of its
    subclasses) unchanged.
    """

    ACCEPT = "application/vnd.github.v3+json"
    PER_PAGE = 100
    METHODS = {"GET", "POST", "PATCH", "PUT", "DELETE"}

    def __init__(self, config: Configuration, requester=None):
        self.config = config
        self._requester = requester
        self._github: Optional[Github] = None

    @property
    def requester(self):
        if self._requester is None:
            auth = Auth.Token(self.config.access_token) if self.config.access_token else None
            if auth is None:
                logger.warning("No access token configured, requests are unauthenticated")
            self._github = Github(auth=auth, base_url=self.config.api_base_url)
            self._requester = self._github.requester
            logger.info(f"Initialized REST client for {self.config.api_base_url}")
        return self._requester

    def _headers(self, headers: Optional[dict]) -> dict:
        merged = {"Accept": self.ACCEPT}
        if headers:
            merged.update(headers)
        return merged

    @staticmethod
    def _url(uri_fragment: str) -> str:
        if uri_fragment.startswith(("http://", "https://", "/")):
            return uri_fragment
        return "/" + uri_fragment

    def invoke(
        self,
        uri_fragment: str,
        method: str = "GET",
        body: Optional[dict] = None,
        headers: Optional[dict] = None,
        parameters: Optional[dict] = None,
        description: str = "",
    ) -> Any:
        """Issue a single call and return the decoded JSON body (None for 204)."""
        method = method.upper()
        if method not in self.METHODS:
            raise InvalidArgumentError(f"Unsupported HTTP method: {method}")

        logger.info(description or f"{method} {uri_fragment}")
        _, data = self.requester.requestJsonAndCheck(
            method, self._url(uri_fragment),
            parameters=parameters, headers=self._headers(headers), input=body,
        )
        return data

    def invoke_multi(
        self,
        uri_fragment: str,
        headers: Optional[dict] = None,
        parameters: Optional[dict] = None,
        description: str = "",
        no_status: Optional[bool] = None,
    ) -> list:
        """Fetch every page of a list endpoint and return the items in order."""
        if no_status is None:
            no_status = self.config.default_no_status
        log_progress = logger.debug if no_status else logger.info

        params = {"per_page": self.PER_PAGE}
        if parameters:
            params.update(parameters)

        logger.info(description or f"GET {uri_fragment} (all pages)")
        results: list = []
        url: Optional[str] = self._url(uri_fragment)
        page = 0

        while url:
            page += 1
            response_headers, data = self.requester.requestJsonAndCheck(
                "GET", url, parameters=params, headers=self._headers(headers),
            )
            if isinstance(data, dict) and isinstance(data.get("items"), list):
                data = data["items"]
            if isinstance(data, list):
                results.extend(data)
            elif data is not None:
                results.append(data)

            log_progress(f"Fetched page {page} of {uri_fragment} ({len(results)} results so far)")

            url = self._next_link(response_headers)
            # The next link already carries the query string.
            params = None

        return results

    def invoke_status(
        self,
        uri_fragment: str,
        method: str = "GET",
        headers: Optional[dict] = None,
    ) -> int:
        """Issue a call and return its HTTP status instead of raising on errors."""
        logger.info(f"{method.upper()} {uri_fragment} (status only)")
        status, _, _ = self.requester.requestJson(
            method.upper(), self._url(uri_fragment), headers=self._headers(headers),
        )
        return status

    @staticmethod
    def _next_link(response_headers: Optional[dict]) -> Optional[str]:
        if not response_headers:
            return None
        link = response_headers.get("link") or response_headers.get("Link")
        if not link:
            return None
        match = _NEXT_LINK.search(link)
        return match.group(1) if match else None
