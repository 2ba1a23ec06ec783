"""Meta information about the GitHub instance."""

import logging
from typing import Optional

from ..github.errors import InvalidArgumentError
from .base import CommandGroup

logger = logging.getLogger(__name__)

MARKDOWN_MODES = ("markdown", "gfm")


class MetaCommands(CommandGroup):
    """Instance-wide endpoints. Results are returned as plain JSON."""

    def get_meta(self) -> dict:
        return self.client.invoke("meta", description="Getting GitHub meta information")

    def get_rate_limit(self) -> dict:
        return self.client.invoke("rate_limit", description="Getting rate limit status")

    def get_emojis(self) -> dict:
        return self.client.invoke("emojis", description="Getting emojis")

    def convert_markdown(self, text: str, mode: str = "markdown", context: Optional[str] = None) -> str:
        """Render markdown to HTML.

        ``context`` (``owner/name``) is only used in ``gfm`` mode, to link
        issue references.
        """
        self.require_choice("mode", mode, MARKDOWN_MODES)
        if context and mode != "gfm":
            raise InvalidArgumentError("A context can only be used with gfm mode")

        data = self.client.invoke(
            "markdown",
            method="POST",
            body=self.compact({"text": text, "mode": mode, "context": context}),
            description="Converting markdown to HTML",
        )
        # Non-JSON bodies come back from the requester wrapped as {"data": ...}.
        if isinstance(data, dict):
            return data.get("data", "")
        return data or ""
