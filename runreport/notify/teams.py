"""Teams notifications through a Workflows webhook.

The webhook has to be set up on the Teams side with a Workflow that posts
AdaptiveCard attachments to a channel.
"""

from typing import Iterable, Optional

import httpx
from pydantic import BaseModel, Field
from rich.console import Console
from rich.markup import escape

from ..cards import Card, TextBlock, build_notification
from ..errors import NotifyError
from ..models import Recipient

console = Console()

ACCEPTED_STATUS_CODES = frozenset({200, 201, 202})


class NotifyResult(BaseModel):
    """Result of posting a card to the webhook."""

    success: bool = Field(..., description="Whether the webhook accepted the card")
    status_code: Optional[int] = Field(None, description="HTTP status code, if a response arrived")
    response_body: str = Field("", description="Response body or transport error")

    def raise_for_error(self) -> None:
        """Raise NotifyError if the card was not accepted."""
        if not self.success:
            raise NotifyError(self.status_code, self.response_body)


class TeamsNotifier:
    """Send AdaptiveCards to a Teams channel."""

    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize notifier.

        Args:
            webhook_url: Workflows webhook URL
            timeout: HTTP timeout in seconds
            client: HTTP client to reuse (for testing)
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._client = client

    def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.webhook_url, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.webhook_url, json=payload)

    def send_card(self, card: Card) -> NotifyResult:
        """
        Post a card to the webhook.

        Failures are reported in the result and printed, never raised.
        """
        if not self.webhook_url:
            result = NotifyResult(success=False, response_body="No webhook URL configured")
        else:
            try:
                response = self._post(card.to_message())
                result = NotifyResult(
                    success=response.status_code in ACCEPTED_STATUS_CODES,
                    status_code=response.status_code,
                    response_body=response.text,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                result = NotifyResult(success=False, response_body=str(e))

        if result.success:
            console.print("[green]Message sent.[/green]")
        else:
            console.print(f"[bold red]Failed to send message: {escape(result.response_body)}[/bold red]")
        return result

    def send_message(
        self,
        text: str,
        recipients: Iterable[Recipient] = (),
        summary: str = "",
    ) -> NotifyResult:
        """Send a simple text message."""
        card = build_notification([TextBlock(text=text, wrap=True)], recipients, summary)
        return self.send_card(card)
