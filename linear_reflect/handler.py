"""Webhook verification and dispatch pipeline.

Each delivery goes through the same steps:
- Verify the HMAC signature of the raw body
- Parse the body as JSON
- Validate the payload shape
- For ``create`` actions, send a note to Reflect

Only a bad signature is reported to the caller. Linear just needs to know
the delivery arrived, so every other outcome is acknowledged with 200.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from .common import log_error, verify_hmac_signature
from .config import RelayConfig
from .model import IssueCreateWebhook, LinearWebhook
from .notes import DispatchResult, NotesClient, build_note

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "linear-signature"
CREATE_ACTION = "create"


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


ACKNOWLEDGED = WebhookResponse(200, {"status": "Ok."})
BAD_REQUEST = WebhookResponse(400, {"message": "Bad request."})


class WebhookHandler:
    """Stateless handler for Linear webhook deliveries."""

    def __init__(self, config: RelayConfig, notes_client: Optional[NotesClient] = None):
        self.config = config
        self.notes_client = notes_client or NotesClient(config)

    async def handle(self, raw_body: bytes, signature: Optional[str]) -> WebhookResponse:
        """Run one delivery through the pipeline and return the response to send."""
        if not verify_hmac_signature(raw_body, signature, self.config.webhook_secret):
            # Unauthenticated bodies never reach the error files
            logger.warning(f"Rejected webhook with missing or invalid signature ({len(raw_body)} bytes)")
            return BAD_REQUEST

        payload = self._parse(raw_body)
        if payload is None:
            return ACKNOWLEDGED

        try:
            webhook = LinearWebhook.model_validate(payload)
        except ValidationError as e:
            log_error(f"Webhook without a valid action: {e}", _printable(raw_body))
            return ACKNOWLEDGED

        if webhook.action != CREATE_ACTION:
            logger.info(f"Ignoring '{webhook.action}' action")
            return ACKNOWLEDGED

        try:
            created = IssueCreateWebhook.model_validate(payload)
        except ValidationError as e:
            log_error(f"Invalid issue create payload: {e}", _printable(raw_body))
            return ACKNOWLEDGED

        note = build_note(created.data)
        result = await run_in_threadpool(self.notes_client.create_note, note)
        self._log_dispatch(created.data.identifier, result)
        # The result is deliberately dropped: Linear gets 200 either way
        return ACKNOWLEDGED

    @staticmethod
    def _parse(raw_body: bytes) -> Optional[Any]:
        # Unparseable bodies are treated like a payload without an action
        try:
            return json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            log_error(f"Invalid JSON in request body: {e}", _printable(raw_body))
            return None

    @staticmethod
    def _log_dispatch(identifier: str, result: DispatchResult) -> None:
        if result.ok:
            logger.info(f"Forwarded {identifier} to Reflect")
        else:
            log_error(
                f"Failed to forward {identifier} to Reflect "
                f"(status={result.status_code}): {result.error}"
            )


def _printable(raw_body: bytes) -> str:
    return raw_body.decode("utf-8", errors="replace")
