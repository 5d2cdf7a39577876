"""Reflect notes: building the note body and sending it to the Reflect API."""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

import requests

from .config import RelayConfig
from .model import IssueData

logger = logging.getLogger(__name__)

# Longest slice of a failed response body kept in a DispatchResult
ERROR_BODY_LIMIT = 500


@dataclass(frozen=True)
class Note:
    """A note as accepted by ``POST /api/graphs/{graph_id}/notes``."""

    subject: str
    content_markdown: str
    pinned: bool = False

    def to_payload(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one attempt to create a note."""

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


def build_note(issue: IssueData) -> Note:
    """Turn a newly created Linear issue into a Reflect note.

    The assignee becomes a ``[[backlink]]`` so Reflect links the note to
    that person's page; empty optional fields produce no line at all.
    """
    lines = [f"- Linear: {issue.url}"]

    if issue.assignee_name:
        lines.append(f"- Assignee: [[{issue.assignee_name}]]")
    if issue.description:
        lines.append(f"- Description: {issue.description}")

    return Note(
        subject=f"{issue.identifier} {issue.title}",
        content_markdown="\n".join(lines),
    )


class NotesClient:
    """Minimal Reflect API client: one POST per note, no retries."""

    def __init__(self, config: RelayConfig):
        self.notes_url = config.notes_url
        self.timeout = config.notes_timeout
        self._headers = {
            "Authorization": f"Bearer {config.access_token}",
            "Content-Type": "application/json",
        }

    def create_note(self, note: Note) -> DispatchResult:
        """Send ``note`` to Reflect. Failures are returned, never raised."""
        try:
            response = requests.post(
                self.notes_url,
                json=note.to_payload(),
                headers=self._headers,
                timeout=self.timeout,
            )
        except (requests.RequestException, ValueError) as e:
            return DispatchResult(ok=False, error=f"{type(e).__name__}: {e}")

        if not response.ok:
            return DispatchResult(
                ok=False,
                status_code=response.status_code,
                error=response.text[:ERROR_BODY_LIMIT],
            )

        logger.info(f"Created note '{note.subject}' ({response.status_code})")
        return DispatchResult(ok=True, status_code=response.status_code)
