"""Linear to Reflect webhook relay.

This package handles:
- Receiving Linear webhooks
- Validating webhook signatures
- Validating the payload shape
- Creating a Reflect note for each newly created issue
"""

from .config import RelayConfig, ConfigError
from .handler import WebhookHandler, WebhookResponse
from .notes import NotesClient, Note, DispatchResult, build_note
from .server import create_app

__all__ = [
    "RelayConfig",
    "ConfigError",
    "WebhookHandler",
    "WebhookResponse",
    "NotesClient",
    "Note",
    "DispatchResult",
    "build_note",
    "create_app",
]

__version__ = "0.1.0"
