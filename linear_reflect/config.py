"""Configuration for the Linear to Reflect relay."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Environment variable -> field name for settings without a default
REQUIRED_VARIABLES = {
    "WEBHOOK_SECRET": "webhook_secret",
    "ACCESS_TOKEN": "access_token",
    "GRAPH_ID": "graph_id",
}


class ConfigError(RuntimeError):
    """Raised when the relay cannot be configured from the environment."""


@dataclass(frozen=True)
class RelayConfig:
    """Process-wide settings, loaded once at startup and never mutated."""

    # Secrets
    webhook_secret: str
    access_token: str
    graph_id: str

    # Reflect API
    notes_api_url: str = "https://reflect.app"
    notes_timeout: float = 10.0

    # Server settings
    webhook_endpoint: str = "/"
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging
    log_dir: Optional[str] = "logs"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        """Create configuration from environment variables.

        Every missing required variable is reported in a single error so a
        misconfigured deployment can be fixed in one pass.
        """
        env = os.environ if environ is None else environ

        missing = [name for name in REQUIRED_VARIABLES if not env.get(name)]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        secrets = {field: env[name] for name, field in REQUIRED_VARIABLES.items()}

        return cls(
            notes_api_url=env.get("NOTES_API_URL", "https://reflect.app").rstrip("/"),
            notes_timeout=_parse_timeout(env),
            webhook_endpoint=env.get("WEBHOOK_ENDPOINT", "/"),
            host=env.get("LINEAR_REFLECT_HOST", "0.0.0.0"),
            port=_parse_number(env, "LINEAR_REFLECT_PORT", "8080", int),
            log_dir=env.get("LINEAR_REFLECT_LOG_DIR", "logs") or None,
            **secrets,
        )

    @property
    def notes_url(self) -> str:
        return f"{self.notes_api_url}/api/graphs/{self.graph_id}/notes"

    def masked(self) -> Dict[str, str]:
        """Return the settings with secrets hidden, for display."""
        return {
            "Webhook Secret": "*" * len(self.webhook_secret),
            "Access Token": "*" * len(self.access_token),
            "Graph ID": self.graph_id,
            "Notes URL": self.notes_url,
            "Notes Timeout": f"{self.notes_timeout:g}s",
            "Webhook Endpoint": self.webhook_endpoint,
            "Host": self.host,
            "Port": str(self.port),
            "Log Directory": self.log_dir or "Not set",
        }


def _parse_number(env: Mapping[str, str], name: str, default: str, kind):
    raw = env.get(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _parse_timeout(env: Mapping[str, str]) -> float:
    timeout = _parse_number(env, "NOTES_TIMEOUT", "10", float)
    # requests refuses zero, negative and infinite timeouts on every call
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(f"NOTES_TIMEOUT must be a positive number of seconds, got {timeout!r}")
    return timeout
