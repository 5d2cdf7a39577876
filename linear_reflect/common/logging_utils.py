"""Logging utilities for consistent logging across modules."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Set by setup_logging; error files are only written once it is known
_log_dir: Optional[Path] = None


def setup_logging(log_dir: Optional[str] = "logs") -> None:
    """Setup logging configuration."""
    global _log_dir

    handlers = [logging.StreamHandler()]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path / "linear_reflect.log"))
        _log_dir = log_path
    else:
        _log_dir = None

    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def log_server_message(message: str) -> None:
    """Log server-related messages."""
    logging.getLogger("linear_reflect.server").info(f"[SERVER] {message}")


def log_error(error_message: str, error_data: str = "") -> None:
    """Log an error and keep the offending request data in a timestamped file."""
    logger.error(error_message)

    if _log_dir is None:
        return

    try:
        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        error_file = _log_dir / f"error-{timestamp}.log"

        with open(error_file, "w", encoding="utf-8") as f:
            f.write(f"Error occurred at: {datetime.now().isoformat()}\n")
            f.write(f"Error message: {error_message}\n")
            if error_data:
                f.write(f"Error data:\n{error_data}\n")

        logger.error(f"Error logged to: {error_file}")

    except OSError as e:
        logger.error(f"Failed to log error: {e}")
