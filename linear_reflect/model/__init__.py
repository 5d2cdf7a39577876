"""Linear webhook models."""

from .linear_models import (
    LinearWebhook,
    IssueCreateWebhook,
    IssueData,
    IssueAssignee,
)

__all__ = [
    "LinearWebhook",
    "IssueCreateWebhook",
    "IssueData",
    "IssueAssignee",
]
