"""Pydantic models for Linear webhook payloads."""

from typing import Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, StrictStr, TypeAdapter, ValidationError, field_validator

_URL_ADAPTER = TypeAdapter(AnyUrl)


class LinearWebhook(BaseModel):
    """Base shape shared by every Linear webhook delivery."""
    model_config = ConfigDict(extra="ignore")

    action: StrictStr


class IssueAssignee(BaseModel):
    """Linear user an issue is assigned to."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = None


class IssueData(BaseModel):
    """Issue fields carried by a ``create`` delivery."""
    model_config = ConfigDict(extra="ignore")

    title: StrictStr
    identifier: StrictStr
    url: StrictStr
    assignee: Optional[IssueAssignee] = None
    description: Optional[StrictStr] = None

    @field_validator("url")
    @classmethod
    def url_must_be_well_formed(cls, value: str) -> str:
        # Validate only; the note keeps the URL exactly as Linear sent it
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"not a well-formed URL: {value!r}") from e
        return value

    @property
    def assignee_name(self) -> Optional[str]:
        if self.assignee is None:
            return None
        return self.assignee.name


class IssueCreateWebhook(LinearWebhook):
    """Delivery sent by Linear when an issue is created."""

    data: IssueData
