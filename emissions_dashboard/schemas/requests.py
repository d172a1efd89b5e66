"""Request payloads for the mutating operations.

Payloads arrive as camelCase JSON (``companyName``, ``secretKey`` …) from the
dashboard; snake_case field names are accepted too. ``parse_payload`` turns
any validation failure into a ``BadRequest``.
"""

from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from emissions_dashboard.errors import BadRequest

M = TypeVar("M", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _CompanyYearPayload(_Payload):
    company_name: StrictStr = Field(min_length=1)
    year: StrictInt = Field(ge=1900, le=2100)
    secret_key: Optional[str] = Field(default=None, repr=False)

    @field_validator("company_name")
    @classmethod
    def strip_company_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name cannot be blank")
        return v


class AddCompanyRequest(_CompanyYearPayload):
    """Create a placeholder row so a company/year shows up on the dashboard."""


class RerunTarget(BaseModel):
    """One data point to re-extract, optionally with a hand-edited question."""

    label: StrictStr = Field(min_length=1)
    question: Optional[StrictStr] = None

    @field_validator("label")
    @classmethod
    def strip_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Data point label cannot be blank")
        return v

    @field_validator("question")
    @classmethod
    def blank_question_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class RerunRequest(_CompanyYearPayload):
    """Delete and re-extract selected data points against new documents.

    ``targets`` accepts plain labels (``["Revenue", "Scope 1"]``) or
    ``{"label": ..., "question": ...}`` objects, and is also read from the
    older ``dataPointsToRerun`` key.
    """

    custom_links: List[StrictStr] = Field(min_length=1)
    targets: List[Union[StrictStr, RerunTarget]] = Field(
        min_length=1,
        validation_alias=AliasChoices("targets", "dataPointsToRerun", "data_points_to_rerun"),
    )

    @field_validator("custom_links")
    @classmethod
    def clean_links(cls, v: List[str]) -> List[str]:
        links = [link.strip() for link in v if link.strip()]
        if not links:
            raise ValueError("You must provide at least one custom link.")
        return links

    @field_validator("targets")
    @classmethod
    def normalize_targets(cls, v: List[Union[str, RerunTarget]]) -> List[RerunTarget]:
        normalized: dict[str, RerunTarget] = {}
        for item in v:
            target = RerunTarget(label=item) if isinstance(item, str) else item
            normalized.setdefault(target.label, target)
        return list(normalized.values())

    @property
    def labels(self) -> List[str]:
        return [t.label for t in self.targets]


class SingleRerunRequest(_CompanyYearPayload):
    """Re-extract one data point against the documents it was built from."""

    data_point_type: StrictStr = Field(min_length=1)
    question: Optional[StrictStr] = None


class FeedbackRequest(_Payload):
    data_id: StrictInt = Field(gt=0)
    is_thumb_up: StrictBool
    email: Optional[str] = None
    comment: Optional[str] = None


_MESSAGES = {
    "custom_links": "You must provide at least one custom link.",
    "targets": "You must select at least one data point to re-run.",
    "company_name": "Company name and year are required.",
    "year": "Company name and year are required.",
    "data_id": "Missing required fields.",
    "is_thumb_up": "Missing required fields.",
}


def parse_payload(model: Type[M], payload: Any) -> M:
    """Validate *payload* into *model*, raising ``BadRequest`` on any problem."""
    if not isinstance(payload, Mapping):
        raise BadRequest("Request body must be a JSON object.")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc") or ("body",)
        field = str(loc[0])
        field = _FIELD_NAMES.get(field, field)
        message = _MESSAGES.get(field, f"Invalid value for '{field}': {first.get('msg')}")
        raise BadRequest(message, field=field) from exc


# Maps every alias pydantic may report in an error location to the field name.
_FIELD_NAMES = {
    "companyName": "company_name",
    "secretKey": "secret_key",
    "customLinks": "custom_links",
    "dataPointsToRerun": "targets",
    "data_points_to_rerun": "targets",
    "dataPointType": "data_point_type",
    "dataId": "data_id",
    "isThumbUp": "is_thumb_up",
}
