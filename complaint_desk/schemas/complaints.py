from datetime import datetime
from typing import Annotated, Any, Generic, List, Literal, Mapping, Optional, Tuple, TypeVar, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    StringConstraints,
    field_validator,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from complaint_desk.core.config import DEFAULT_PAGE_NUM, DEFAULT_PAGE_SIZE
from complaint_desk.core.errors import ValidationError
from complaint_desk.models.complaints import ComplaintArea, ComplaintId, ComplaintStatus
from complaint_desk.utils.dates import as_utc_naive, day_bound

T = TypeVar("T")

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# Request schema for creating a complaint
class ComplaintCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: NonBlank
    category: NonBlank
    source: NonBlank
    area: ComplaintArea
    complainant_name: NonBlank
    level: NonBlank
    content: NonBlank
    contact: Optional[str] = None
    assignee: Optional[ComplaintId] = None


# Partial update; any status change is checked against the current one
class ComplaintUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[NonBlank] = None
    category: Optional[NonBlank] = None
    source: Optional[NonBlank] = None
    area: Optional[ComplaintArea] = None
    complainant_name: Optional[NonBlank] = None
    level: Optional[NonBlank] = None
    content: Optional[NonBlank] = None
    contact: Optional[str] = None
    assignee: Optional[ComplaintId] = None
    status: Optional[ComplaintStatus] = None
    processing_notes: Optional[str] = None


class PageQuery(BaseModel):
    """Pagination plus an inclusive created_at window. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page_num: PositiveInt = Field(
        default=DEFAULT_PAGE_NUM, validation_alias=AliasChoices("page_num", "page")
    )
    page_size: PositiveInt = DEFAULT_PAGE_SIZE
    date_range: Optional[Tuple[datetime, datetime]] = None

    @field_validator("date_range", mode="before")
    @classmethod
    def expand_dates(cls, value: Any) -> Any:
        if value is None or (isinstance(value, (list, tuple)) and not any(value)):
            return None
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueError("date_range must be [start, end]")
        start, end = value
        return (day_bound(start), day_bound(end, end_of_day=True))

    @model_validator(mode="after")
    def check_date_range(self):
        if self.date_range is not None:
            start, end = self.date_range
            if as_utc_naive(start) > as_utc_naive(end):
                raise ValueError("date_range start must not be after end")
        return self

    @classmethod
    def normalize(cls, params: Union["PageQuery", Mapping[str, Any], None] = None):
        if isinstance(params, cls):
            return params
        data = {to_snake(key): value for key, value in (params or {}).items()}
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e, "query") from e

    def to_params(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class ComplaintQuery(PageQuery):
    keyword: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("keyword", "name", "search")
    )
    status: Optional[ComplaintStatus] = None
    category: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("category", "type")
    )
    level: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("level", "priority")
    )
    area: Optional[ComplaintArea] = None
    order_by: Literal["asc", "desc"] = "desc"

    @field_validator("keyword", "category", "level", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class FeedbackQuery(PageQuery):
    ticket_no: Optional[ComplaintId] = None


# Response envelope for paged listings: {list, total}
class Page(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    items: List[T] = Field(default_factory=list, alias="list")
    total: int = 0
