from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union
from pydantic.alias_generators import to_snake
from sqlmodel import SQLModel, Field
import enum

ComplaintId = Union[int, str]


class ComplaintStatus(str, enum.Enum):
    pending = "pending"        # Submitted, nobody working on it yet
    processing = "processing"  # Handler assigned and working
    completed = "completed"    # Resolved, terminal

    @property
    def rank(self) -> int:
        return STATUS_RANK[self]

    def can_move_to(self, other: "ComplaintStatus") -> bool:
        return ComplaintStatus(other).rank >= self.rank


STATUS_RANK = {
    ComplaintStatus.pending: 0,
    ComplaintStatus.processing: 1,
    ComplaintStatus.completed: 2,
}


class ComplaintArea(str, enum.Enum):
    A = "A区"
    B = "B区"


# Older /complaints endpoints use different names for the same fields
LEGACY_FIELDS = {
    "type": "category",
    "priority": "level",
    "complainant_contact": "contact",
}


def canonical_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """snake_case keys with legacy names mapped onto the current ones."""
    result = {to_snake(key): value for key, value in data.items()}
    for legacy, name in LEGACY_FIELDS.items():
        if legacy in result:
            value = result.pop(legacy)
            result.setdefault(name, value)
    return result


# List projection, no full content
class ComplaintListItem(SQLModel):
    id: ComplaintId
    title: str
    category: str
    source: str
    level: str
    area: ComplaintArea
    complainant_name: str
    assignee: Optional[ComplaintId] = None
    status: ComplaintStatus = Field(default=ComplaintStatus.pending)
    created_at: datetime
    updated_at: datetime


class Complaint(ComplaintListItem):
    content: Optional[str] = None
    contact: Optional[str] = None
    satisfaction: Optional[float] = None  # only set once feedback exists
    processing_notes: Optional[str] = None
