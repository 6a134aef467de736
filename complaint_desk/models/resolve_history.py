from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field

from complaint_desk.models.complaints import ComplaintId, ComplaintStatus


# Append-only audit row, written once per status change
class ResolveHistory(SQLModel):
    id: ComplaintId
    ticket_no: ComplaintId  # complaint id
    status: ComplaintStatus
    operator: Optional[str] = None  # who moved the ticket
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ResolveHistoryCreate(SQLModel):
    ticket_no: ComplaintId
    status: ComplaintStatus
    operator: str
    description: str = Field(default="")
