from complaint_desk.client import ComplaintDesk
from complaint_desk.core.dictionary import CodeDictionary
from complaint_desk.core.errors import (
    ComplaintDeskError,
    InvalidTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from complaint_desk.core.loading import LoadingState, use_loading
from complaint_desk.models.complaints import Complaint, ComplaintArea, ComplaintListItem, ComplaintStatus

__all__ = [
    "CodeDictionary",
    "Complaint",
    "ComplaintArea",
    "ComplaintDesk",
    "ComplaintDeskError",
    "ComplaintListItem",
    "ComplaintStatus",
    "InvalidTransitionError",
    "LoadingState",
    "NotFoundError",
    "TransportError",
    "ValidationError",
    "use_loading",
]
