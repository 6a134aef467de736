from datetime import datetime
from typing import Optional, Union
from sqlmodel import SQLModel

from complaint_desk.models.complaints import ComplaintId


# Citizen satisfaction survey, never edited once submitted
class Feedback(SQLModel):
    id: ComplaintId
    survey_code: Optional[str] = None
    ticket_no: ComplaintId
    investigator_name: Optional[str] = None
    contact_info: Optional[str] = None

    # Dictionary-backed ratings
    processing_speed: Optional[Union[int, str]] = None
    staff_attitude: Optional[Union[int, str]] = None
    resolution_effect: Optional[Union[int, str]] = None

    other_suggestions: Optional[str] = None
    created_at: datetime
