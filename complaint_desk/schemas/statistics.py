from typing import Literal, Optional

from pydantic import BaseModel

from complaint_desk.models.complaints import ComplaintArea

TimeRange = Literal["week", "month", "quarter", "year"]


class StatisticsQuery(BaseModel):
    time_range: Optional[TimeRange] = None


class OverviewStatistics(BaseModel):
    total_complaints: int = 0
    pending_complaints: int = 0
    completed_complaints: int = 0
    urgent_complaints: int = 0
    average_processing_time: float = 0.0  # hours, completed tickets only
    completion_rate: float = 0.0  # fraction in [0, 1]
    satisfaction_score: float = 0.0
    satisfaction_total: int = 0


class ComplaintTypeDistribution(BaseModel):
    type: str
    count: int
    percentage: float
    trend: str  # "up" | "down" | "flat"


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    completion_rate: float
    total_count: int
    completed_count: int


class AreaDistribution(BaseModel):
    area: ComplaintArea
    count: int
    percentage: float
