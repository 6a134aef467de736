from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from complaint_desk.api.paths import STATISTICS_PATHS
from complaint_desk.core.errors import ValidationError
from complaint_desk.core.transport import TransportShim, parse
from complaint_desk.schemas.statistics import (
    AreaDistribution,
    ComplaintTypeDistribution,
    MonthlyTrend,
    OverviewStatistics,
    StatisticsQuery,
    TimeRange,
)


class StatisticsApi:
    """Server-computed dashboard statistics. See utils.aggregation for the local equivalents."""

    def __init__(self, shim: TransportShim):
        self.shim = shim

    async def _fetch(self, name: str, time_range: Optional[TimeRange]):
        try:
            params = StatisticsQuery(time_range=time_range).model_dump(exclude_none=True)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e, "statistics query") from e
        return await self.shim.get(STATISTICS_PATHS[name], params or None)

    async def overview(self, time_range: Optional[TimeRange] = None) -> OverviewStatistics:
        result = await self._fetch("overview", time_range)
        return parse(OverviewStatistics, result or {}, "overview statistics")

    async def types(self, time_range: Optional[TimeRange] = None) -> List[ComplaintTypeDistribution]:
        result = await self._fetch("types", time_range)
        return parse(List[ComplaintTypeDistribution], result or [], "type distribution")

    async def monthly_trends(self, time_range: Optional[TimeRange] = None) -> List[MonthlyTrend]:
        result = await self._fetch("monthly_trends", time_range)
        return parse(List[MonthlyTrend], result or [], "monthly trends")

    async def areas(self, time_range: Optional[TimeRange] = None) -> List[AreaDistribution]:
        result = await self._fetch("areas", time_range)
        return parse(List[AreaDistribution], result or [], "area distribution")
