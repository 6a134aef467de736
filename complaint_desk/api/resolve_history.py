import logging
from typing import Iterable, List, Optional

from complaint_desk.api.paths import paths_for
from complaint_desk.core.config import API_STYLE
from complaint_desk.core.errors import InvalidTransitionError
from complaint_desk.core.transport import TransportShim, parse
from complaint_desk.models.complaints import ComplaintId
from complaint_desk.models.resolve_history import ResolveHistory, ResolveHistoryCreate
from complaint_desk.utils.dates import as_utc_naive

logger = logging.getLogger(__name__)


def check_order(entries: Iterable[ResolveHistory]) -> None:
    """Raise if the history, oldest first, ever moves a ticket back to an earlier status."""
    previous = None
    for entry in sorted(entries, key=lambda e: as_utc_naive(e.created_at)):
        if previous is not None and entry.status.rank < previous.status.rank:
            raise InvalidTransitionError(previous.status, entry.status)
        previous = entry


class ResolveHistoryApi:
    def __init__(self, shim: TransportShim, style: str = API_STYLE):
        self.shim = shim
        self.paths = paths_for(style)

    async def list(self, ticket_no: ComplaintId) -> List[ResolveHistory]:
        """
        Resolve history of one ticket, oldest entry first.
        """
        result = await self.shim.get(self.paths["records"], {"ticket_no": ticket_no})
        entries = parse(List[ResolveHistory], result or [], "resolve history")
        return sorted(entries, key=lambda e: as_utc_naive(e.created_at))

    async def add(self, entry: ResolveHistoryCreate) -> Optional[ResolveHistory]:
        result = await self.shim.post(self.paths["add_record"], entry.model_dump())
        logger.info("Recorded status %s for complaint %s by %s", entry.status.value, entry.ticket_no, entry.operator)

        # Some servers echo the stored row, others return nothing
        if isinstance(result, dict) and "created_at" in result:
            return parse(ResolveHistory, result, "resolve history entry")
        return None
