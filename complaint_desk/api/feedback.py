import logging
from typing import Any, Mapping, Sequence, Union

from complaint_desk.api.paths import paths_for
from complaint_desk.core.config import API_STYLE
from complaint_desk.core.transport import TransportShim, page_payload, parse
from complaint_desk.models.complaints import ComplaintId
from complaint_desk.models.feedback import Feedback
from complaint_desk.schemas.complaints import FeedbackQuery, Page

logger = logging.getLogger(__name__)


class FeedbackApi:
    def __init__(self, shim: TransportShim, style: str = API_STYLE):
        self.shim = shim
        self.paths = paths_for(style)

    async def list(self, query: Union[FeedbackQuery, Mapping[str, Any], None] = None) -> Page[Feedback]:
        query = FeedbackQuery.normalize(query)
        result = await self.shim.get(self.paths["feedback_list"], query.to_params())
        return parse(Page[Feedback], page_payload(result), "feedback page")

    async def delete(self, ids: Sequence[ComplaintId]) -> None:
        """Batch delete; ids the server no longer has are skipped."""
        batch = list(ids)
        if not batch:
            return
        await self.shim.delete(self.paths["feedback_delete"], {"ids": batch})
        logger.info("Deleted %s feedback entries", len(batch))
