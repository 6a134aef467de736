import logging
from typing import Mapping, Optional

from complaint_desk.api.complaints import ComplaintApi
from complaint_desk.api.feedback import FeedbackApi
from complaint_desk.api.resolve_history import ResolveHistoryApi
from complaint_desk.api.statistics import StatisticsApi
from complaint_desk.core.config import API_STYLE, BASE_URL, DEFAULT_OPERATOR, TIMEOUT, WIRE_CASE
from complaint_desk.core.dictionary import CodeDictionary
from complaint_desk.core.transport import HttpTransport, Transport, TransportShim

logger = logging.getLogger(__name__)


class ComplaintDesk:
    """
    Entry point wiring a transport to the resource clients.

    Pass ``transport`` to use your own collaborator; otherwise an
    HttpTransport is created for ``base_url`` and closed by ``aclose()``.

        async with ComplaintDesk(base_url="https://tickets.example.org") as desk:
            ticket = await desk.complaints.create({...})
            await desk.complaints.update(ticket.id, {"status": "processing"})
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT,
        headers: Optional[Mapping[str, str]] = None,
        style: str = API_STYLE,
        wire_case: str = WIRE_CASE,
        dictionary: Optional[CodeDictionary] = None,
        operator: str = DEFAULT_OPERATOR,
    ):
        self._owns_transport = transport is None
        self.transport = transport if transport is not None else HttpTransport(base_url, timeout, headers)
        self.shim = TransportShim(self.transport, wire_case)
        self.dictionary = dictionary or CodeDictionary()

        self.history = ResolveHistoryApi(self.shim, style)
        self.complaints = ComplaintApi(self.shim, self.dictionary, style, operator, self.history)
        self.feedback = FeedbackApi(self.shim, style)
        self.statistics = StatisticsApi(self.shim)
        logger.info("Complaint desk ready (style=%s, wire_case=%s)", style, wire_case)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> "ComplaintDesk":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
