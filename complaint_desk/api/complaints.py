import logging
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from complaint_desk.api.paths import paths_for
from complaint_desk.api.resolve_history import ResolveHistoryApi
from complaint_desk.core.config import API_STYLE, DEFAULT_OPERATOR
from complaint_desk.core.dictionary import COMPLAINT_DICT_TYPES, CodeDictionary
from complaint_desk.core.errors import (
    InvalidTransitionError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from complaint_desk.core.transport import TransportShim, page_payload, parse
from complaint_desk.models.complaints import (
    Complaint,
    ComplaintId,
    ComplaintListItem,
    canonical_fields,
)
from complaint_desk.models.resolve_history import ResolveHistoryCreate
from complaint_desk.schemas.complaints import ComplaintCreate, ComplaintQuery, ComplaintUpdate, Page

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Mapping[str, Any]]


def _validate(schema, payload: Payload, what: str):
    data = payload.model_dump(exclude_unset=True) if isinstance(payload, BaseModel) else payload
    try:
        return schema.model_validate(canonical_fields(data))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, what) from e


class ComplaintApi:
    """
    Complaint lifecycle: create, read, list, update and delete tickets.

    Status only ever moves forward (pending -> processing -> completed). Every
    accepted status change is followed by exactly one resolve-history entry.
    Input problems that can be detected locally raise ValidationError before
    anything is sent.
    """

    def __init__(
        self,
        shim: TransportShim,
        dictionary: Optional[CodeDictionary] = None,
        style: str = API_STYLE,
        operator: str = DEFAULT_OPERATOR,
        history: Optional[ResolveHistoryApi] = None,
    ):
        self.shim = shim
        self.dictionary = dictionary or CodeDictionary()
        self.style = style
        self.paths = paths_for(style)
        self.operator = operator
        self.history = history or ResolveHistoryApi(shim, style)

    def _item_path(self, name: str, complaint_id: ComplaintId) -> str:
        return self.paths[name].format(id=complaint_id)

    async def _resolve(self, result: Any, complaint_id: Optional[ComplaintId] = None) -> Complaint:
        # Full record echoed back, or just an id we have to look up
        if isinstance(result, Mapping) and "title" in result:
            return parse(Complaint, canonical_fields(result), "complaint")

        if complaint_id is None:
            complaint_id = result.get("id") if isinstance(result, Mapping) else result
        if complaint_id is None or isinstance(complaint_id, (bool, list, dict)):
            raise TransportError("Server response did not identify the complaint")
        return await self.get(complaint_id)

    async def _put(self, complaint_id: ComplaintId, values: Mapping[str, Any]) -> Any:
        if self.style == "rest":
            return await self.shim.put(self._item_path("update", complaint_id), values)
        return await self.shim.put(self.paths["update"], {"id": complaint_id, **values})

    async def create(self, payload: Payload) -> Complaint:
        data = _validate(ComplaintCreate, payload, "complaint")
        values = data.model_dump(exclude_none=True)
        self.dictionary.validate(values, COMPLAINT_DICT_TYPES)

        result = await self.shim.post(self.paths["create"], values)
        if result is None:
            raise TransportError("Complaint was created but the server did not return its id")
        complaint = await self._resolve(result)
        logger.info("Created complaint %s (%s)", complaint.id, complaint.title)
        return complaint

    async def get(self, complaint_id: ComplaintId) -> Complaint:
        if self.style == "rest":
            result = await self.shim.get(self._item_path("detail", complaint_id))
        else:
            result = await self.shim.get(self.paths["detail"], {"id": complaint_id})

        if not result:
            raise NotFoundError(f"Complaint {complaint_id} not found")
        return parse(Complaint, canonical_fields(result), "complaint")

    async def list(self, query: Union[ComplaintQuery, Mapping[str, Any], None] = None) -> Page[ComplaintListItem]:
        query = ComplaintQuery.normalize(query)
        result = await self.shim.get(self.paths["list"], query.to_params())

        page = page_payload(result)
        page["list"] = [canonical_fields(item) for item in page["list"]]
        return parse(Page[ComplaintListItem], page, "complaint page")

    async def update(
        self,
        complaint_id: ComplaintId,
        payload: Payload,
        operator: Optional[str] = None,
    ) -> Complaint:
        changes = _validate(ComplaintUpdate, payload, "complaint update")
        values = changes.model_dump(exclude_none=True)
        self.dictionary.validate(values, COMPLAINT_DICT_TYPES)

        current = await self.get(complaint_id)
        new_status = changes.status
        status_changed = new_status is not None and new_status != current.status

        if status_changed and not current.status.can_move_to(new_status):
            logger.warning(
                "Rejected status change for complaint %s: %s -> %s",
                complaint_id, current.status.value, new_status.value,
            )
            raise InvalidTransitionError(current.status, new_status)
        if not status_changed:
            values.pop("status", None)

        result = await self._put(complaint_id, values)

        if status_changed:
            description = changes.processing_notes or (
                f"Status changed from {current.status.value} to {new_status.value}"
            )
            entry = ResolveHistoryCreate(
                ticket_no=complaint_id,
                status=new_status,
                operator=operator or self.operator,
                description=description,
            )
            try:
                await self.history.add(entry)
            except Exception:
                # Roll the status back so a retry changes it again and gets logged
                logger.error(
                    "History write failed for complaint %s, restoring status %s",
                    complaint_id, current.status.value,
                )
                await self._put(complaint_id, {"status": current.status.value})
                raise

        return await self._resolve(result, complaint_id)

    async def delete(self, ids: Union[ComplaintId, Sequence[ComplaintId]]) -> None:
        """
        Delete one ticket or a batch.

        A single id must exist (NotFoundError otherwise); ids in a batch that
        are already gone are skipped by the server.
        """
        if isinstance(ids, (list, tuple, set)):
            batch = list(ids)
            if not batch:
                return
            await self.shim.delete(self.paths["batch_delete"], {"ids": batch})
            logger.info("Deleted complaints %s", batch)
            return

        await self.get(ids)
        if self.style == "rest":
            await self.shim.delete(self._item_path("delete", ids))
        else:
            await self.shim.delete(self.paths["delete"], {"ids": [ids]})
        logger.info("Deleted complaint %s", ids)
