import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Protocol

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel, to_snake

from complaint_desk.core.config import BASE_URL, TIMEOUT, WIRE_CASE
from complaint_desk.core.errors import ComplaintDeskError, NotFoundError, TransportError

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = {"data", "code", "msg", "message", "success"}
OK_CODES = {"0", "200"}


class Transport(Protocol):
    """Collaborator that talks to the server. Responses may be raw or wrapped in {data: ...}."""

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any: ...

    async def post(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any: ...

    async def put(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any: ...

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any: ...


class HttpTransport:
    """Default collaborator: one httpx.AsyncClient, query string for GET/DELETE, JSON body otherwise."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = TIMEOUT,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=dict(headers or {}),
            transport=transport,
        )

    async def get(self, path, params=None):
        return await self.request("GET", path, params)

    async def post(self, path, params=None):
        return await self.request("POST", path, params)

    async def put(self, path, params=None):
        return await self.request("PUT", path, params)

    async def delete(self, path, params=None):
        return await self.request("DELETE", path, params)

    async def request(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        kwargs = {}
        if params is not None:
            if method in ("GET", "DELETE"):
                kwargs["params"] = {k: v for k, v in params.items() if v is not None}
            else:
                kwargs["json"] = params

        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request %s %s failed: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e

        logger.info("%s %s -> %s", method, path, resp.status_code)

        if resp.status_code == 404:
            raise NotFoundError(f"{path} not found")
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text}", status_code=resp.status_code)
        if not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {method} {path}", status_code=resp.status_code) from e

    async def aclose(self) -> None:
        await self._client.aclose()


def convert_keys(value: Any, convert: Callable[[str], str]) -> Any:
    if isinstance(value, Mapping):
        return {convert(k) if isinstance(k, str) else k: convert_keys(v, convert) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [convert_keys(v, convert) for v in value]
    return value


def _jsonable(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return getattr(value, "value", value)


def unwrap(payload: Any) -> Any:
    """Strip the {code, msg, data} envelope some endpoints use."""
    if not isinstance(payload, dict) or not payload or not set(payload) <= ENVELOPE_KEYS:
        return payload
    if "data" not in payload and "code" not in payload:
        return payload

    code = payload.get("code")
    if code is not None and str(code) not in OK_CODES:
        message = payload.get("msg") or payload.get("message") or f"Server returned code {code}"
        status_code = code if isinstance(code, int) else None
        if status_code == 404:
            raise NotFoundError(message)
        raise TransportError(message, status_code=status_code)
    return payload.get("data")


def parse(schema: Any, data: Any, what: str) -> Any:
    """Validate a normalized response against a model or type; malformed bodies are transport failures."""
    try:
        return TypeAdapter(schema).validate_python(data)
    except PydanticValidationError as e:
        logger.error("Malformed %s in response: %s", what, e)
        raise TransportError(f"Malformed {what} in response") from e


class TransportShim:
    """
    Single normalization point between the resource clients and the collaborator.

    Outgoing params are made JSON-friendly and converted to the wire key style.
    Incoming payloads are unwrapped from their envelope and converted back to
    snake_case, so callers never branch on envelope shape.
    """

    def __init__(self, transport: Transport, wire_case: str = WIRE_CASE):
        if wire_case not in ("camel", "snake"):
            raise ValueError(f"Unsupported wire case: {wire_case}")
        self.transport = transport
        self._to_wire = to_camel if wire_case == "camel" else (lambda key: key)

    async def request(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        wire_params = None if params is None else convert_keys(_jsonable(params), self._to_wire)
        call = getattr(self.transport, method.lower())

        try:
            payload = await call(path, wire_params)
        except ComplaintDeskError:
            raise
        except Exception as e:
            logger.error("Transport failure on %s %s: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e

        return convert_keys(unwrap(payload), to_snake)

    async def get(self, path, params=None):
        return await self.request("GET", path, params)

    async def post(self, path, params=None):
        return await self.request("POST", path, params)

    async def put(self, path, params=None):
        return await self.request("PUT", path, params)

    async def delete(self, path, params=None):
        return await self.request("DELETE", path, params)


def page_payload(result: Any) -> dict:
    """Paged body as {list, total}; bare arrays and null lists are accepted."""
    if isinstance(result, list):
        result = {"list": result, "total": len(result)}
    page = dict(result or {})
    page["list"] = list(page.get("list") or [])
    if page.get("total") is None:
        page["total"] = len(page["list"])
    return page
