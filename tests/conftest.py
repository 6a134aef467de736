import itertools
from datetime import datetime, timedelta

import pytest
from pydantic.alias_generators import to_camel, to_snake

from complaint_desk.client import ComplaintDesk
from complaint_desk.core.transport import convert_keys
from complaint_desk.models.complaints import Complaint
from complaint_desk.models.feedback import Feedback
from complaint_desk.schemas.complaints import ComplaintQuery
from complaint_desk.utils import aggregation
from complaint_desk.utils.filters import apply_query

NOISE_COMPLAINT = {
    "title": "Noise",
    "category": "noise",
    "source": "hotline",
    "area": "A区",
    "complainantName": "Li",
    "level": "high",
    "content": "loud music",
}


def to_wire(model):
    return convert_keys(model.model_dump(mode="json"), to_camel)


class FakeBackend:
    """
    In-memory server speaking the RPC-style, camelCase wire format.

    Endpoints deliberately mix raw payloads and {code, msg, data} envelopes.
    """

    def __init__(self):
        self.complaints = {}
        self.records = []
        self.feedback = {}
        self.calls = []
        self.echo_created = True
        self.created_reply = None
        self.failing = set()
        self.feedback_reply = None
        self.now = datetime(2024, 5, 1, 9, 0)
        self._ids = itertools.count(1)

    def tick(self) -> datetime:
        self.now += timedelta(minutes=5)
        return self.now

    def seed(self, **overrides) -> Complaint:
        complaint_id = next(self._ids)
        created_at = overrides.pop("created_at", self.tick())
        data = {
            "id": complaint_id,
            "title": f"Ticket {complaint_id}",
            "category": "noise",
            "source": "hotline",
            "level": "normal",
            "area": "A区",
            "complainant_name": "Wang",
            "content": "details",
            "status": "pending",
            "created_at": created_at,
            "updated_at": created_at,
        }
        data.update(overrides)
        complaint = Complaint.model_validate(data)
        self.complaints[complaint_id] = complaint
        return complaint

    def add_feedback(self, **overrides) -> Feedback:
        feedback_id = len(self.feedback) + 1
        data = {"id": feedback_id, "ticket_no": 1, "survey_code": f"S-{feedback_id}", "created_at": self.tick()}
        data.update(overrides)
        feedback = Feedback.model_validate(data)
        self.feedback[feedback_id] = feedback
        return feedback

    def history_for(self, ticket_no):
        return [r for r in self.records if r["ticketNo"] == ticket_no]

    def _maybe_fail(self, name):
        if name in self.failing:
            self.failing.discard(name)
            raise RuntimeError(f"{name} unavailable")

    def count_calls(self, method, path):
        return sum(1 for call in self.calls if call[0] == method and call[1] == path)

    async def get(self, path, params=None):
        self.calls.append(("GET", path, params))
        params = convert_keys(params or {}, to_snake)

        if path == "/system/complaint/list":
            page = apply_query(self.complaints.values(), ComplaintQuery.normalize(params))
            return {"code": 200, "data": {"list": [to_wire(c) for c in page.items], "total": page.total}}

        if path == "/system/complaint/get":
            complaint = self.complaints.get(params["id"])
            if complaint is None:
                return {"code": 404, "msg": "投诉不存在"}
            return {"code": 200, "data": to_wire(complaint)}

        if path == "/system/complaint/records":
            return [r for r in reversed(self.records) if r["ticketNo"] == params["ticket_no"]]

        if path == "/system/complaintFeedback/list":
            if self.feedback_reply is not None:
                return self.feedback_reply
            items = [f for f in self.feedback.values() if params.get("ticket_no") in (None, f.ticket_no)]
            return {"list": [to_wire(f) for f in items], "total": len(items)}

        population = list(self.complaints.values())
        time_range = params.get("time_range")
        if path == "/statistics/overview":
            return {"data": to_wire(aggregation.overview(population, time_range, self.now))}
        if path == "/statistics/types":
            return {"data": [to_wire(t) for t in aggregation.type_distribution(population, time_range, self.now)]}
        if path == "/statistics/monthly-trends":
            return [to_wire(t) for t in aggregation.monthly_trends(population, time_range, self.now)]
        if path == "/statistics/areas":
            return [to_wire(a) for a in aggregation.area_distribution(population, time_range, self.now)]

        raise AssertionError(f"Unexpected GET {path}")

    async def post(self, path, params=None):
        self.calls.append(("POST", path, params))

        if path == "/system/complaint/add":
            now = self.tick()
            complaint_id = next(self._ids)
            data = convert_keys(params, to_snake)
            complaint = Complaint.model_validate(
                {**data, "id": complaint_id, "status": "pending", "created_at": now, "updated_at": now}
            )
            self.complaints[complaint_id] = complaint
            if self.created_reply is not None:
                return self.created_reply
            if self.echo_created:
                return to_wire(complaint)
            return {"code": 200, "msg": "操作成功", "data": complaint_id}

        if path == "/system/complaint/records/add":
            self._maybe_fail("records")
            now = self.tick().isoformat()
            self.records.append({**params, "id": len(self.records) + 1, "createdAt": now, "updatedAt": now})
            return {"code": 200, "msg": "操作成功"}

        raise AssertionError(f"Unexpected POST {path}")

    async def put(self, path, params=None):
        self.calls.append(("PUT", path, params))
        assert path == "/system/complaint/edit"
        self._maybe_fail("edit")

        data = convert_keys(params, to_snake)
        complaint = self.complaints[data.pop("id")]
        updated = Complaint.model_validate({**complaint.model_dump(), **data, "updated_at": self.tick()})
        self.complaints[updated.id] = updated
        return {"code": 200, "msg": "操作成功"}

    async def delete(self, path, params=None):
        self.calls.append(("DELETE", path, params))

        if path == "/system/complaint/delete":
            store = self.complaints
        elif path == "/system/complaintFeedback/batch":
            store = self.feedback
        else:
            raise AssertionError(f"Unexpected DELETE {path}")

        for item_id in params["ids"]:
            store.pop(item_id, None)
        return {"code": 200, "msg": "操作成功"}


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def desk(backend):
    return ComplaintDesk(backend, operator="admin")
