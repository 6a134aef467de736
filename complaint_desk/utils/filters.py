from typing import Iterable, List, TypeVar

from complaint_desk.models.complaints import ComplaintListItem
from complaint_desk.schemas.complaints import ComplaintQuery, Page
from complaint_desk.utils.dates import as_utc_naive

C = TypeVar("C", bound=ComplaintListItem)


def matches(complaint: ComplaintListItem, query: ComplaintQuery) -> bool:
    """True if the complaint passes every filter in the query (pagination aside)."""
    if query.status is not None and complaint.status != query.status:
        return False
    if query.category is not None and complaint.category != query.category:
        return False
    if query.level is not None and complaint.level != query.level:
        return False
    if query.area is not None and complaint.area != query.area:
        return False

    if query.date_range is not None:
        start, end = (as_utc_naive(bound) for bound in query.date_range)
        if not start <= as_utc_naive(complaint.created_at) <= end:
            return False

    if query.keyword:
        needle = query.keyword.casefold()
        haystacks = (complaint.title, complaint.complainant_name)
        if not any(needle in (text or "").casefold() for text in haystacks):
            return False

    return True


def apply_query(complaints: Iterable[C], query: ComplaintQuery) -> Page:
    """Filter, order by created_at and cut one page. total counts every match."""
    selected: List[C] = [c for c in complaints if matches(c, query)]
    selected.sort(key=lambda c: as_utc_naive(c.created_at), reverse=query.order_by == "desc")

    start = (query.page_num - 1) * query.page_size
    return Page(items=selected[start:start + query.page_size], total=len(selected))
