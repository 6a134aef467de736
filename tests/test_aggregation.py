import math
from datetime import datetime, timedelta

import pytest

from complaint_desk.core.errors import ValidationError
from complaint_desk.models.complaints import Complaint, ComplaintArea
from complaint_desk.utils import aggregation

NOW = datetime(2024, 6, 15, 12, 0)


def make(created_at, status="pending", category="noise", area="A区", level="normal", hours=0, satisfaction=None):
    return Complaint(
        id=f"{category}-{created_at.isoformat()}-{hours}",
        title="t",
        category=category,
        source="hotline",
        level=level,
        area=area,
        complainant_name="Li",
        status=status,
        created_at=created_at,
        updated_at=created_at + timedelta(hours=hours),
        satisfaction=satisfaction,
    )


def test_overview_of_nothing():
    stats = aggregation.overview([])

    assert stats.total_complaints == 0
    assert stats.completion_rate == 0
    assert stats.satisfaction_score == 0
    assert stats.satisfaction_total == 0
    assert stats.average_processing_time == 0
    assert not math.isnan(stats.completion_rate)


def test_overview():
    complaints = [
        make(NOW - timedelta(days=1), status="completed", hours=2, satisfaction=5),
        make(NOW - timedelta(days=2), status="completed", hours=4, satisfaction=3),
        make(NOW - timedelta(days=3), status="processing", level="urgent"),
        make(NOW - timedelta(days=4), level="urgent"),
    ]

    stats = aggregation.overview(complaints, now=NOW)

    assert stats.total_complaints == 4
    assert stats.pending_complaints == 1
    assert stats.completed_complaints == 2
    assert stats.urgent_complaints == 2
    assert stats.average_processing_time == 3.0
    assert stats.completion_rate == 0.5
    assert stats.satisfaction_score == 4.0
    assert stats.satisfaction_total == 2


def test_overview_time_range():
    complaints = [
        make(NOW - timedelta(days=3), status="completed"),
        make(NOW - timedelta(days=20)),
        make(NOW - timedelta(days=200)),
    ]

    assert aggregation.overview(complaints, "week", NOW).total_complaints == 1
    assert aggregation.overview(complaints, "month", NOW).total_complaints == 2
    assert aggregation.overview(complaints, "year", NOW).total_complaints == 3
    assert aggregation.overview(complaints).total_complaints == 3


def test_unknown_time_range():
    with pytest.raises(ValidationError):
        aggregation.overview([], "decade")


def test_type_distribution_with_trend():
    complaints = [
        make(NOW - timedelta(days=1), category="noise"),
        make(NOW - timedelta(days=2), category="noise"),
        make(NOW - timedelta(days=3), category="water"),
        make(NOW - timedelta(days=4), category="road"),
        # previous week
        make(NOW - timedelta(days=8), category="noise"),
        make(NOW - timedelta(days=9), category="water"),
        make(NOW - timedelta(days=10), category="road"),
        make(NOW - timedelta(days=11), category="road"),
    ]

    types = aggregation.type_distribution(complaints, "week", NOW)

    assert [(t.type, t.count, t.trend) for t in types] == [
        ("noise", 2, "up"),
        ("road", 1, "down"),
        ("water", 1, "flat"),
    ]
    assert [t.percentage for t in types] == [50.0, 25.0, 25.0]
    assert sum(t.count for t in types) == aggregation.overview(complaints, "week", NOW).total_complaints


def test_type_distribution_all_time_is_flat():
    types = aggregation.type_distribution([make(NOW), make(NOW, category="water")])
    assert {t.trend for t in types} == {"flat"}
    assert sum(t.percentage for t in types) == 100


def test_type_percentages_rounded():
    complaints = [make(NOW, category=c) for c in ("a", "b", "c")]
    types = aggregation.type_distribution(complaints)
    assert [t.percentage for t in types] == [33.33, 33.33, 33.33]


def test_monthly_trends_fill_gaps():
    complaints = [
        make(datetime(2024, 1, 10), status="completed"),
        make(datetime(2024, 1, 20)),
        make(datetime(2024, 4, 2), status="completed"),
    ]

    trends = aggregation.monthly_trends(complaints)

    assert [t.month for t in trends] == ["2024-01", "2024-02", "2024-03", "2024-04"]
    assert [t.total_count for t in trends] == [2, 0, 0, 1]
    assert [t.completed_count for t in trends] == [1, 0, 0, 1]
    assert [t.completion_rate for t in trends] == [0.5, 0.0, 0.0, 1.0]


def test_monthly_trends_for_a_range_cover_the_window():
    trends = aggregation.monthly_trends([make(datetime(2024, 6, 1))], "quarter", NOW)

    assert [t.month for t in trends] == ["2024-03", "2024-04", "2024-05", "2024-06"]
    assert trends[-1].total_count == 1


def test_monthly_trends_cross_year():
    complaints = [make(datetime(2023, 11, 5)), make(datetime(2024, 2, 5))]
    months = [t.month for t in aggregation.monthly_trends(complaints)]
    assert months == ["2023-11", "2023-12", "2024-01", "2024-02"]


def test_monthly_trends_empty():
    assert aggregation.monthly_trends([]) == []


def test_area_distribution():
    complaints = [make(NOW, area="A区"), make(NOW, area="A区"), make(NOW, area="B区")]

    areas = aggregation.area_distribution(complaints)

    assert [(a.area, a.count) for a in areas] == [(ComplaintArea.A, 2), (ComplaintArea.B, 1)]
    assert abs(sum(a.percentage for a in areas) - 100) < 0.02
    assert sum(a.count for a in areas) == aggregation.overview(complaints).total_complaints


def test_area_distribution_empty():
    areas = aggregation.area_distribution([])
    assert [(a.count, a.percentage) for a in areas] == [(0, 0.0), (0, 0.0)]


def test_aware_timestamps():
    from datetime import timezone

    complaint = make(datetime(2024, 6, 15, 11, 0, tzinfo=timezone.utc), status="completed", hours=1)
    assert aggregation.overview([complaint], "week", NOW).total_complaints == 1


def test_scope_includes_window_edges():
    edge = make(NOW - timedelta(days=7))
    outside = make(NOW - timedelta(days=7, seconds=1))
    at_now = make(NOW)

    scoped = aggregation.in_scope([edge, outside, at_now], "week", NOW)

    assert scoped == [edge, at_now]
