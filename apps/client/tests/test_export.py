"""Tests for the comparison report and its PDF rendering."""

from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from airease_client.export.pdf import format_duration, format_stops, render_pdf
from airease_client.export.report import NO, UNKNOWN, YES, build_comparison_report
from airease_core.schemas import ComparisonMetric
from airease_ml.comparison import ComparisonAggregator
from airease_ml.errors import InvalidComparisonSet


@pytest.fixture
def compared(make_scored):
    flights = [
        make_scored(
            "A",
            price=180.0,
            overall=8.37,
            duration_minutes=290,
            facilities={
                "hasWifi": True,
                "hasIFE": True,
                "ifeType": "Personal screens",
                "mealIncluded": False,
                "seatPitchInches": 32,
            },
        ),
        make_scored("B", price=260.0, overall=7.91, duration_minutes=250, stops=1),
    ]
    return flights, ComparisonAggregator().compare(flights)


def test_report_reads_scores_without_recomputing(compared):
    flights, result = compared
    report = build_comparison_report(result, flights)

    assert [c.flight_id for c in report.cards] == ["A", "B"]
    assert report.cards[0].overall_score == flights[0].score.overall_score
    assert report.cards[0].is_best_overall
    assert report.cards[0].is_lowest_price
    assert report.cards[1].is_shortest

    rows = {row.metric: row for row in report.dimension_rows}
    assert rows[ComparisonMetric.OVERALL_SCORE].values == (8.37, 7.91)
    assert rows[ComparisonMetric.OVERALL_SCORE].best == (True, False)
    # identical dimension values tie
    assert rows[ComparisonMetric.COMFORT].best == (True, True)
    assert report.signature == result.signature


def test_amenity_rows_keep_unknown_distinct(compared):
    flights, result = compared
    report = build_comparison_report(result, flights)
    amenities = {row.label: row.values for row in report.amenity_rows}

    assert amenities["WiFi"] == (YES, UNKNOWN)
    assert amenities["Entertainment"] == ("Personal screens", UNKNOWN)
    assert amenities["Meals"] == (NO, UNKNOWN)
    assert amenities["Seat Pitch"] == ('32"', UNKNOWN)


def test_report_requires_a_valid_set(make_scored):
    single = [make_scored("A")]
    result = ComparisonAggregator().compare(single)
    with pytest.raises(InvalidComparisonSet):
        build_comparison_report(result, single)


def test_report_rejects_foreign_result(compared, make_scored):
    flights, _ = compared
    other = [make_scored("X"), make_scored("Y")]
    foreign = ComparisonAggregator().compare(other)
    with pytest.raises(ValueError, match="does not belong"):
        build_comparison_report(foreign, flights)


def test_render_pdf(compared):
    flights, result = compared
    pdf = render_pdf(build_comparison_report(result, flights))
    assert pdf.startswith(b"%PDF")


def test_render_pdf_with_chart(compared):
    flights, result = compared
    buf = BytesIO()
    Image.new("RGB", (1200, 600), "white").save(buf, format="PNG")

    without_chart = render_pdf(build_comparison_report(result, flights))
    with_chart = render_pdf(build_comparison_report(result, flights), buf.getvalue())

    assert with_chart.startswith(b"%PDF")
    assert len(with_chart) > len(without_chart)


@pytest.mark.parametrize(
    ("minutes", "text"), [(300, "5h"), (290, "4h 50m"), (45, "0h 45m")]
)
def test_format_duration(minutes, text):
    assert format_duration(minutes) == text


def test_format_stops():
    assert [format_stops(n) for n in range(3)] == ["Direct", "1 stop", "2 stops"]
