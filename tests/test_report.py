"""Tests for display text and report formatting helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from measurement_mapping.domain.models import MappedAnnotation, ReportSnapshot
from measurement_mapping.mapping.report import (
    build_report,
    format_number,
    format_points,
    get_display_text,
    round_number,
)


def _mapped(length: float, width: float, series_number="3") -> MappedAnnotation:
    return MappedAnnotation(
        series_instance_uid="1.2.3",
        series_number=series_number,
        unit="mm",
        length=length,
        width=width,
    )


# =====================================================================
# Number formatting
# =====================================================================


class TestNumberFormatting:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (12.345, "12.35"),
            (5.6, "5.6"),
            (4.0, "4"),
            (0.005, "0.01"),
            (1.004, "1"),
            (99.999, "100"),
        ],
    )
    def test_round_then_format(self, value, expected):
        assert format_number(round_number(value, 2)) == expected

    def test_round_number_is_half_up(self):
        assert round_number(2.675, 2) == Decimal("2.68")

    def test_format_number_accepts_float(self):
        assert format_number(7.50) == "7.5"


class TestFormatPoints:

    def test_integer_points(self):
        assert format_points([[1, 2, 3], [4, 5, 6]]) == "1 2 3;4 5 6"

    def test_fractional_points(self):
        assert format_points([(0.5, -1.25, 10.0)]) == "0.5 -1.25 10"

    def test_rejects_flat_list(self):
        with pytest.raises(ValueError):
            format_points([1, 2, 3])

    def test_empty_list(self):
        assert format_points([]) == ""


# =====================================================================
# Display text
# =====================================================================


class TestDisplayText:

    def test_two_lines(self):
        assert get_display_text([_mapped(12.345, 5.6)]) == [
            "L: 12.35 mm (S: 3)",
            "W: 5.6 mm",
        ]

    def test_empty(self):
        assert get_display_text([]) == []
        assert get_display_text(None) == []

    def test_uses_first_target_only(self):
        text = get_display_text([_mapped(1.0, 2.0, 7), _mapped(3.0, 4.0, 8)])
        assert text == ["L: 1 mm (S: 7)", "W: 2 mm"]

    def test_non_finite_values(self):
        assert get_display_text([_mapped(float("inf"), 1.0)]) == [
            "L: Infinity mm (S: 3)",
            "W: 1 mm",
        ]
        assert get_display_text([_mapped(float("nan"), float("-inf"))]) == [
            "L: NaN mm (S: 3)",
            "W: -Infinity mm",
        ]


# =====================================================================
# Report
# =====================================================================


class TestBuildReport:

    def test_type_column_always_first(self):
        report = build_report(ReportSnapshot())
        assert report.columns == ("AnnotationType",)
        assert report.values == ("Cornerstone3D:Bidirectional",)

    def test_empty_points_still_emit_column(self):
        report = build_report(ReportSnapshot(points=()))
        assert list(zip(report.columns, report.values)) == [
            ("AnnotationType", "Cornerstone3D:Bidirectional"),
            ("points", ""),
        ]

    def test_full_report(self):
        snapshot = ReportSnapshot(
            mapped_annotations=(_mapped(10.0, 4.0), _mapped(11.0, 5.0)),
            points=((1, 2, 3), (4, 5, 6)),
            frame_of_reference_uid="1.2.9",
        )
        report = build_report(snapshot)
        assert list(zip(report.columns, report.values)) == [
            ("AnnotationType", "Cornerstone3D:Bidirectional"),
            ("Length (mm)", 10.0),
            ("Width (mm)", 4.0),
            ("Length (mm)", 11.0),
            ("Width (mm)", 5.0),
            ("FrameOfReferenceUID", "1.2.9"),
            ("points", "1 2 3;4 5 6"),
        ]
