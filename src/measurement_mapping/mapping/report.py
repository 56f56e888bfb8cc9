"""Display text and tabular report formatting for measurements.

The report builder is stateless: it reads a frozen :class:`ReportSnapshot`
and returns a fresh :class:`Report` on every call, so the lazy generator
stored on a measurement can be invoked any number of times.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

import numpy as np

from measurement_mapping.domain.models import MappedAnnotation, Report, ReportSnapshot
from measurement_mapping.mapping.constants import (
    BIDIRECTIONAL_ANNOTATION_TYPE,
    MEASUREMENT_UNIT,
)


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------

def round_number(value: float, decimals: int = 2) -> Decimal:
    """Round *value* half-up to *decimals* places.

    Rounding is done on the shortest decimal representation of the float,
    so ``12.345`` rounds to ``12.35`` rather than ``12.34``.  Infinities
    and NaN are returned unrounded.
    """
    number = Decimal(repr(float(value)))
    if not number.is_finite():
        return number
    quantum = Decimal(1).scaleb(-decimals)
    return number.quantize(quantum, rounding=ROUND_HALF_UP)


def format_number(value: float | Decimal) -> str:
    """Format a number without trailing zeros (``5.60`` -> ``"5.6"``)."""
    number = value if isinstance(value, Decimal) else Decimal(repr(float(value)))
    if not number.is_finite():
        return _format_non_finite(number)
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


def format_points(points: Sequence[Sequence[float]]) -> str:
    """Serialize handle points as ``"x y z;x y z;..."``.

    Integral coordinates are written without a decimal point, so
    ``[[1, 2, 3], [4, 5, 6]]`` becomes ``"1 2 3;4 5 6"``.
    """
    if len(points) == 0:
        return ""
    coords = np.asarray(points, dtype=np.float64)
    if coords.ndim != 2:
        raise ValueError(f"Expected a list of points, got shape {coords.shape}")
    return ";".join(
        " ".join(_format_coordinate(c) for c in point) for point in coords
    )


def _format_non_finite(number: Decimal) -> str:
    if number.is_nan():
        return "NaN"
    return "-Infinity" if number.is_signed() else "Infinity"


def _format_coordinate(value: np.float64) -> str:
    value = float(value)
    if not np.isfinite(value):
        return _format_non_finite(Decimal(repr(value)))
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

def get_display_text(mapped_annotations: Sequence[MappedAnnotation] | None) -> list[str]:
    """Return the two-line label shown next to the annotation.

    Only the first target is shown; length and width are assumed to be the
    same on every target of a single annotation.
    """
    if not mapped_annotations:
        return []

    first = mapped_annotations[0]
    length = format_number(round_number(first.length, 2))
    width = format_number(round_number(first.width, 2))

    return [
        f"L: {length} {MEASUREMENT_UNIT} (S: {first.series_number})",
        f"W: {width} {MEASUREMENT_UNIT}",
    ]


def build_report(snapshot: ReportSnapshot) -> Report:
    """Build the tabular (column/value) report of a measurement.

    Columns are emitted in this order:

    * ``AnnotationType``
    * ``Length (mm)`` and ``Width (mm)`` for each target, in target order
    * ``FrameOfReferenceUID`` when known
    * ``points`` when the annotation carries a handle point list, even an
      empty one

    Parameters
    ----------
    snapshot:
        Frozen copy of the values captured at conversion time.

    Returns
    -------
    Report
        Index-aligned columns and values.
    """
    columns: list[str] = ["AnnotationType"]
    values: list[object] = [BIDIRECTIONAL_ANNOTATION_TYPE]

    for mapped in snapshot.mapped_annotations:
        columns.extend(["Length (mm)", "Width (mm)"])
        values.extend([mapped.length, mapped.width])

    if snapshot.frame_of_reference_uid:
        columns.append("FrameOfReferenceUID")
        values.append(snapshot.frame_of_reference_uid)

    if snapshot.points is not None:
        columns.append("points")
        values.append(format_points(snapshot.points))

    return Report(columns=tuple(columns), values=tuple(values))
