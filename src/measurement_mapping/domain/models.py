"""Domain models for the bidirectional measurement mapping.

Records handed to downstream consumers are frozen dataclasses.  The one
exception is :class:`AnnotationData`, which belongs to the external
annotation store; its ``label`` is the single field this package writes.

Engine payloads arrive as camelCase mappings.  They are validated once at
the boundary by the ``from_dict`` constructors below and flow through the
rest of the package as typed records.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _empty_dict() -> dict[str, Any]:
    """Return an empty dictionary."""
    return {}


def _to_float(value: Any) -> float:
    """Convert a cached statistic, mapping a null value to NaN."""
    if value is None:
        return math.nan
    return float(value)


def _to_points(
    raw: Sequence[Sequence[float]] | None,
) -> tuple[tuple[float, ...], ...] | None:
    """Copy a list of handle points into an immutable tuple of tuples."""
    if raw is None:
        return None
    return tuple(tuple(point) for point in raw)


# ---------------------------------------------------------------------------
# Annotation engine records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TargetStats:
    """Cached long/short axis statistics for one target, in millimetres."""

    length: float = 0.0
    width: float = 0.0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> TargetStats:
        return cls(
            length=_to_float(raw.get("length", 0.0)),
            width=_to_float(raw.get("width", 0.0)),
        )


@dataclass(frozen=True)
class AnnotationMetadata:
    """Tool and image reference information attached to an annotation."""

    tool_name: str = ""
    referenced_image_id: str | None = None
    frame_of_reference_uid: str | None = None
    referenced_series_instance_uid: str | None = None
    label: str | None = None
    view_plane_normal: tuple[float, ...] | None = None
    view_up: tuple[float, ...] | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> AnnotationMetadata:
        normal = raw.get("viewPlaneNormal")
        view_up = raw.get("viewUp")
        return cls(
            tool_name=raw.get("toolName", ""),
            referenced_image_id=raw.get("referencedImageId"),
            frame_of_reference_uid=raw.get("FrameOfReferenceUID"),
            referenced_series_instance_uid=raw.get("referencedSeriesInstanceUID"),
            label=raw.get("label"),
            view_plane_normal=tuple(normal) if normal is not None else None,
            view_up=tuple(view_up) if view_up is not None else None,
        )


@dataclass(frozen=True)
class AnnotationHandles:
    """Handle points of a drawn annotation as ``(x, y, z)`` world triples."""

    points: tuple[tuple[float, ...], ...] | None = None


@dataclass
class AnnotationData:
    """Mutable annotation payload owned by the annotation store."""

    handles: AnnotationHandles = field(default_factory=AnnotationHandles)
    cached_stats: dict[str, TargetStats] = field(default_factory=_empty_dict)
    label: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> AnnotationData:
        handles = raw.get("handles") or {}
        stats = raw.get("cachedStats") or {}
        return cls(
            handles=AnnotationHandles(points=_to_points(handles.get("points"))),
            cached_stats={
                target_id: TargetStats.from_dict(target_stats)
                for target_id, target_stats in stats.items()
            },
            label=raw.get("label") or "",
        )


@dataclass(frozen=True)
class RawAnnotation:
    """An annotation as held by the annotation engine.

    ``metadata`` and ``data`` are ``None`` when the engine payload lacked
    them; such annotations are treated as malformed by the mapping layer.
    """

    annotation_uid: str = ""
    metadata: AnnotationMetadata | None = None
    data: AnnotationData | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> RawAnnotation:
        metadata = raw.get("metadata")
        data = raw.get("data")
        return cls(
            annotation_uid=raw.get("annotationUID", ""),
            metadata=AnnotationMetadata.from_dict(metadata) if metadata is not None else None,
            data=AnnotationData.from_dict(data) if data is not None else None,
        )


@dataclass(frozen=True)
class AnnotationCompletedEvent:
    """Payload of a tool-completion event."""

    annotation: RawAnnotation
    viewport_id: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> AnnotationCompletedEvent:
        annotation = raw.get("annotation") or {}
        if not isinstance(annotation, RawAnnotation):
            annotation = RawAnnotation.from_dict(annotation)
        return cls(annotation=annotation, viewport_id=raw.get("viewportId"))


# ---------------------------------------------------------------------------
# Image hierarchy records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InstanceAttributes:
    """SOP instance, series and study identifiers of an image reference.

    ``sop_instance_uid`` is ``None`` when the reference was resolved from a
    volume viewport rather than a single image.
    """

    sop_instance_uid: str | None = None
    series_instance_uid: str | None = None
    study_instance_uid: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> InstanceAttributes:
        return cls(
            sop_instance_uid=raw.get("SOPInstanceUID"),
            series_instance_uid=raw.get("SeriesInstanceUID"),
            study_instance_uid=raw.get("StudyInstanceUID"),
        )


@dataclass(frozen=True)
class DisplaySet:
    """A group of images from one series, addressable by a stable UID."""

    display_set_instance_uid: str = ""
    series_instance_uid: str = ""
    series_number: str | int | None = None
    study_instance_uid: str = ""
    sop_instance_uids: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Measurement records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MappedAnnotation:
    """Per-target measurement values resolved against their display set."""

    series_instance_uid: str | None
    series_number: str | int | None
    unit: str
    length: float
    width: float


@dataclass(frozen=True)
class ReportSnapshot:
    """Everything needed to rebuild the tabular report of one measurement."""

    mapped_annotations: tuple[MappedAnnotation, ...] = ()
    points: tuple[tuple[float, ...], ...] | None = None
    frame_of_reference_uid: str | None = None


@dataclass(frozen=True)
class Report:
    """Index-aligned column labels and values for tabular export.

    Column labels may repeat when an annotation spans several targets.
    """

    columns: tuple[str, ...] = ()
    values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Measurement:
    """A display- and export-ready measurement record.

    ``report_generator`` is a zero-argument callable that rebuilds the
    :class:`Report` from a frozen snapshot each time it is invoked.
    """

    id: str
    sop_instance_uid: str | None
    frame_of_reference_uid: str | None
    points: tuple[tuple[float, ...], ...] | None
    metadata: AnnotationMetadata
    reference_series_uid: str | None
    reference_study_uid: str | None
    tool_name: str
    display_set_instance_uid: str | None
    label: str | None
    display_text: list[str]
    data: dict[str, TargetStats]
    type: Any
    report_generator: Callable[[], Report]

    @property
    def uid(self) -> str:
        """Alias of :attr:`id` used by label synchronisation."""
        return self.id

    def get_report(self) -> Report:
        """Build the tabular report for this measurement."""
        return self.report_generator()


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from YAML with environment overlays.

    Configuration is resolved in order:
      1. ``config/default.yaml``
      2. An optional overlay file
      3. Environment variables prefixed with ``MMAP_``
    """

    data: dict[str, Any] = field(default_factory=_empty_dict)

    # -- factory -----------------------------------------------------------

    @staticmethod
    def load(
        default_path: str | Path = "config/default.yaml",
        overlay_path: str | Path | None = None,
        env_prefix: str = "MMAP_",
    ) -> AppConfig:
        """Load configuration from YAML files and environment variables.

        Parameters
        ----------
        default_path:
            Path to the base configuration file.
        overlay_path:
            Optional path to an overlay merged on top of the base file.
        env_prefix:
            Prefix for environment variable overrides.  A variable named
            ``MMAP_LOGGING__LEVEL`` maps to ``config["logging"]["level"]``.

        Returns
        -------
        AppConfig
            Frozen configuration object exposing the merged dictionary via
            ``data``.
        """
        import os

        merged: dict[str, Any] = {}

        for path in (default_path, overlay_path):
            if path is None:
                continue
            candidate = Path(path)
            if candidate.exists():
                with open(candidate, "r", encoding="utf-8") as fh:
                    raw = yaml.safe_load(fh) or {}
                merged = _deep_merge(merged, raw)

        for key, value in os.environ.items():
            if key.startswith(env_prefix):
                parts = key[len(env_prefix):].lower().split("__")
                _set_nested(merged, parts, _coerce(value))

        return AppConfig(data=merged)

    # -- typed accessors ---------------------------------------------------

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Retrieve a value using a dot-separated path, e.g. ``logging.level``."""
        node: Any = self.data
        for part in dotted_key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def section(self, name: str) -> dict[str, Any]:
        """Return a top-level section as a dict (empty dict if missing)."""
        val = self.data.get(name)
        if isinstance(val, dict):
            return dict(val)
        return {}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into *base* (non-destructive)."""
    merged = dict(base)
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_nested(d: dict[str, Any], parts: list[str], value: Any) -> None:
    """Set a value in a nested dict using a list of keys."""
    for part in parts[:-1]:
        d = d.setdefault(part, {})
    if parts:
        d[parts[-1]] = value


def _coerce(value: str) -> Any:
    """Best-effort coercion from string to bool / int / float / list / str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if "," in value:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value
