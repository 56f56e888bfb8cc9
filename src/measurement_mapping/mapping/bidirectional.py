"""Measurement mapping for the Bidirectional annotation tool.

A bidirectional annotation is a long axis plus a perpendicular short axis.
:func:`to_measurement` converts a completed annotation into a
:class:`Measurement` for the tracking service and :func:`to_annotation`
pushes measurement label edits back onto the live annotation.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from measurement_mapping.domain.errors import (
    UnsupportedTargetError,
    UnsupportedToolError,
)
from measurement_mapping.domain.models import (
    AnnotationCompletedEvent,
    MappedAnnotation,
    Measurement,
    RawAnnotation,
    ReportSnapshot,
)
from measurement_mapping.domain.protocols import (
    AnnotationStoreProtocol,
    DisplaySetServiceProtocol,
    MetadataProviderProtocol,
    ReferenceResolverProtocol,
    ValueTypeResolver,
    ViewportServiceProtocol,
)
from measurement_mapping.mapping.constants import (
    IMAGE_TARGET_PREFIX,
    MEASUREMENT_UNIT,
    get_supported_tools,
)
from measurement_mapping.mapping.instance_attributes import (
    SOPInstanceResolver,
    first_display_set,
)
from measurement_mapping.mapping.report import build_report, get_display_text

logger = logging.getLogger(__name__)


def to_annotation(measurement: Any, annotation_store: AnnotationStoreProtocol) -> None:
    """Copy the label of an edited measurement onto its annotation.

    Unknown or already deleted annotations are ignored.

    Parameters
    ----------
    measurement:
        Any object exposing ``uid`` (or ``id``) and ``label``.
    annotation_store:
        Store holding the live annotations.
    """
    annotation_uid = getattr(measurement, "uid", None) or getattr(measurement, "id", None)
    annotation = annotation_store.get_annotation(annotation_uid)

    if annotation is None or annotation.data is None:
        logger.debug("No annotation %s to synchronise", annotation_uid)
        return

    if annotation.data.label != measurement.label:
        annotation.data.label = measurement.label


def to_measurement(
    event: AnnotationCompletedEvent | Mapping[str, Any],
    display_set_service: DisplaySetServiceProtocol,
    viewport_service: ViewportServiceProtocol,
    get_value_type: ValueTypeResolver,
    *,
    metadata_provider: MetadataProviderProtocol,
    supported_tools: Iterable[str] | None = None,
) -> Measurement | None:
    """Convert a completed bidirectional annotation into a measurement.

    Parameters
    ----------
    event:
        Tool-completion payload, typed or as the engine's raw mapping.
    display_set_service:
        Display-set registry.
    viewport_service:
        Viewport registry used for annotations without an image reference.
    get_value_type:
        Classifier mapping the tool name to a measurement value type.
    metadata_provider:
        Per-image metadata lookup.
    supported_tools:
        Tool allow-list; defaults to the configured list.

    Returns
    -------
    Measurement | None
        ``None`` when the annotation has no metadata or data.

    Raises
    ------
    UnsupportedToolError
        If the annotation was drawn with a tool outside the allow-list.
    UnsupportedTargetError
        If the cached stats hold a volume-based target.
    """
    if not isinstance(event, AnnotationCompletedEvent):
        event = AnnotationCompletedEvent.from_dict(event)

    annotation = event.annotation
    metadata, data = annotation.metadata, annotation.data

    if metadata is None or data is None:
        logger.warning("Bidirectional tool: Missing metadata or data")
        return None

    allowed = tuple(supported_tools) if supported_tools is not None else get_supported_tools()
    if metadata.tool_name not in allowed:
        raise UnsupportedToolError(metadata.tool_name)

    resolver = SOPInstanceResolver(metadata_provider, viewport_service, display_set_service)
    reference = resolver.resolve(metadata.referenced_image_id, event.viewport_id)

    if reference.sop_instance_uid:
        display_set = display_set_service.get_display_set_for_sop_instance_uid(
            reference.sop_instance_uid, reference.series_instance_uid,
        )
    else:
        display_set = first_display_set(
            display_set_service.get_display_sets_for_series(reference.series_instance_uid)
        )

    points = data.handles.points
    mapped_annotations = get_mapped_annotations(annotation, display_set_service, resolver)

    snapshot = ReportSnapshot(
        mapped_annotations=tuple(mapped_annotations),
        points=points,
        frame_of_reference_uid=metadata.frame_of_reference_uid,
    )

    logger.debug(
        "Mapped annotation %s to %d target(s)",
        annotation.annotation_uid, len(mapped_annotations),
    )

    return Measurement(
        id=annotation.annotation_uid,
        sop_instance_uid=reference.sop_instance_uid,
        frame_of_reference_uid=metadata.frame_of_reference_uid,
        points=points,
        metadata=metadata,
        reference_series_uid=reference.series_instance_uid,
        reference_study_uid=reference.study_instance_uid,
        tool_name=metadata.tool_name,
        display_set_instance_uid=(
            display_set.display_set_instance_uid if display_set is not None else None
        ),
        label=data.label or metadata.label,
        display_text=get_display_text(mapped_annotations),
        data=dict(data.cached_stats),
        type=get_value_type(metadata.tool_name),
        report_generator=functools.partial(build_report, snapshot),
    )


def get_mapped_annotations(
    annotation: RawAnnotation,
    display_set_service: DisplaySetServiceProtocol,
    resolver: ReferenceResolverProtocol,
) -> list[MappedAnnotation]:
    """Resolve every cached-stats target of *annotation* to its series.

    Targets are returned in the iteration order of the cached stats.  An
    annotation without cached stats yields an empty list.

    Raises
    ------
    UnsupportedTargetError
        For targets that are not image based.
    """
    metadata, data = annotation.metadata, annotation.data
    mapped: list[MappedAnnotation] = []

    for target_id, target_stats in data.cached_stats.items():
        if not target_id.startswith(IMAGE_TARGET_PREFIX):
            # TODO: resolve volumeId: targets once display sets can be
            # looked up by volume.
            raise UnsupportedTargetError(target_id)

        reference = resolver.resolve(metadata.referenced_image_id)
        display_set = display_set_service.get_display_set_for_sop_instance_uid(
            reference.sop_instance_uid, reference.series_instance_uid,
        )

        mapped.append(
            MappedAnnotation(
                series_instance_uid=display_set.series_instance_uid,
                series_number=display_set.series_number,
                unit=MEASUREMENT_UNIT,
                length=target_stats.length,
                width=target_stats.width,
            )
        )

    return mapped
