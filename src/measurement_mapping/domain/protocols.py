"""Protocol interfaces for the collaborators of the measurement mapping.

The annotation store, display-set registry, viewport registry and image
metadata provider live in the host application.  Using
:class:`typing.Protocol` enables structural subtyping -- implementations
do not need to explicitly inherit from these classes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from measurement_mapping.domain.models import (
    DisplaySet,
    InstanceAttributes,
    RawAnnotation,
)

# Classifier mapping a tool name to the measurement service value type.
ValueTypeResolver = Callable[[str], Any]


# ---------------------------------------------------------------------------
# Annotation store
# ---------------------------------------------------------------------------

@runtime_checkable
class AnnotationStoreProtocol(Protocol):
    """Live annotations owned by the annotation engine."""

    def get_annotation(self, annotation_uid: str) -> RawAnnotation | None:
        """Return the annotation with *annotation_uid*, or ``None``.

        Parameters
        ----------
        annotation_uid:
            Identifier assigned by the annotation engine.

        Returns
        -------
        RawAnnotation | None
            The live (mutable) annotation, or ``None`` when it no longer
            exists.
        """
        ...


# ---------------------------------------------------------------------------
# Display sets
# ---------------------------------------------------------------------------

@runtime_checkable
class DisplaySetServiceProtocol(Protocol):
    """Registry of display sets loaded in the viewer."""

    def get_display_set_for_sop_instance_uid(
        self, sop_instance_uid: str, series_instance_uid: str | None
    ) -> DisplaySet:
        """Return the display set that contains the given SOP instance.

        Parameters
        ----------
        sop_instance_uid:
            SOP Instance UID of the image.
        series_instance_uid:
            Series Instance UID used to narrow the search.
        """
        ...

    def get_display_sets_for_series(
        self, series_instance_uid: str | None
    ) -> DisplaySet | Sequence[DisplaySet]:
        """Return the display set(s) built from *series_instance_uid*."""
        ...

    def get_display_set_by_uid(self, display_set_instance_uid: str) -> DisplaySet | None:
        """Return the display set with the given instance UID, if any."""
        ...


# ---------------------------------------------------------------------------
# Viewports
# ---------------------------------------------------------------------------

@runtime_checkable
class ViewportServiceProtocol(Protocol):
    """Registry of rendering viewports."""

    def get_display_set_uids_for_viewport(self, viewport_id: str) -> Sequence[str]:
        """Return the display set instance UIDs shown in *viewport_id*."""
        ...


# ---------------------------------------------------------------------------
# Image metadata
# ---------------------------------------------------------------------------

@runtime_checkable
class MetadataProviderProtocol(Protocol):
    """Per-image DICOM metadata lookup."""

    def get_instance(self, image_id: str) -> Mapping[str, Any] | None:
        """Return the instance metadata for *image_id*.

        The mapping carries at least ``SOPInstanceUID``,
        ``SeriesInstanceUID`` and ``StudyInstanceUID``.  ``None`` is
        returned for unknown images.
        """
        ...


# ---------------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------------

@runtime_checkable
class ReferenceResolverProtocol(Protocol):
    """Resolve an image reference to its place in the study hierarchy."""

    def resolve(
        self, image_id: str | None, viewport_id: str | None = None
    ) -> InstanceAttributes:
        """Return the SOP instance, series and study identifiers.

        Parameters
        ----------
        image_id:
            Image reference stored on the annotation.  May be ``None`` for
            annotations drawn on a volume viewport.
        viewport_id:
            Optional viewport used when *image_id* does not identify a
            single image.

        Returns
        -------
        InstanceAttributes
            The resolved identifiers.
        """
        ...
