"""Resolve image references to SOP instance, series and study identifiers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from measurement_mapping.domain.errors import ReferenceResolutionError
from measurement_mapping.domain.models import DisplaySet, InstanceAttributes
from measurement_mapping.domain.protocols import (
    DisplaySetServiceProtocol,
    MetadataProviderProtocol,
    ViewportServiceProtocol,
)

logger = logging.getLogger(__name__)


class SOPInstanceResolver:
    """Reference resolver backed by the image metadata provider.

    Annotations drawn on a stack viewport reference a single image and are
    resolved through *metadata_provider*.  Annotations drawn on a volume
    viewport carry no image reference; their series and study are taken
    from the display set shown in the viewport and the SOP instance UID is
    left unset.

    Parameters
    ----------
    metadata_provider:
        Per-image metadata lookup.
    viewport_service:
        Optional viewport registry, required for volume viewport references.
    display_set_service:
        Optional display-set registry, required for volume viewport
        references.
    """

    def __init__(
        self,
        metadata_provider: MetadataProviderProtocol,
        viewport_service: ViewportServiceProtocol | None = None,
        display_set_service: DisplaySetServiceProtocol | None = None,
    ) -> None:
        self._metadata = metadata_provider
        self._viewports = viewport_service
        self._display_sets = display_set_service

    def resolve(
        self, image_id: str | None, viewport_id: str | None = None
    ) -> InstanceAttributes:
        """Return the identifiers owning *image_id*.

        Raises
        ------
        ReferenceResolutionError
            If the image is unknown to the metadata provider, or if there is
            no image id and the viewport cannot supply a display set.
        """
        if image_id:
            instance = self._metadata.get_instance(image_id)
            if instance is None:
                raise ReferenceResolutionError(
                    f"No instance metadata for image {image_id!r}"
                )
            return InstanceAttributes.from_dict(instance)

        return self._resolve_from_viewport(viewport_id)

    def _resolve_from_viewport(self, viewport_id: str | None) -> InstanceAttributes:
        if viewport_id is None or self._viewports is None or self._display_sets is None:
            raise ReferenceResolutionError(
                "Annotation has no image reference and no viewport context"
            )

        display_set_uids = self._viewports.get_display_set_uids_for_viewport(viewport_id)
        if not display_set_uids:
            raise ReferenceResolutionError(
                f"Viewport {viewport_id!r} has no display sets"
            )

        # The first display set of a fused viewport is the primary one.
        display_set = self._display_sets.get_display_set_by_uid(display_set_uids[0])
        if display_set is None:
            raise ReferenceResolutionError(
                f"Unknown display set {display_set_uids[0]!r} in viewport {viewport_id!r}"
            )

        logger.debug(
            "Resolved volume annotation in %s to series %s",
            viewport_id, display_set.series_instance_uid,
        )
        return InstanceAttributes(
            sop_instance_uid=None,
            series_instance_uid=display_set.series_instance_uid,
            study_instance_uid=display_set.study_instance_uid,
        )


def first_display_set(
    display_sets: DisplaySet | Sequence[DisplaySet] | None,
) -> DisplaySet | None:
    """Normalize a display-set lookup result to a single display set."""
    if display_sets is None or isinstance(display_sets, DisplaySet):
        return display_sets
    if not display_sets:
        return None
    return display_sets[0]
