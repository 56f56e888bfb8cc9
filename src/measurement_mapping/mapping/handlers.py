"""Event-bus wiring for the bidirectional measurement mapping."""

from __future__ import annotations

import logging

from measurement_mapping.domain.events import (
    ANNOTATION_COMPLETED,
    MEASUREMENT_ADDED,
    MEASUREMENT_UPDATED,
    Event,
    EventBus,
)
from measurement_mapping.domain.protocols import (
    AnnotationStoreProtocol,
    DisplaySetServiceProtocol,
    MetadataProviderProtocol,
    ValueTypeResolver,
    ViewportServiceProtocol,
)
from measurement_mapping.mapping.bidirectional import to_annotation, to_measurement

logger = logging.getLogger(__name__)


class BidirectionalMappingHandler:
    """Connects the annotation engine's events to the measurement mapping.

    ``annotation.completed`` events carry the engine payload
    (``{"annotation": ..., "viewportId": ...}``) and are converted with
    :func:`to_measurement`; the result is republished as
    ``measurement.added`` with ``{"measurement": <Measurement>}``.
    ``measurement.updated`` events carry ``{"measurement": ...}`` and are
    synchronised back with :func:`to_annotation`.

    Conversion errors are not caught; they propagate to the publisher.
    """

    def __init__(
        self,
        bus: EventBus,
        annotation_store: AnnotationStoreProtocol,
        display_set_service: DisplaySetServiceProtocol,
        viewport_service: ViewportServiceProtocol,
        metadata_provider: MetadataProviderProtocol,
        get_value_type: ValueTypeResolver,
    ) -> None:
        self.bus = bus
        self.annotation_store = annotation_store
        self.display_set_service = display_set_service
        self.viewport_service = viewport_service
        self.metadata_provider = metadata_provider
        self.get_value_type = get_value_type

    def register(self) -> None:
        """Subscribe to the annotation and measurement events."""
        self.bus.subscribe(ANNOTATION_COMPLETED, self.on_annotation_completed)
        self.bus.subscribe(MEASUREMENT_UPDATED, self.on_measurement_updated)

    def unregister(self) -> None:
        """Remove the subscriptions made by :meth:`register`."""
        self.bus.unsubscribe(ANNOTATION_COMPLETED, self.on_annotation_completed)
        self.bus.unsubscribe(MEASUREMENT_UPDATED, self.on_measurement_updated)

    def on_annotation_completed(self, event: Event) -> None:
        measurement = to_measurement(
            event.payload,
            self.display_set_service,
            self.viewport_service,
            self.get_value_type,
            metadata_provider=self.metadata_provider,
        )
        if measurement is None:
            return
        logger.info("Measurement %s added (%s)", measurement.id, measurement.tool_name)
        self.bus.publish(MEASUREMENT_ADDED, {"measurement": measurement})

    def on_measurement_updated(self, event: Event) -> None:
        measurement = event.payload.get("measurement")
        if measurement is None:
            logger.warning("measurement.updated event without a measurement")
            return
        to_annotation(measurement, self.annotation_store)
