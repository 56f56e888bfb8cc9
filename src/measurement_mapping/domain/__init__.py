"""Domain layer -- models, protocols, errors, and events.

Re-exports all public domain types for convenient access::

    from measurement_mapping.domain import Measurement, RawAnnotation
"""

from __future__ import annotations

from measurement_mapping.domain.errors import (
    MappingError,
    ReferenceResolutionError,
    UnsupportedTargetError,
    UnsupportedToolError,
)
from measurement_mapping.domain.events import (
    ANNOTATION_COMPLETED,
    MEASUREMENT_ADDED,
    MEASUREMENT_UPDATED,
    Event,
    EventBus,
)
from measurement_mapping.domain.models import (
    AnnotationCompletedEvent,
    AnnotationData,
    AnnotationHandles,
    AnnotationMetadata,
    AppConfig,
    DisplaySet,
    InstanceAttributes,
    MappedAnnotation,
    Measurement,
    RawAnnotation,
    Report,
    ReportSnapshot,
    TargetStats,
)
from measurement_mapping.domain.protocols import (
    AnnotationStoreProtocol,
    DisplaySetServiceProtocol,
    MetadataProviderProtocol,
    ReferenceResolverProtocol,
    ValueTypeResolver,
    ViewportServiceProtocol,
)

__all__ = [
    # Models
    "AnnotationCompletedEvent",
    "AnnotationData",
    "AnnotationHandles",
    "AnnotationMetadata",
    "AppConfig",
    "DisplaySet",
    "InstanceAttributes",
    "MappedAnnotation",
    "Measurement",
    "RawAnnotation",
    "Report",
    "ReportSnapshot",
    "TargetStats",
    # Errors
    "MappingError",
    "ReferenceResolutionError",
    "UnsupportedTargetError",
    "UnsupportedToolError",
    # Event constants
    "ANNOTATION_COMPLETED",
    "MEASUREMENT_ADDED",
    "MEASUREMENT_UPDATED",
    # Events
    "Event",
    "EventBus",
    # Protocols
    "AnnotationStoreProtocol",
    "DisplaySetServiceProtocol",
    "MetadataProviderProtocol",
    "ReferenceResolverProtocol",
    "ValueTypeResolver",
    "ViewportServiceProtocol",
]
