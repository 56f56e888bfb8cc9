"""Mapping sub-package.

Converts annotation-engine annotations into measurement records and formats
them for display and tabular export.
"""

from __future__ import annotations

from measurement_mapping.mapping.bidirectional import (
    get_mapped_annotations,
    to_annotation,
    to_measurement,
)
from measurement_mapping.mapping.constants import (
    SUPPORTED_TOOLS,
    MeasurementValueType,
    get_supported_tools,
    get_value_type_from_tool_type,
)
from measurement_mapping.mapping.handlers import BidirectionalMappingHandler
from measurement_mapping.mapping.instance_attributes import SOPInstanceResolver
from measurement_mapping.mapping.report import build_report, get_display_text

__all__ = [
    "BidirectionalMappingHandler",
    "MeasurementValueType",
    "SOPInstanceResolver",
    "SUPPORTED_TOOLS",
    "build_report",
    "get_display_text",
    "get_mapped_annotations",
    "get_supported_tools",
    "get_value_type_from_tool_type",
    "to_annotation",
    "to_measurement",
]
