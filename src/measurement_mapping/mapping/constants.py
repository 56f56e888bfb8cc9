"""Tool names, measurement value types and the tool classifier."""

from __future__ import annotations

from enum import Enum

from measurement_mapping.config.settings import get_config
from measurement_mapping.domain.errors import UnsupportedToolError

# Annotation tools with a measurement mapping.
SUPPORTED_TOOLS: tuple[str, ...] = (
    "Length",
    "EllipticalROI",
    "Bidirectional",
    "ArrowAnnotate",
)

# Cached-stats target ids carrying this prefix refer to a single image.
IMAGE_TARGET_PREFIX = "imageId:"

MEASUREMENT_UNIT = "mm"

BIDIRECTIONAL_ANNOTATION_TYPE = "Cornerstone3D:Bidirectional"


class MeasurementValueType(str, Enum):
    """Geometry type of a measurement, as understood by the tracking service."""

    POLYLINE = "value_type::polyline"
    ELLIPSE = "value_type::ellipse"
    BIDIRECTIONAL = "value_type::shortAxisLongAxis"
    POINT = "value_type::point"


_TOOL_VALUE_TYPES: dict[str, MeasurementValueType] = {
    "Length": MeasurementValueType.POLYLINE,
    "EllipticalROI": MeasurementValueType.ELLIPSE,
    "Bidirectional": MeasurementValueType.BIDIRECTIONAL,
    "ArrowAnnotate": MeasurementValueType.POINT,
}


def get_value_type_from_tool_type(tool_name: str) -> MeasurementValueType:
    """Return the measurement value type for *tool_name*.

    Raises
    ------
    UnsupportedToolError
        If the tool has no measurement mapping.
    """
    try:
        return _TOOL_VALUE_TYPES[tool_name]
    except KeyError:
        raise UnsupportedToolError(tool_name) from None


def get_supported_tools() -> tuple[str, ...]:
    """Return the tool allow-list.

    ``mapping.supported_tools`` from the configuration takes precedence over
    :data:`SUPPORTED_TOOLS`.
    """
    tools = get_config().get("mapping", {}).get("supported_tools")
    if not tools:
        return SUPPORTED_TOOLS
    if isinstance(tools, str):
        tools = [tools]
    return tuple(tools)
