"""Exceptions raised by the measurement mapping layer."""

from __future__ import annotations


class MappingError(Exception):
    """Base exception for annotation-to-measurement mapping errors."""


class UnsupportedToolError(MappingError):
    """Raised when an annotation was produced by a tool with no mapping."""

    def __init__(self, tool_name: str | None) -> None:
        super().__init__(f"Tool not supported: {tool_name!r}")
        self.tool_name = tool_name


class UnsupportedTargetError(MappingError, NotImplementedError):
    """Raised for cached-stats targets that are not image based.

    Volume-based targets (``volumeId:...``) are recognised but have no
    display-set lookup yet.
    """

    def __init__(self, target_id: str) -> None:
        super().__init__(f"Target kind not implemented: {target_id!r}")
        self.target_id = target_id


class ReferenceResolutionError(MappingError, LookupError):
    """Raised when an image or viewport reference cannot be resolved."""
