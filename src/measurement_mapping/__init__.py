"""Bidirectional measurement mapping.

Converts bidirectional annotations (a long axis plus a perpendicular short
axis drawn on a medical image) produced by an annotation engine into
normalized measurement records for a measurement-tracking service, and keeps
annotation labels in sync with edited measurements.
"""

from __future__ import annotations

__version__ = "0.1.0"
