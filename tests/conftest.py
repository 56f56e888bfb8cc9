"""Shared pytest fixtures for the measurement mapping test suite."""

from __future__ import annotations

from typing import Any

import pytest

from measurement_mapping.config.settings import get_config
from measurement_mapping.domain.models import DisplaySet, RawAnnotation


# ---------------------------------------------------------------------------
# In-memory collaborators
# ---------------------------------------------------------------------------


class FakeAnnotationStore:
    """Annotation store keyed by annotation UID."""

    def __init__(self, annotations: list[RawAnnotation] | None = None) -> None:
        self.annotations = {a.annotation_uid: a for a in annotations or []}
        self.lookups: list[str] = []

    def get_annotation(self, annotation_uid: str) -> RawAnnotation | None:
        self.lookups.append(annotation_uid)
        return self.annotations.get(annotation_uid)


class FakeDisplaySetService:
    """Display-set registry over a fixed list of display sets."""

    def __init__(self, display_sets: list[DisplaySet]) -> None:
        self.display_sets = list(display_sets)

    def get_display_set_for_sop_instance_uid(
        self, sop_instance_uid: str, series_instance_uid: str | None
    ) -> DisplaySet:
        for ds in self.display_sets:
            if sop_instance_uid in ds.sop_instance_uids and (
                series_instance_uid is None
                or ds.series_instance_uid == series_instance_uid
            ):
                return ds
        raise KeyError(sop_instance_uid)

    def get_display_sets_for_series(self, series_instance_uid: str | None) -> list[DisplaySet]:
        return [
            ds for ds in self.display_sets
            if ds.series_instance_uid == series_instance_uid
        ]

    def get_display_set_by_uid(self, display_set_instance_uid: str) -> DisplaySet | None:
        for ds in self.display_sets:
            if ds.display_set_instance_uid == display_set_instance_uid:
                return ds
        return None


class FakeViewportService:
    """Viewport registry mapping viewport ids to display set UIDs."""

    def __init__(self, viewports: dict[str, list[str]] | None = None) -> None:
        self.viewports = viewports or {}

    def get_display_set_uids_for_viewport(self, viewport_id: str) -> list[str]:
        return self.viewports.get(viewport_id, [])


class FakeMetadataProvider:
    """Image metadata keyed by image id."""

    def __init__(self, instances: dict[str, dict[str, Any]]) -> None:
        self.instances = instances

    def get_instance(self, image_id: str) -> dict[str, Any] | None:
        return self.instances.get(image_id)


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

IMAGE_ID = "wadors:https://pacs.example/studies/1.2/series/1.2.3/instances/1.2.3.4/frames/1"
STUDY_UID = "1.2"
SERIES_UID = "1.2.3"
SOP_UID = "1.2.3.4"
FRAME_OF_REFERENCE_UID = "1.2.9"


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def display_set() -> DisplaySet:
    """A single-series display set containing SOP_UID."""
    return DisplaySet(
        display_set_instance_uid="ds-001",
        series_instance_uid=SERIES_UID,
        series_number="3",
        study_instance_uid=STUDY_UID,
        sop_instance_uids=(SOP_UID, "1.2.3.5"),
    )


@pytest.fixture()
def display_set_service(display_set) -> FakeDisplaySetService:
    return FakeDisplaySetService([display_set])


@pytest.fixture()
def viewport_service(display_set) -> FakeViewportService:
    return FakeViewportService({"viewport-volume": [display_set.display_set_instance_uid]})


@pytest.fixture()
def metadata_provider() -> FakeMetadataProvider:
    return FakeMetadataProvider({
        IMAGE_ID: {
            "SOPInstanceUID": SOP_UID,
            "SeriesInstanceUID": SERIES_UID,
            "StudyInstanceUID": STUDY_UID,
        },
    })


@pytest.fixture()
def value_types() -> list[str]:
    """Records tool names passed to the value-type classifier."""
    return []


@pytest.fixture()
def get_value_type(value_types):
    def _classify(tool_name: str) -> str:
        value_types.append(tool_name)
        return "value_type::shortAxisLongAxis"

    return _classify


# ---------------------------------------------------------------------------
# Annotation payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def annotation_payload() -> dict[str, Any]:
    """An engine-shaped bidirectional annotation with one image target."""
    return {
        "annotationUID": "ann-001",
        "metadata": {
            "toolName": "Bidirectional",
            "referencedImageId": IMAGE_ID,
            "FrameOfReferenceUID": FRAME_OF_REFERENCE_UID,
            "viewPlaneNormal": [0, 0, -1],
        },
        "data": {
            "handles": {"points": [[1, 2, 3], [4, 5, 6], [2.5, 0, 1], [3, 7.25, 1]]},
            "cachedStats": {
                f"imageId:{IMAGE_ID}": {"length": 12.345, "width": 5.6},
            },
            "label": "Lesion 1",
        },
    }


@pytest.fixture()
def completed_event(annotation_payload) -> dict[str, Any]:
    return {"annotation": annotation_payload, "viewportId": "viewport-stack"}


@pytest.fixture(autouse=True)
def _fresh_config():
    """Drop cached configuration between tests."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture()
def make_annotation_store():
    """Factory building an annotation store from engine payloads."""
    def _make(*payloads: dict[str, Any]) -> FakeAnnotationStore:
        return FakeAnnotationStore([RawAnnotation.from_dict(p) for p in payloads])

    return _make
