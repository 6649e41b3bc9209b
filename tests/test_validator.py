# File: tests/test_validator.py

import pytest

from community_action.schemas.project import ProjectType, normalize


RAW = {
    "id": 7,
    "title": "Riverbank Cleanup",
    "description": "Help clean up trash along the riverside park.",
    "location": "Riverside Park, Main Street",
    "votes": 24,
    "image": None,
    "creator_id": "abc",
}


@pytest.mark.parametrize("value", ["cleanup", "weeds", "graffiti", "other"])
def test_valid_types_pass_through(value):
    project = normalize({**RAW, "type": value})
    assert project.type == value
    assert project.type is ProjectType(value)


@pytest.mark.parametrize("value", ["Cleanup", "litter", "", None, 3, "graffiti "])
def test_unknown_types_become_other(value):
    assert normalize({**RAW, "type": value}).type is ProjectType.OTHER


def test_missing_type_becomes_other():
    assert normalize(RAW).type is ProjectType.OTHER


def test_other_fields_are_copied_verbatim():
    project = normalize({**RAW, "type": "weeds", "extra_column": "kept"})
    assert project.title == RAW["title"]
    assert project.location == RAW["location"]
    assert project.votes == 24
    assert project.creator_id == "abc"
    assert project.model_dump()["extra_column"] == "kept"


def test_normalize_does_not_mutate_input():
    raw = {**RAW, "type": "bogus"}
    normalize(raw)
    assert raw["type"] == "bogus"


def test_labels_and_badges():
    assert ProjectType.CLEANUP.label == "Litter Cleanup"
    assert ProjectType.WEEDS.label == "Weed Removal"
    assert ProjectType.GRAFFITI.label == "Graffiti Removal"
    assert ProjectType.OTHER.badge_class == "badge-other"
