# File: tests/test_forms.py

from community_action.services.forms import PROJECT_FORM_SCHEMA, FieldRule, validate_form

VALID = {
    "title": "Library Lawn Weeding",
    "type": "weeds",
    "location": "Oak Street Library",
    "description": "Pull the bindweed out of the front lawn beds.",
}


def test_valid_form_has_no_errors():
    result = validate_form(VALID)
    assert result.is_valid
    assert result.values == VALID


def test_values_are_stripped():
    result = validate_form({**VALID, "title": "   Library Lawn Weeding  "})
    assert result.values["title"] == "Library Lawn Weeding"


def test_messages_per_field():
    result = validate_form({"title": "Tiny", "type": "lava", "location": "Here", "description": "Short"})
    assert result.errors == {
        "title": "Title must be at least 5 characters",
        "type": "Please select a valid project type",
        "location": "Location must be at least 5 characters",
        "description": "Description must be at least 10 characters",
    }


def test_title_max_length():
    result = validate_form({**VALID, "title": "x" * 101})
    assert result.errors == {"title": "Title cannot exceed 100 characters"}
    assert validate_form({**VALID, "title": "x" * 100}).is_valid


def test_first_failing_rule_wins():
    rule = FieldRule(label="Code", min_length=3, choices=("abcd",))
    assert rule.check("ab") == "Code must be at least 3 characters"
    assert rule.check("abc") == "Please select a valid code"


def test_missing_fields_are_required():
    result = validate_form({})
    assert set(result.errors) == set(PROJECT_FORM_SCHEMA)
    assert result.errors["type"] == "Please select a project type"
    assert result.errors["title"] == "Title is required"
