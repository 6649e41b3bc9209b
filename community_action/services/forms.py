# File: community_action/services/forms.py

"""
Declarative form validation.

A form schema maps field names to :class:`FieldRule`; :func:`validate_form`
walks it and reports the first failing rule per field.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from community_action.schemas.project import ProjectType


@dataclass(frozen=True)
class FieldRule:
    label: str
    required: bool = True
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    choices: Optional[Sequence[str]] = None
    messages: Mapping[str, str] = field(default_factory=dict)

    def message(self, rule: str) -> str:
        if rule in self.messages:
            return self.messages[rule]
        if rule == "required":
            return f"{self.label} is required"
        if rule == "min_length":
            return f"{self.label} must be at least {self.min_length} characters"
        if rule == "max_length":
            return f"{self.label} cannot exceed {self.max_length} characters"
        return f"Please select a valid {self.label.lower()}"

    def check(self, value: str) -> Optional[str]:
        if not value:
            return self.message("required") if self.required else None
        if self.min_length is not None and len(value) < self.min_length:
            return self.message("min_length")
        if self.max_length is not None and len(value) > self.max_length:
            return self.message("max_length")
        if self.choices is not None and value not in self.choices:
            return self.message("choices")
        return None


PROJECT_FORM_SCHEMA: Dict[str, FieldRule] = {
    "title": FieldRule(label="Title", min_length=5, max_length=100),
    "type": FieldRule(
        label="Project type",
        choices=tuple(ProjectType.values()),
        messages={
            "required": "Please select a project type",
            "choices": "Please select a valid project type",
        },
    ),
    "location": FieldRule(label="Location", min_length=5),
    "description": FieldRule(label="Description", min_length=10),
}


@dataclass
class FormResult:
    values: Dict[str, str]
    errors: Dict[str, str]

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_form(data: Mapping[str, Any], schema: Mapping[str, FieldRule] = PROJECT_FORM_SCHEMA) -> FormResult:
    values: Dict[str, str] = {}
    errors: Dict[str, str] = {}
    for name, rule in schema.items():
        raw = data.get(name)
        value = "" if raw is None else str(raw).strip()
        values[name] = value
        error = rule.check(value)
        if error:
            errors[name] = error
    return FormResult(values=values, errors=errors)
