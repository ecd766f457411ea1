"""
Specification records supplied by loaders.

Records arrive as camelCase JSON (``requiredType``, ``inheritsFrom``) and are
exposed with snake_case attributes. Unknown keys are preserved so that rules
can read vocabulary-specific extras without the core knowing about them.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="allow",
)


class InheritRule(BaseModel):
    """
    Include/exclude filter over field names for inheritance directives.

    ``include`` wins when both are present.
    """

    model_config = _RECORD_CONFIG

    include: Optional[list[str]] = None
    exclude: Optional[list[str]] = None

    def admits(self, field: str) -> bool:
        if self.include is not None:
            return field in self.include
        if self.exclude is not None:
            return field not in self.exclude
        return False


InheritDirective = Union[Literal["*"], InheritRule]


def inherit_directive_admits(directive: Optional[InheritDirective], field: str) -> bool:
    """Whether an ``inheritsFrom``/``inheritsTo`` directive lets ``field`` through."""
    if directive == "*":
        return True
    if isinstance(directive, InheritRule):
        return directive.admits(field)
    return False


class FieldDefinition(BaseModel):
    """
    Declared shape of one property.
    """

    model_config = _RECORD_CONFIG

    field_name: Optional[str] = None
    required_type: Optional[str] = None
    alternative_types: list[str] = Field(default_factory=list)
    model: Optional[str] = None
    alternative_models: list[str] = Field(default_factory=list)
    inherits_from: Optional[InheritDirective] = None
    inherits_to: Optional[InheritDirective] = None
    required_content: Any = None
    options: Optional[list[Any]] = None
    description: Optional[list[str]] = None
    example: Any = None


class RequiredOption(BaseModel):
    """
    Group of alternative fields of which at least one must be present.
    """

    model_config = _RECORD_CONFIG

    options: list[str] = Field(default_factory=list)
    description: Optional[list[str]] = None


class ModelDefinition(BaseModel):
    """
    Resolved specification record for one document shape.
    """

    model_config = _RECORD_CONFIG

    type: Optional[str] = None
    derived_from: Optional[str] = None
    is_json_ld: bool = True
    fields: dict[str, FieldDefinition] = Field(default_factory=dict)
    required_fields: list[str] = Field(default_factory=list)
    recommended_fields: list[str] = Field(default_factory=list)
    required_options: list[RequiredOption] = Field(default_factory=list)
    in_spec: list[str] = Field(default_factory=list)
    sub_class_graph: list[str] = Field(default_factory=list)
    common_typos: dict[str, str] = Field(default_factory=dict)
