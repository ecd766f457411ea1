"""Read-only view over a model definition record."""

from __future__ import annotations

from typing import Any, Optional

from ..models.definitions import FieldDefinition, ModelDefinition, RequiredOption


class Model:
    """
    Resolved specification for one document shape.

    ``has_specification`` is False for the spec-less models used when no
    definition could be loaded; rules that need a specification skip those.
    """

    def __init__(
        self,
        definition: ModelDefinition | dict[str, Any] | None = None,
        has_specification: bool = True,
    ):
        if definition is None:
            definition = ModelDefinition()
        elif not isinstance(definition, ModelDefinition):
            definition = ModelDefinition.model_validate(definition)
        self.definition = definition
        self.has_specification = has_specification

    @classmethod
    def spec_less(cls, type_name: Optional[str] = None) -> "Model":
        return cls(ModelDefinition(type=type_name), has_specification=False)

    def __repr__(self) -> str:
        return f"Model(type={self.type!r}, has_specification={self.has_specification})"

    @property
    def type(self) -> Optional[str]:
        return self.definition.type

    @property
    def derived_from(self) -> Optional[str]:
        return self.definition.derived_from

    @property
    def is_json_ld(self) -> bool:
        return self.definition.is_json_ld

    @property
    def fields(self) -> dict[str, FieldDefinition]:
        return self.definition.fields

    @property
    def required_fields(self) -> list[str]:
        return self.definition.required_fields

    @property
    def recommended_fields(self) -> list[str]:
        return self.definition.recommended_fields

    @property
    def required_options(self) -> list[RequiredOption]:
        return self.definition.required_options

    @property
    def in_spec(self) -> list[str]:
        return self.definition.in_spec

    @property
    def sub_class_graph(self) -> list[str]:
        return self.definition.sub_class_graph

    @property
    def common_typos(self) -> dict[str, str]:
        return self.definition.common_typos

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        return self.fields.get(name)

    def has_field_in_spec(self, name: str) -> bool:
        return name in self.in_spec

    def has_required_field(self, name: str) -> bool:
        return name in self.required_fields

    def has_recommended_field(self, name: str) -> bool:
        return name in self.recommended_fields

    def get_possible_models_for_field(self, name: str) -> list[str]:
        definition = self.get_field(name)
        if definition is None:
            return []
        models = [definition.model] if definition.model else []
        return models + list(definition.alternative_models)
