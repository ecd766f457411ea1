from __future__ import annotations

from ...core import type_tags as tags
from ...core.model_node import ModelNode
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class FieldsCorrectTypeRule(Rule):
    target_fields = ALL
    meta = RuleMeta(
        name="FieldsCorrectTypeRule",
        description="Validates that every field holds a value of a declared type.",
        tests={
            "default": RuleTest(
                message="Invalid type, expected {{expected}} but found {{found}}.",
                sample_values={"expected": "Text", "found": "Integer"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_TYPE,
            ),
            "multiple": RuleTest(
                message="Invalid type, expected one of {{expected}} but found {{found}}.",
                sample_values={"expected": "Text, URL", "found": "Integer"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_TYPE,
            ),
        },
    )

    def validate_field(self, node: ModelNode, field: str) -> list[ValidationError]:
        if not node.model.has_specification:
            return []
        engine = node.get_field(field)
        if engine is None:
            return []
        declared = engine.get_all_possible_types()
        if not declared:
            return []

        value = node.value[field]
        if engine.detected_type_is_allowed(value):
            return []

        found = tags.display_name(engine.detect_type(value))
        expected = ", ".join(tags.display_name(tag) for tag in declared)
        test_key = "default" if len(declared) == 1 else "multiple"
        return [
            self.create_error(
                test_key,
                {"value": value, "path": node.get_path(field)},
                {"expected": expected, "found": found},
            )
        ]
