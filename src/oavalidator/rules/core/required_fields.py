from __future__ import annotations

from ...core.model_node import ModelNode
from ...core.undefined import is_missing
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class RequiredFieldsRule(Rule):
    target_models = ALL
    meta = RuleMeta(
        name="RequiredFieldsRule",
        description="Validates that all required fields are present in the document.",
        tests={
            "default": RuleTest(
                message='Required field "{{field}}" is missing from "{{model}}".',
                sample_values={"field": "name", "model": "Event"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
        },
    )

    def validate_model(self, node: ModelNode) -> list[ValidationError]:
        if not node.model.has_specification:
            return []
        errors = []
        for field in node.model.required_fields:
            value = node.get_value_with_inheritance(field)
            if is_missing(value):
                errors.append(
                    self.create_error(
                        "default",
                        {"value": value, "path": node.get_path(field)},
                        {"field": field, "model": node.model.type},
                    )
                )
        return errors
