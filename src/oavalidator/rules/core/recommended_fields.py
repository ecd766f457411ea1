from __future__ import annotations

from ...core.model_node import ModelNode
from ...core.undefined import is_missing
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class RecommendedFieldsRule(Rule):
    target_models = ALL
    meta = RuleMeta(
        name="RecommendedFieldsRule",
        description="Validates that all recommended fields are present in the document.",
        tests={
            "default": RuleTest(
                message='Recommended field "{{field}}" is missing from "{{model}}".',
                sample_values={"field": "description", "model": "Event"},
                category=ValidationErrorCategory.RECOMMENDATION,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.MISSING_RECOMMENDED_FIELD,
            ),
        },
    )

    def validate_model(self, node: ModelNode) -> list[ValidationError]:
        if not node.model.has_specification:
            return []
        return [
            self.create_error(
                "default",
                {"path": node.get_path(field)},
                {"field": field, "model": node.model.type},
            )
            for field in node.model.recommended_fields
            if is_missing(node.get_value_with_inheritance(field))
        ]
