from __future__ import annotations

from ...core.model_node import ModelNode
from ...core.undefined import is_missing
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class RequiredOptionalFieldsRule(Rule):
    target_models = ALL
    meta = RuleMeta(
        name="RequiredOptionalFieldsRule",
        description="Validates that at least one field of every required group is present in the document.",
        tests={
            "default": RuleTest(
                message='At least one of {{fields}} is required in "{{model}}".',
                sample_values={"fields": '"startDate", "schedule"', "model": "SessionSeries"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
            "described": RuleTest(
                description="Uses the explanation published with the group when there is one.",
                message="{{description}}",
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
        for group in node.model.required_options:
            if not group.options:
                continue
            if any(not is_missing(node.get_value_with_inheritance(field)) for field in group.options):
                continue
            if group.description:
                test_key, substitutions = "described", {"description": " ".join(group.description)}
            else:
                fields = ", ".join(f'"{field}"' for field in group.options)
                test_key, substitutions = "default", {"fields": fields, "model": node.model.type}
            errors.append(self.create_error(test_key, {"path": node.get_path()}, substitutions))
        return errors
