from __future__ import annotations

from ...core.model_node import ModelNode
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest

EXPERIMENTAL_PREFIXES = ("beta:", "ext:")


def is_experimental_field(field: str) -> bool:
    return field.lower().startswith(EXPERIMENTAL_PREFIXES)


class BetaFieldsRule(Rule):
    target_fields = ALL
    meta = RuleMeta(
        name="BetaFieldsRule",
        description="Flags beta and extension fields, which the validator does not check.",
        tests={
            "default": RuleTest(
                message='The field "{{field}}" is experimental and has not been checked by the validator.',
                sample_values={"field": "beta:affiliatedLocation"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED,
            ),
        },
    )

    def validate_field(self, node: ModelNode, field: str) -> list[ValidationError]:
        if not is_experimental_field(field):
            return []
        return [self.create_error("default", {"value": node.value[field], "path": node.get_path(field)}, {"field": field})]
