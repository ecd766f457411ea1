from __future__ import annotations

from typing import Any

from ...models.errors import ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ...options import ValidatorOptions
from ..rule import RawRule, RawRuleResult, RuleMeta, RuleTest

_SUBMISSION_HINT = (
    "either an object conforming to the Modelling Specification "
    "(https://openactive.io/modelling-opportunity-data/), or an RPDE feed root object "
    "(https://openactive.io/realtime-paged-data-exchange/)."
)


class ValidInputRule(RawRule):
    meta = RuleMeta(
        name="ValidInputRule",
        description="Validates that the submission is in a shape the validator supports.",
        tests={
            "noArray": RuleTest(
                description="Generates a warning if the submission is an array.",
                message=f"Arrays are not supported for validation. Please only submit single objects for validation: {_SUBMISSION_HINT}",
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.INVALID_JSON,
            ),
            "noInvalid": RuleTest(
                description="Generates an error if the submission is not an object.",
                message=f"Only objects are supported for validation. Please only submit single objects for validation: {_SUBMISSION_HINT}",
                category=ValidationErrorCategory.INTERNAL,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.INVALID_JSON,
            ),
        },
    )

    async def validate_raw(self, data: Any, options: ValidatorOptions) -> RawRuleResult:
        if isinstance(data, list):
            test_key = "noArray"
        elif not isinstance(data, dict):
            test_key = "noInvalid"
        else:
            return RawRuleResult()
        return RawRuleResult(errors=[self.create_error(test_key, {"value": data, "path": "$"})])
