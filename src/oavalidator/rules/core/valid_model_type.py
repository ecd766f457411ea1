from __future__ import annotations

from typing import Optional

from ...core import type_tags as tags
from ...core.model_node import ModelNode
from ...core.undefined import is_missing
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class ValidModelTypeRule(Rule):
    target_models = ALL
    meta = RuleMeta(
        name="ValidModelTypeRule",
        description="Validates that objects are submitted with a recognised type.",
        tests={
            "noType": RuleTest(
                message='Please add a `type` property to this JSON object.\n\nFor example:\n\n```\n{\n  "type": "Event"\n}\n```',
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
            "noTypeWithHint": RuleTest(
                message=(
                    "Objects in `{{field}}` must be of type `{{typeHint}}`. Please amend the property to "
                    '`"type": "{{typeHint}}"` in the object to allow for further validation.'
                ),
                sample_values={"field": "activity", "typeHint": "Concept"},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.MISSING_REQUIRED_FIELD,
            ),
            "modelNotFound": RuleTest(
                message=(
                    "Type `{{type}}` is not recognised by the validator, as it is not part of the "
                    "Modelling Opportunity Data specification or schema.org, and cannot be checked for validity."
                ),
                sample_values={"type": "CreativeWork"},
                category=ValidationErrorCategory.DATA_QUALITY,
                severity=ValidationErrorSeverity.SUGGESTION,
                type=ValidationErrorType.MODEL_NOT_FOUND,
            ),
        },
    )

    @staticmethod
    def _type_hint(node: ModelNode) -> Optional[str]:
        if node.parent_node is None:
            return None
        engine = node.parent_node.get_field(node.name)
        if engine is None:
            return None
        hints = []
        for tag in engine.get_all_possible_types():
            inner = tags.array_inner(tag) if tags.is_array_tag(tag) else tag
            hint = tags.strip_model(inner)
            if not tags.is_label_tag(hint):
                return None
            if hint not in hints:
                hints.append(hint)
        return hints[0] if len(hints) == 1 else None

    def validate_model(self, node: ModelNode) -> list[ValidationError]:
        if not node.model.is_json_ld:
            return []

        value = node.get_value("@type")
        # The model was requested under a name that could not be loaded.
        if not node.model.has_specification and node.model.type:
            return [
                self.create_error(
                    "modelNotFound",
                    {"value": value, "path": node.get_path()},
                    {"type": node.model.type},
                )
            ]

        if is_missing(value):
            hint = self._type_hint(node)
            if hint is not None:
                return [
                    self.create_error(
                        "noTypeWithHint",
                        {"value": value, "path": node.get_path()},
                        {"field": node.name, "typeHint": hint},
                    )
                ]
            return [self.create_error("noType", {"value": value, "path": node.get_path()})]

        if not node.model.has_specification:
            return [self.create_error("modelNotFound", {"value": value, "path": node.get_path()}, {"type": value})]
        return []
