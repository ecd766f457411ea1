"""
Fields that the model does not declare.

Such a field is classified, in order, as a known typo, an extension field
(described, or not, by an extension context the document links to), a
schema.org field the validator cannot check, a superseded schema.org field,
or simply not part of the specification. ``beta:`` fields are left to
``BetaFieldsRule``.
"""

from __future__ import annotations

from typing import Any, Optional

from ...core.graph import PropertyMembership
from ...core.model_node import ModelNode
from ...models.errors import ValidationError, ValidationErrorCategory, ValidationErrorSeverity, ValidationErrorType
from ..rule import ALL, Rule, RuleMeta, RuleTest


class FieldsNotInModelRule(Rule):
    target_fields = ALL
    meta = RuleMeta(
        name="FieldsNotInModelRule",
        description="Validates that all fields are present in the specification.",
        tests={
            "invalidExperimental": RuleTest(
                description="Raises a notice if extension fields have no definition in the linked @context.",
                message=(
                    "No definition for this extension field could be found. Extension fields should be described "
                    "by a published JSON-LD definition, which should be referred to in the @context."
                ),
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.NOTICE,
                type=ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED,
            ),
            "typoHint": RuleTest(
                description="Detects common typos and explains how to correct them.",
                message='Field "{{typoField}}" is a common typo for "{{actualField}}". Please correct this field to "{{actualField}}".',
                sample_values={"typoField": "offer", "actualField": "offers"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.FAILURE,
                type=ValidationErrorType.FIELD_COULD_BE_TYPO,
            ),
            "inSchemaOrg": RuleTest(
                description="Raises a notice for schema.org fields that the validator does not check.",
                message=(
                    "This field is declared in schema.org but this validator is not yet capable of checking "
                    "whether it has the right format or values."
                ),
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.NOTICE,
                type=ValidationErrorType.SCHEMA_ORG_FIELDS_NOT_CHECKED,
            ),
            "supersededInSchemaOrg": RuleTest(
                description="Raises a warning for schema.org fields that have been superseded.",
                message='This field has been superseded in schema.org by "{{supersededBy}}".',
                sample_values={"supersededBy": "https://schema.org/eventAttendanceMode"},
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.FIELD_DEPRECATED,
            ),
            "notInSpec": RuleTest(
                description="Raises a warning for fields that are not part of the specification.",
                message="This field is not defined in the specification.",
                category=ValidationErrorCategory.CONFORMANCE,
                severity=ValidationErrorSeverity.WARNING,
                type=ValidationErrorType.FIELD_NOT_IN_SPEC,
            ),
        },
    )

    @staticmethod
    def get_root_json_ld_node(node: ModelNode) -> ModelNode:
        current = node
        while current.parent_node is not None and current.parent_node.model.is_json_ld:
            current = current.parent_node
        return current

    async def get_contexts(self, node: ModelNode) -> list[dict[str, Any]]:
        """Extension contexts linked from the document, other than the core context."""
        references = self.get_root_json_ld_node(node).get_value("@context")
        if isinstance(references, (str, dict)):
            references = [references]
        if not isinstance(references, list):
            return []

        core_url = node.environment.get_metadata(node.version).get("contextUrl")
        fetcher = node.environment.remote_fetcher(node.options)
        contexts = []
        for reference in references:
            if isinstance(reference, dict):
                contexts.append(reference)
            elif isinstance(reference, str) and reference.rstrip("/") != str(core_url or "").rstrip("/"):
                document = await fetcher.fetch_json(reference)
                if isinstance(document, dict):
                    contexts.append(document)
        return contexts

    def _model_class_id(self, node: ModelNode) -> str:
        if node.model.derived_from:
            return node.model.derived_from
        prefix = node.environment.get_metadata(node.version).get("openActivePrefix", "oa")
        return f"{prefix}:{node.model.type}"

    def _schema_org_membership(self, node: ModelNode, label: str) -> Optional[PropertyMembership]:
        if not node.model.derived_from:
            return None
        for spec in node.options.schema_org_specifications:
            membership = node.environment.graphs.is_property_in_class(spec, f"schema:{label}", node.model.derived_from)
            if membership.is_defined:
                return membership
        return None

    async def validate_field(self, node: ModelNode, field: str) -> list[ValidationError]:
        if not node.model.has_specification or field == "@context":
            return []
        if node.has_field_in_spec(field) or field.lower().startswith("beta:"):
            return []

        substitutions: dict[str, Any] = {}
        typo = node.model.common_typos.get(field)
        if typo is not None:
            test_key = "typoHint"
            substitutions = {"typoField": field, "actualField": typo}
        else:
            contexts = await self.get_contexts(node)
            prop = node.environment.properties.resolve(field, node.version, contexts)
            namespaces = node.environment.get_metadata(node.version).get("namespaces") or {}
            if not prop.is_resolved:
                test_key = "invalidExperimental" if ":" in field else "notInSpec"
            elif not prop.is_namespaced:
                test_key = "notInSpec"
            elif prop.prefix not in namespaces:
                class_id = self._model_class_id(node)
                defined = any(
                    node.environment.graphs.is_property_in_class(context, field, class_id).is_defined
                    for context in contexts
                )
                if defined:
                    return []
                test_key = "invalidExperimental"
            else:
                membership = self._schema_org_membership(node, prop.label)
                if membership is None:
                    test_key = "notInSpec"
                elif membership.superseded_by:
                    test_key = "supersededInSchemaOrg"
                    substitutions = {"supersededBy": membership.superseded_by}
                else:
                    test_key = "inSchemaOrg"

        return [self.create_error(test_key, {"value": node.value[field], "path": node.get_path(field)}, substitutions)]
