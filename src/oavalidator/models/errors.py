"""
Public diagnostic model emitted by validation rules.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ValidationErrorCategory(str, Enum):
    """
    Broad family of a diagnostic.
    """

    CONFORMANCE = "conformance"
    DATA_QUALITY = "data-quality"
    RECOMMENDATION = "recommendation"
    INTERNAL = "internal"


class ValidationErrorSeverity(str, Enum):
    """
    How strongly a diagnostic should be acted upon.
    """

    FAILURE = "failure"
    WARNING = "warning"
    NOTICE = "notice"
    SUGGESTION = "suggestion"


class ValidationErrorType(str, Enum):
    """
    Closed set of diagnostic kinds.
    """

    INVALID_JSON = "invalid_json"
    FOUND_RPDE_FEED = "found_rpde_feed"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    MISSING_RECOMMENDED_FIELD = "missing_recommended_field"
    MODEL_NOT_FOUND = "model_not_found"
    FILE_NOT_FOUND = "file_not_found"
    FIELD_NOT_IN_SPEC = "field_not_in_spec"
    FIELD_COULD_BE_TYPO = "field_could_be_typo"
    FIELD_DEPRECATED = "field_deprecated"
    EXPERIMENTAL_FIELDS_NOT_CHECKED = "experimental_fields_not_checked"
    SCHEMA_ORG_FIELDS_NOT_CHECKED = "schema_org_fields_not_checked"
    INVALID_TYPE = "invalid_type"
    INVALID_FORMAT = "invalid_format"
    FIELD_IS_EMPTY = "field_is_empty"
    FIELD_NOT_IN_DEFINED_VALUES = "field_not_in_defined_values"
    VALUE_OUTSIDE_CONSTRAINT = "value_outside_constraint"


DEFAULT_MESSAGES: dict[ValidationErrorType, str] = {
    ValidationErrorType.INVALID_JSON: "The JSON fragment supplied is invalid.",
    ValidationErrorType.MISSING_REQUIRED_FIELD: "Required field is missing.",
    ValidationErrorType.MISSING_RECOMMENDED_FIELD: "Recommended field is missing.",
    ValidationErrorType.MODEL_NOT_FOUND: "Could not load definition for model",
    ValidationErrorType.FIELD_NOT_IN_SPEC: "This field is not defined in the specification",
    ValidationErrorType.EXPERIMENTAL_FIELDS_NOT_CHECKED: "The validator does not currently check experimental fields",
    ValidationErrorType.INVALID_TYPE: "Field is an invalid type",
    ValidationErrorType.INVALID_FORMAT: "Field is not in the correct format",
    ValidationErrorType.FIELD_NOT_IN_DEFINED_VALUES: "This value supplied is not in the allowed values for this field",
}


class ValidationError(BaseModel):
    """
    A single diagnostic with its document location.

    ``path`` is rendered by the document node that produced the diagnostic,
    so nested diagnostics already carry their full location.
    """

    category: ValidationErrorCategory = Field(description="Broad family of the diagnostic.")
    type: ValidationErrorType = Field(description="Diagnostic kind.")
    severity: ValidationErrorSeverity = Field(description="How strongly the diagnostic should be acted upon.")
    message: Optional[str] = Field(
        default=None,
        description="Rendered human-readable message; defaults to the generic message for the type.",
    )
    value: Any = Field(default=None, description="Offending value, if any.")
    path: str = Field(default="$", description="Document location rooted at ``$``.")

    def model_post_init(self, __context: Any) -> None:
        if self.message is None:
            self.message = DEFAULT_MESSAGES.get(self.type)
