from .definitions import (
    FieldDefinition,
    InheritRule,
    ModelDefinition,
    RequiredOption,
    inherit_directive_admits,
)
from .errors import (
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
)

__all__ = [
    "FieldDefinition",
    "InheritRule",
    "ModelDefinition",
    "RequiredOption",
    "inherit_directive_admits",
    "ValidationError",
    "ValidationErrorCategory",
    "ValidationErrorSeverity",
    "ValidationErrorType",
]
