"""
Public API for the oavalidator package.
"""

from .core import Field, Model, ModelNode, PropertyDescriptor, UNDEFINED
from .environment import Environment, get_default_environment, set_default_environment
from .exceptions import (
    DefinitionNotFoundError,
    ModelNotFoundError,
    OAValidatorError,
    RuleNotImplementedError,
    StandardNotFoundError,
)
from .loader import InMemoryLoader, JsonDirectoryLoader
from .models import (
    ValidationError,
    ValidationErrorCategory,
    ValidationErrorSeverity,
    ValidationErrorType,
)
from .options import ValidationMode, ValidatorOptions
from .rules import RawRule, Rule
from .validator import validate, validate_async

__all__ = [
    "validate",
    "validate_async",
    "ValidatorOptions",
    "ValidationMode",
    "ValidationError",
    "ValidationErrorCategory",
    "ValidationErrorSeverity",
    "ValidationErrorType",
    "Environment",
    "get_default_environment",
    "set_default_environment",
    "InMemoryLoader",
    "JsonDirectoryLoader",
    "Rule",
    "RawRule",
    "Field",
    "Model",
    "ModelNode",
    "PropertyDescriptor",
    "UNDEFINED",
    "OAValidatorError",
    "RuleNotImplementedError",
    "DefinitionNotFoundError",
    "ModelNotFoundError",
    "StandardNotFoundError",
]
