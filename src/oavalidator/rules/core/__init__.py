from .beta_fields import BetaFieldsRule
from .fields_correct_type import FieldsCorrectTypeRule
from .fields_not_in_model import FieldsNotInModelRule
from .recommended_fields import RecommendedFieldsRule
from .required_fields import RequiredFieldsRule
from .required_optional_fields import RequiredOptionalFieldsRule
from .valid_model_type import ValidModelTypeRule

__all__ = [
    "BetaFieldsRule",
    "FieldsCorrectTypeRule",
    "FieldsNotInModelRule",
    "RecommendedFieldsRule",
    "RequiredFieldsRule",
    "RequiredOptionalFieldsRule",
    "ValidModelTypeRule",
]
