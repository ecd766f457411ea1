from .cache import AppendOnlyCache
from .field import Field
from .graph import ClassGraphResolver, MembershipStatus, PropertyMembership
from .model import Model
from .model_node import ModelNode
from .property import PropertyDescriptor, PropertyResolver
from .undefined import UNDEFINED, Undefined, is_missing

__all__ = [
    "AppendOnlyCache",
    "ClassGraphResolver",
    "Field",
    "MembershipStatus",
    "Model",
    "ModelNode",
    "PropertyDescriptor",
    "PropertyMembership",
    "PropertyResolver",
    "UNDEFINED",
    "Undefined",
    "is_missing",
]
