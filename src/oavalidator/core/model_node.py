"""
Document nodes.

A ``ModelNode`` is one position in the document being validated: the raw
value there, the model that governs it and a link to the parent node. Nodes
render the location pointer attached to diagnostics and resolve inherited
field values.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Iterator, Optional

from ..models.definitions import FieldDefinition, inherit_directive_admits
from ..options import ValidatorOptions
from .field import Field
from .model import Model
from .undefined import UNDEFINED, is_missing

if TYPE_CHECKING:
    from ..environment import Environment

ROOT = "$"
MAX_INHERITANCE_HOPS = 50

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def path_segment(segment: str | int) -> str:
    if isinstance(segment, int):
        return f"[{segment}]"
    if _IDENTIFIER.match(segment):
        return f".{segment}"
    return f"[{json.dumps(segment)}]"


class ModelNode:
    def __init__(
        self,
        name: str,
        value: Any,
        parent_node: Optional["ModelNode"],
        model: Model,
        options: Optional[ValidatorOptions] = None,
        array_index: Optional[int] = None,
        *,
        environment: Optional["Environment"] = None,
    ):
        if environment is None:
            environment = parent_node.environment if parent_node is not None else None
        if environment is None:
            from ..environment import get_default_environment

            environment = get_default_environment()
        if options is None:
            options = parent_node.options if parent_node is not None else ValidatorOptions()
        self.name = name
        self.value = value
        self.parent_node = parent_node
        self.model = model
        self.options = options
        self.array_index = array_index
        self.environment = environment

    def __repr__(self) -> str:
        return f"ModelNode(path={self.get_path()!r}, model={self.model.type!r})"

    @property
    def version(self) -> str:
        return self.options.version

    @property
    def is_root(self) -> bool:
        return self.parent_node is None

    def lineage(self) -> Iterator["ModelNode"]:
        """This node and its ancestors, nearest first."""
        node: Optional[ModelNode] = self
        while node is not None:
            yield node
            node = node.parent_node

    def get_path(self, *extra: str | int) -> str:
        parts: list[str] = []
        for node in self.lineage():
            segment = ROOT if node.is_root else path_segment(node.name)
            if node.array_index is not None:
                segment += path_segment(node.array_index)
            parts.append(segment)
        path = "".join(reversed(parts))
        return path + "".join(path_segment(segment) for segment in extra)

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def get_value(self, field: str) -> Any:
        """Value of ``field`` under any of its spellings, or ``UNDEFINED``."""
        return self.environment.properties.get_object_field(self.value, field, self.version)

    def has_value(self, field: str) -> bool:
        return self.environment.properties.object_has_field(self.value, field, self.version)

    def get_type(self) -> Optional[str]:
        value = self.get_value("@type")
        return value if isinstance(value, str) and value else None

    def _spellings(self, field: str) -> list[str]:
        return self.environment.properties.key_checks(field, self.version)

    def get_field_definition(self, field: str) -> Optional[FieldDefinition]:
        for key in self._spellings(field):
            definition = self.model.get_field(key)
            if definition is not None:
                return definition
        return None

    def get_field(self, field: str) -> Optional[Field]:
        """Type engine for ``field`` in this node's model, if the model declares it."""
        definition = self.get_field_definition(field)
        if definition is None:
            return None
        return Field(definition, self.environment, self.options)

    def has_field_in_spec(self, field: str) -> bool:
        return any(self.model.has_field_in_spec(key) for key in self._spellings(field))

    def matches_field(self, field: str, names: list[str]) -> bool:
        """Whether ``field`` is a spelling of any of ``names``."""
        return self.environment.properties.matches_any(field, names, self.version)

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def get_value_with_inheritance(self, field: str) -> Any:
        node: Optional[ModelNode] = self
        hops = 0
        while node is not None and hops <= MAX_INHERITANCE_HOPS:
            value = node.get_value(field)
            if not is_missing(value):
                return value
            node = node._inheritance_source(field)
            hops += 1
        return UNDEFINED

    def _inheritance_source(self, field: str) -> Optional["ModelNode"]:
        parent = self.parent_node
        if (
            parent is not None
            and parent.model.type == self.model.type
            and self.has_field_in_spec(field)
        ):
            link = parent.get_field_definition(self.name)
            if link is not None and inherit_directive_admits(link.inherits_to, field):
                return parent

        for child_name, definition in self.model.fields.items():
            if not inherit_directive_admits(definition.inherits_from, field):
                continue
            child_value = self.get_value(child_name)
            if not isinstance(child_value, dict):
                continue
            child_type = self.environment.properties.get_object_field(child_value, "@type", self.version)
            if not self.environment.properties.same_term(child_type, self.model.type, self.version):
                continue
            return ModelNode(child_name, child_value, self, self.model, self.options)
        return None
