"""
Type engine.

``Field`` wraps one field definition and answers two questions about a value:
what type tag does it look like (``detect_type``) and can that tag satisfy one
of the declared tags (``can_be_type_of`` / ``detected_type_is_allowed``).

Inference is narrow. It recognises a closed set of scalar formats
by pattern, enumeration values declared for the field's own tags, named models
by their type discriminator, and arrays by unifying element tags. Subtyping of
named models is decided against the class graph of the specification version
and any schema.org graphs passed in the options.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..exceptions import DefinitionNotFoundError
from ..models.definitions import FieldDefinition
from ..options import ValidatorOptions
from . import type_tags as tags
from .property import PropertyDescriptor
from .undefined import UNDEFINED

if TYPE_CHECKING:
    from ..environment import Environment

INTEGER_PATTERN = re.compile(r"^-?[0-9]+([eE]-?[0-9]+)?$")
DATE_PATTERN = re.compile(r"^[0-9]{4}(-?)[0-9]{2}\1[0-9]{2}$")
DATETIME_PATTERN = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?(Z|[+-][0-9]{2}:[0-9]{2})?$"
)
TIME_PATTERN = re.compile(r"^[0-9]{2}:[0-9]{2}(:[0-9]{2})?(Z|[+-][0-9]{2}:[0-9]{2})?$")
DURATION_PATTERN = re.compile(r"^P[.,0-9YMDHTMSW]+$")

# RFC 6570: literals outside braces, expressions of comma separated varspecs inside.
_URI_TEMPLATE_LITERAL = r"[^\s{}\"<>\\^`|]"
_URI_TEMPLATE_VARSPEC = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})(?:\.?(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2}))*(?::[1-9][0-9]{0,3}|\*)?"
_URI_TEMPLATE_EXPRESSION = rf"\{{[+#./;?&=,!@|]?{_URI_TEMPLATE_VARSPEC}(?:,{_URI_TEMPLATE_VARSPEC})*\}}"
URI_TEMPLATE_PATTERN = re.compile(rf"^(?:{_URI_TEMPLATE_LITERAL}|{_URI_TEMPLATE_EXPRESSION})*$")
URI_TEMPLATE_EXPRESSION_PATTERN = re.compile(_URI_TEMPLATE_EXPRESSION)

# https://gist.github.com/dperini/729294
URL_PATTERN = re.compile(
    r"^(?:(?:https?|ftp)://)"
    r"(?:\S+(?::\S*)?@)?"
    r"(?:"
    r"(?!(?:10|127)(?:\.\d{1,3}){3})"
    r"(?!(?:169\.254|192\.168)(?:\.\d{1,3}){2})"
    r"(?!172\.(?:1[6-9]|2\d|3[0-1])(?:\.\d{1,3}){2})"
    r"(?:[1-9]\d?|1\d\d|2[01]\d|22[0-3])"
    r"(?:\.(?:1?\d{1,2}|2[0-4]\d|25[0-5])){2}"
    r"(?:\.(?:[1-9]\d?|1\d\d|2[0-4]\d|25[0-4]))"
    r"|"
    r"(?:(?:[a-z\u00a1-\uffff0-9]-*)*[a-z\u00a1-\uffff0-9]+)"
    r"(?:\.(?:[a-z\u00a1-\uffff0-9]-*)*[a-z\u00a1-\uffff0-9]+)*"
    r"(?:\.(?:[a-z\u00a1-\uffff]{2,}))\.?"
    r")"
    r"(?::\d{2,5})?"
    r"(?:[/?#]\S*)?$",
    re.IGNORECASE,
)


def canonical_number(value: float | int) -> str:
    """Shortest decimal form of a JSON number; integral values carry no ``.0``."""
    if isinstance(value, int):
        if abs(value) < 10**21:
            return str(value)
        value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def is_uri_template(value: str) -> bool:
    return bool(URI_TEMPLATE_PATTERN.match(value)) and bool(URI_TEMPLATE_EXPRESSION_PATTERN.search(value))


def is_url(value: str) -> bool:
    return bool(URL_PATTERN.match(value))


class Field:
    """
    Type engine for one field definition.

    ``environment`` supplies enumerations, the class graph and property
    resolution; ``options`` supplies the specification version and any extra
    schema.org graphs.
    """

    def __init__(
        self,
        definition: FieldDefinition | dict[str, Any] | None = None,
        environment: Optional["Environment"] = None,
        options: Optional[ValidatorOptions] = None,
    ):
        if definition is None:
            definition = FieldDefinition()
        elif not isinstance(definition, FieldDefinition):
            definition = FieldDefinition.model_validate(definition)
        if environment is None:
            from ..environment import get_default_environment

            environment = get_default_environment()
        self.definition = definition
        self.environment = environment
        self.options = options if options is not None else ValidatorOptions()

    @property
    def field_name(self) -> Optional[str]:
        return self.definition.field_name

    @property
    def required_type(self) -> Optional[str]:
        return self.definition.required_type

    @property
    def alternative_types(self) -> list[str]:
        return self.definition.alternative_types

    @property
    def model(self) -> Optional[str]:
        return self.definition.model

    @property
    def alternative_models(self) -> list[str]:
        return self.definition.alternative_models

    @property
    def version(self) -> str:
        return self.options.version

    def get_possible_models(self) -> list[str]:
        models = [self.model] if self.model else []
        return models + list(self.alternative_models)

    def get_all_possible_types(self) -> list[str]:
        types: list[str] = []
        if self.required_type:
            types.append(self.required_type)
        types.extend(self.alternative_types)
        return types + self.get_possible_models()

    def is_only_type(self, tag: str) -> bool:
        return (
            self.required_type == tag
            and not self.alternative_types
            and not self.model
            and not self.alternative_models
        )

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def detect_type(self, value: Any, in_array: bool = False) -> str:
        if value is UNDEFINED:
            return tags.UNDEFINED_TAG
        if value is None:
            return tags.NULL
        if isinstance(value, bool):
            return tags.BOOLEAN
        if isinstance(value, (int, float)):
            return self._narrow(self._number_type(value), tags.FLOAT, in_array)
        if isinstance(value, str):
            return self._string_type(value, in_array)
        if isinstance(value, list):
            return self._array_type(value)
        if isinstance(value, dict):
            discriminator = self.environment.properties.get_object_field(value, "@type", self.version)
            if isinstance(discriminator, str) and discriminator:
                return f"{tags.MODEL_PREFIX}{discriminator}"
            return tags.THING
        return tags.UNKNOWN

    @staticmethod
    def _number_type(value: float | int) -> str:
        if INTEGER_PATTERN.match(canonical_number(value)) and value % 1 == 0:
            return tags.INTEGER
        return tags.FLOAT

    def _narrow(self, detected: str, fallback: str, in_array: bool) -> str:
        """Fall back to ``fallback`` when only it, not ``detected``, is declared."""
        possible = self.get_all_possible_types()
        if in_array:
            if tags.array_of(detected) not in possible and tags.array_of(fallback) in possible:
                return fallback
        elif detected not in possible and fallback in possible:
            return fallback
        return detected

    def _string_type(self, value: str, in_array: bool) -> str:
        if DATE_PATTERN.match(value):
            detected = tags.DATE
        elif DATETIME_PATTERN.match(value):
            detected = tags.DATETIME
        elif TIME_PATTERN.match(value):
            detected = tags.TIME
        elif DURATION_PATTERN.match(value):
            detected = tags.DURATION
        else:
            enum_tag = self._enum_type(value, in_array)
            if enum_tag is not None:
                return enum_tag
            if is_uri_template(value):
                detected = tags.URL_TEMPLATE
            elif is_url(value):
                detected = tags.URL
            else:
                detected = tags.TEXT
        return self._narrow(detected, tags.TEXT, in_array)

    def _enum_type(self, value: str, in_array: bool) -> Optional[str]:
        try:
            enums = self.environment.loader.get_enums(self.version)
        except DefinitionNotFoundError:
            return None
        if not enums:
            return None
        for declared in self.get_all_possible_types():
            if in_array != tags.is_array_tag(declared):
                continue
            candidate = tags.array_inner(declared) if in_array else declared
            label = tags.short_name(candidate) or tags.strip_model(candidate)
            enum = enums.get(label)
            if isinstance(enum, dict) and value in (enum.get("values") or []):
                return candidate
        return None

    def _array_type(self, value: list[Any]) -> str:
        seen: list[str] = []
        for element in value:
            element_type = self.detect_type(element, in_array=True)
            if element_type not in seen:
                seen.append(element_type)
        if not seen:
            return tags.EMPTY_ARRAY
        if len(seen) == 1:
            return tags.array_of(seen[0])
        return tags.array_of(tags.union_of(seen))

    # ------------------------------------------------------------------
    # Compatibility
    # ------------------------------------------------------------------

    def can_be_type_of(self, test_tag: str, actual_tag: str) -> bool:
        """Whether a value inferred as ``test_tag`` satisfies the declared ``actual_tag``."""
        if test_tag == actual_tag:
            return True
        if tags.is_array_tag(test_tag) and tags.is_array_tag(actual_tag):
            return self.can_be_type_of(tags.array_inner(test_tag), tags.array_inner(actual_tag))
        if tags.is_model_tag(test_tag) and tags.is_model_tag(actual_tag):
            return self.can_be_type_of(tags.strip_model(test_tag), tags.strip_model(actual_tag))
        if tags.COERCIONS.get(test_tag) == actual_tag:
            return True
        if tags.is_union_tag(test_tag):
            members = tags.union_members(test_tag)
            return bool(members) and all(self.can_be_type_of(member, actual_tag) for member in members)
        if tags.is_label_tag(test_tag) and tags.is_label_tag(actual_tag):
            return self._is_subclass(test_tag, actual_tag)
        return False

    def _resolve(self, label: str) -> PropertyDescriptor:
        return self.environment.properties.resolve(label, self.version)

    def _is_subclass(self, test_label: str, actual_label: str) -> bool:
        test = self._resolve(test_label)
        actual = self._resolve(actual_label)
        if test.same_as(actual):
            return True
        if not test.is_namespaced:
            return True
        class_id = test.iri or test.compact
        for spec in self._graphs():
            chain = self.environment.graphs.get_class_graph(spec, class_id)
            for ancestor in chain[1:]:
                parent = self._resolve(ancestor)
                if parent.same_as(actual) or ancestor == actual.iri:
                    return True
        return False

    def _graphs(self) -> Sequence[dict[str, Any]]:
        specs: list[dict[str, Any]] = []
        try:
            graph = self.environment.loader.get_graph(self.version)
        except DefinitionNotFoundError:
            graph = None
        if graph:
            specs.append(graph)
        specs.extend(self.options.schema_org_specifications)
        return specs

    def detected_type_is_allowed(self, value: Any) -> bool:
        detected = self.detect_type(value)
        return any(self.can_be_type_of(detected, declared) for declared in self.get_all_possible_types())
