"""
Property name resolution.

A property can appear in a document under several spellings: a bare label
(``name``), a compact IRI (``schema:name``), a full IRI
(``https://schema.org/name``), or a deprecated alias of a JSON-LD keyword
(``type`` for ``@type``). The resolver maps any spelling to a canonical
``PropertyDescriptor`` and lists every spelling a lookup must accept, so that
document access never depends on which form the publisher chose.

Unresolvable tokens yield an empty descriptor. That is not an error: callers
treat it as an unknown property that is permitted by default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..exceptions import DefinitionNotFoundError
from ..loader import DataModelLoader, unwrap_context
from .cache import AppendOnlyCache
from .undefined import UNDEFINED

_COMPACT_IRI = re.compile(r"^([A-Za-z][A-Za-z0-9_-]*):([A-Za-z0-9_@][A-Za-z0-9_.@-]*)$")
_MAX_TERM_DEPTH = 8

# Deprecated spellings of JSON-LD keywords, honoured even without a context.
KEYWORD_ALIASES: dict[str, str] = {"@type": "type", "@id": "id"}


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Canonical identity of a property.

    All attributes are ``None`` when the token could not be resolved.
    """

    alias: Optional[str] = None
    label: Optional[str] = None
    prefix: Optional[str] = None
    namespace: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.label is not None

    @property
    def is_namespaced(self) -> bool:
        return self.namespace is not None or self.prefix is not None

    @property
    def iri(self) -> Optional[str]:
        if self.namespace is None or self.label is None:
            return None
        return f"{self.namespace}{self.label}"

    @property
    def compact(self) -> Optional[str]:
        if self.prefix is None or self.label is None:
            return None
        return f"{self.prefix}:{self.label}"

    def same_as(self, other: "PropertyDescriptor") -> bool:
        if not self.is_resolved or not other.is_resolved:
            return False
        if self.iri is not None and other.iri is not None:
            return self.iri == other.iri
        return self.label == other.label and self.prefix == other.prefix


_UNRESOLVED = PropertyDescriptor()


def _term_id(definition: Any) -> Optional[str]:
    if isinstance(definition, str):
        return definition
    if isinstance(definition, Mapping) and isinstance(definition.get("@id"), str):
        return definition["@id"]
    return None


def _is_namespace_iri(value: Any) -> bool:
    return isinstance(value, str) and "://" in value and value.endswith(("/", "#"))


class PropertyResolver:
    """
    Resolve property tokens for a specification version.

    Results for the version's own vocabulary are memoised per
    ``(token, version)``. Extra contexts (extension vocabularies referenced by a
    document) bypass the cache.
    """

    def __init__(
        self,
        loader: DataModelLoader,
        cache: Optional[AppendOnlyCache[tuple[str, str], PropertyDescriptor]] = None,
    ):
        self.loader = loader
        self.cache = cache if cache is not None else AppendOnlyCache()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(
        self,
        token: Any,
        version: str,
        contexts: Sequence[Mapping[str, Any]] = (),
    ) -> PropertyDescriptor:
        if not isinstance(token, str) or not token:
            return _UNRESOLVED
        if contexts:
            terms, namespaces = self._vocabulary(version, contexts)
            return self._resolve_with(token, terms, namespaces, 0)

        key = (token, version)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        terms, namespaces = self._vocabulary(version, ())
        return self.cache.add(key, self._resolve_with(token, terms, namespaces, 0))

    def namespaces(self, version: str) -> dict[str, str]:
        return self._vocabulary(version, ())[1]

    def _vocabulary(
        self,
        version: str,
        contexts: Sequence[Mapping[str, Any]],
    ) -> tuple[dict[str, Any], dict[str, str]]:
        try:
            terms = dict(self.loader.get_context(version))
        except DefinitionNotFoundError:
            terms = {}
        for context in contexts:
            for term, definition in unwrap_context(context).items():
                terms.setdefault(term, definition)

        try:
            metadata = self.loader.get_metadata(version)
        except DefinitionNotFoundError:
            metadata = {}
        namespaces: dict[str, str] = dict(metadata.get("namespaces") or {})
        for term, definition in terms.items():
            if ":" not in term and _is_namespace_iri(definition):
                namespaces.setdefault(term, definition)
        return terms, namespaces

    def _resolve_with(
        self,
        token: str,
        terms: Mapping[str, Any],
        namespaces: Mapping[str, str],
        depth: int,
    ) -> PropertyDescriptor:
        if token.startswith("@"):
            return PropertyDescriptor(alias=self._keyword_alias(terms, token), label=token)

        definition = _term_id(terms.get(token))
        if definition is not None and definition.startswith("@"):
            return PropertyDescriptor(alias=token, label=definition)
        if definition is None:
            for keyword, alias in KEYWORD_ALIASES.items():
                if token == alias:
                    return PropertyDescriptor(alias=token, label=keyword)

        match = _COMPACT_IRI.match(token)
        if match and match.group(1) in namespaces:
            prefix, label = match.groups()
            namespace = namespaces[prefix]
            return PropertyDescriptor(
                alias=self._term_alias(terms, prefix, label, namespace),
                label=label,
                prefix=prefix,
                namespace=namespace,
            )

        # Longest namespace first so that ".../ns-beta#x" is not read as ".../" + "ns-beta#x".
        for prefix, namespace in sorted(namespaces.items(), key=lambda item: -len(item[1])):
            if token.startswith(namespace) and len(token) > len(namespace):
                label = token[len(namespace):]
                return PropertyDescriptor(
                    alias=self._term_alias(terms, prefix, label, namespace),
                    label=label,
                    prefix=prefix,
                    namespace=namespace,
                )

        if definition is not None and definition != token and depth < _MAX_TERM_DEPTH:
            resolved = self._resolve_with(definition, terms, namespaces, depth + 1)
            if resolved.is_resolved:
                return replace(resolved, alias=token)

        return _UNRESOLVED

    @staticmethod
    def _keyword_alias(terms: Mapping[str, Any], keyword: str) -> Optional[str]:
        for term, definition in terms.items():
            if _term_id(definition) == keyword:
                return term
        return KEYWORD_ALIASES.get(keyword)

    @staticmethod
    def _term_alias(
        terms: Mapping[str, Any],
        prefix: str,
        label: str,
        namespace: str,
    ) -> Optional[str]:
        targets = {f"{prefix}:{label}", f"{namespace}{label}"}
        for term, definition in terms.items():
            if ":" in term or term == prefix:
                continue
            if _term_id(definition) in targets:
                return term
        return None

    # ------------------------------------------------------------------
    # Alias-transparent document access
    # ------------------------------------------------------------------

    def key_checks(
        self,
        prop: Any,
        version: str,
        contexts: Sequence[Mapping[str, Any]] = (),
    ) -> list[str]:
        """Every key under which a value for ``prop`` may legitimately appear."""
        if not isinstance(prop, str) or not prop:
            return []
        descriptor = self.resolve(prop, version, contexts)
        candidates: list[Optional[str]] = [prop, descriptor.alias, descriptor.label]
        if descriptor.label is not None:
            candidates.extend([descriptor.compact, descriptor.iri])
        keys: list[str] = []
        for candidate in candidates:
            if candidate is not None and candidate not in keys:
                keys.append(candidate)
        return keys

    def object_mapped_field_name(self, data: Any, prop: Any, version: str) -> Optional[str]:
        """The key actually used in ``data`` for ``prop``, if any."""
        if not isinstance(data, Mapping):
            return None
        keys = self.key_checks(prop, version)
        for key in data:
            if key in keys:
                return key
        return None

    def object_has_field(self, data: Any, prop: Any, version: str) -> bool:
        return self.object_mapped_field_name(data, prop, version) is not None

    def get_object_field(self, data: Any, prop: Any, version: str) -> Any:
        """Value of ``prop`` in ``data`` or ``UNDEFINED`` when absent."""
        key = self.object_mapped_field_name(data, prop, version)
        if key is None:
            return UNDEFINED
        return data[key]

    def array_has_field(self, data: Any, prop: Any, version: str) -> bool:
        if not isinstance(data, list):
            return False
        keys = self.key_checks(prop, version)
        return any(isinstance(item, str) and item in keys for item in data)

    def string_matches_field(self, data: Any, prop: Any, version: str) -> bool:
        if not isinstance(data, str):
            return False
        return data in self.key_checks(prop, version)

    def matches_any(self, token: Any, props: Iterable[str], version: str) -> bool:
        return any(self.string_matches_field(token, prop, version) for prop in props)

    def same_term(self, first: Any, second: Any, version: str) -> bool:
        """Whether two spellings name the same term, e.g. ``Event`` and ``schema:Event``."""
        if not isinstance(first, str) or not isinstance(second, str):
            return False
        if first == second:
            return True
        return self.resolve(first, version).same_as(self.resolve(second, version))
