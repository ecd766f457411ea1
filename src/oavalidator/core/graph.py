"""
Class graph resolution over RDF-style specification documents.

A specification document is either ``{"@context": ..., "@graph": [...]}`` or a
flat map of entries keyed by identifier. Entries typed ``rdfs:Class`` describe
classes; everything else is treated as a property description. Identifiers
may be written as compact IRIs, full IRIs or context terms and are always
compared after expansion to full IRIs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from ..loader import DEFAULT_NAMESPACES, unwrap_context
from .cache import AppendOnlyCache

RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
SCHEMA_NS = "https://schema.org/"

RDFS_CLASS = f"{RDFS_NS}Class"
RDFS_SUBCLASS_OF = f"{RDFS_NS}subClassOf"
RDFS_DOMAIN = f"{RDFS_NS}domain"
SCHEMA_DOMAIN_INCLUDES = f"{SCHEMA_NS}domainIncludes"
SCHEMA_SUPERSEDED_BY = f"{SCHEMA_NS}supersededBy"

_MAX_EXPANSION_DEPTH = 8


class MembershipStatus(str, Enum):
    IN_DOMAIN = "in_domain"
    NOT_IN_DOMAIN = "not_in_domain"
    NO_DOMAIN = "no_domain"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PropertyMembership:
    status: MembershipStatus
    superseded_by: Optional[str] = None

    @property
    def is_defined(self) -> bool:
        """The property exists and may be used on the class."""
        return self.status in (MembershipStatus.IN_DOMAIN, MembershipStatus.NO_DOMAIN)


class _Vocabulary:
    """Expansion table for one specification document."""

    def __init__(self, spec: Mapping[str, Any], namespaces: Mapping[str, str]):
        self.context = unwrap_context(spec.get("@context") or {})
        self.namespaces = dict(namespaces)
        for term, definition in self.context.items():
            if isinstance(definition, str) and "://" in definition and definition.endswith(("/", "#")):
                self.namespaces[term] = definition

    def expand(self, value: Any, depth: int = 0) -> Optional[str]:
        if isinstance(value, Mapping):
            value = value.get("@id")
        if not isinstance(value, str) or not value:
            return None
        if value.startswith("@") or "://" in value:
            return value
        prefix, sep, label = value.partition(":")
        if sep and prefix in self.namespaces:
            return f"{self.namespaces[prefix]}{label}"
        definition = self.context.get(value)
        if isinstance(definition, Mapping):
            definition = definition.get("@id")
        if isinstance(definition, str) and definition != value and depth < _MAX_EXPANSION_DEPTH:
            return self.expand(definition, depth + 1)
        return value

    def get(self, item: Mapping[str, Any], iri: str) -> Any:
        """Value of ``item`` under any key that expands to ``iri``."""
        if iri in item:
            return item[iri]
        for key, value in item.items():
            if self.expand(key) == iri:
                return value
        return None

    def ids(self, value: Any) -> list[str]:
        values = value if isinstance(value, list) else [value]
        expanded = (self.expand(entry) for entry in values if entry is not None)
        return [entry for entry in expanded if entry is not None]


class ClassGraphResolver:
    """
    Resolve ancestor chains and property domains.

    Chains are memoised per ``(spec["@id"], class_id)`` and expansion tables
    per ``spec["@id"]``; documents without an ``@id`` are resolved each time.
    """

    def __init__(
        self,
        namespaces: Optional[Mapping[str, str]] = None,
        cache: Optional[AppendOnlyCache[tuple[str, str], tuple[str, ...]]] = None,
    ):
        self.namespaces = dict(namespaces if namespaces is not None else DEFAULT_NAMESPACES)
        self.cache = cache if cache is not None else AppendOnlyCache()
        self.vocabularies: AppendOnlyCache[str, _Vocabulary] = AppendOnlyCache()

    def _vocabulary(self, spec: Mapping[str, Any]) -> _Vocabulary:
        spec_id = spec.get("@id")
        if not isinstance(spec_id, str):
            return _Vocabulary(spec, self.namespaces)
        cached = self.vocabularies.get(spec_id)
        if cached is not None:
            return cached
        return self.vocabularies.add(spec_id, _Vocabulary(spec, self.namespaces))

    @staticmethod
    def _entries(spec: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
        graph = spec.get("@graph")
        if graph is not None:
            if isinstance(graph, list):
                yield from (item for item in graph if isinstance(item, Mapping))
            return
        for key, item in spec.items():
            if not key.startswith("@") and isinstance(item, Mapping):
                yield item

    @staticmethod
    def _is_class(vocabulary: _Vocabulary, item: Mapping[str, Any]) -> bool:
        return RDFS_CLASS in vocabulary.ids(vocabulary.get(item, "@type"))

    def expand(self, spec: Mapping[str, Any], identifier: str) -> Optional[str]:
        return self._vocabulary(spec).expand(identifier)

    def get_class_graph(self, spec: Mapping[str, Any], class_id: str) -> tuple[str, ...]:
        """``(class_id, parent_id, grandparent_id, ...)`` or ``()`` when the class is unknown."""
        vocabulary = self._vocabulary(spec)
        target = vocabulary.expand(class_id)
        if target is None:
            return ()

        spec_id = spec.get("@id")
        key = (spec_id, target) if isinstance(spec_id, str) else None
        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        classes = {}
        for item in self._entries(spec):
            if not self._is_class(vocabulary, item):
                continue
            identifier = vocabulary.expand(vocabulary.get(item, "@id"))
            if identifier is not None:
                classes.setdefault(identifier, item)

        if target not in classes:
            result: tuple[str, ...] = ()
            return self.cache.add(key, result) if key is not None else result

        # An undescribed parent ends the chain but still counts as an ancestor.
        chain: list[str] = []
        current: Optional[str] = target
        while current is not None and current not in chain:
            chain.append(current)
            if current not in classes:
                break
            parents = vocabulary.ids(vocabulary.get(classes[current], RDFS_SUBCLASS_OF))
            current = parents[0] if parents else None

        result = tuple(chain)
        if key is not None:
            return self.cache.add(key, result)
        return result

    def is_property_in_class(
        self,
        spec: Mapping[str, Any],
        property_name: str,
        class_id: str,
    ) -> PropertyMembership:
        vocabulary = self._vocabulary(spec)
        target = vocabulary.expand(property_name)
        if target is None:
            return PropertyMembership(MembershipStatus.NOT_FOUND)

        for item in self._entries(spec):
            if self._is_class(vocabulary, item):
                continue
            if vocabulary.expand(vocabulary.get(item, "@id")) != target:
                continue

            superseded = vocabulary.ids(vocabulary.get(item, SCHEMA_SUPERSEDED_BY))
            superseded_by = superseded[0] if superseded else None

            domain = vocabulary.get(item, SCHEMA_DOMAIN_INCLUDES)
            if domain is None:
                domain = vocabulary.get(item, RDFS_DOMAIN)
            if domain is None:
                return PropertyMembership(MembershipStatus.NO_DOMAIN, superseded_by)

            classes = self.get_class_graph(spec, class_id)
            # A class this document does not describe cannot be ruled out.
            if not classes or any(member in classes for member in vocabulary.ids(domain)):
                return PropertyMembership(MembershipStatus.IN_DOMAIN, superseded_by)
            return PropertyMembership(MembershipStatus.NOT_IN_DOMAIN, superseded_by)

        return PropertyMembership(MembershipStatus.NOT_FOUND)
