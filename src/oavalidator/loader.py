"""
Loader collaborators.

The core never reads specification files itself: it asks a loader for model
records, the JSON-LD context, enumerations, the class graph and namespace
metadata of a specification version. Any loader failure is treated by the
core as "no specification available".

Two loaders ship with the package:

- ``InMemoryLoader`` holds records passed in by the caller (tests, embedding).
- ``JsonDirectoryLoader`` reads a published data-model directory::

      <root>/<version>/models/<Name>.json
      <root>/<version>/context.json
      <root>/<version>/enums.json
      <root>/<version>/graph.json
      <root>/<version>/metadata.json
      <root>/standards/<name>.json
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol

from .exceptions import ModelNotFoundError, StandardNotFoundError
from .logging import logger

DEFAULT_NAMESPACES: dict[str, str] = {
    "schema": "https://schema.org/",
    "oa": "https://openactive.io/",
    "beta": "https://openactive.io/ns-beta#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
}

DEFAULT_METADATA: dict[str, Any] = {
    "namespaces": DEFAULT_NAMESPACES,
    "contextUrl": "https://openactive.io/",
    "openActivePrefix": "oa",
}


class DataModelLoader(Protocol):
    """Contract consumed by the core."""

    def load_model(self, name: str, version: str) -> dict[str, Any]: ...

    def load_standard(self, name: str) -> dict[str, Any]: ...

    def get_context(self, version: str) -> dict[str, Any]: ...

    def get_enums(self, version: str) -> dict[str, Any]: ...

    def get_graph(self, version: str) -> Optional[dict[str, Any]]: ...

    def get_metadata(self, version: str) -> dict[str, Any]: ...


def unwrap_context(document: Any) -> dict[str, Any]:
    """Flatten a JSON-LD ``@context`` (document, dict or list of dicts) into one term map."""
    if isinstance(document, Mapping) and "@context" in document:
        document = document["@context"]
    terms: dict[str, Any] = {}
    if isinstance(document, Mapping):
        terms.update(document)
    elif isinstance(document, list):
        for part in document:
            if isinstance(part, Mapping):
                terms.update(part)
    return terms


class InMemoryLoader:
    """
    Loader over records supplied at construction time.

    The same records serve every version.
    """

    def __init__(
        self,
        models: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        context: Optional[Mapping[str, Any]] = None,
        enums: Optional[Mapping[str, Any]] = None,
        graph: Optional[Mapping[str, Any]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        standards: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ):
        self._models = dict(models or {})
        self._context = unwrap_context(context or {})
        self._enums = dict(enums or {})
        self._graph = dict(graph) if graph is not None else None
        self._metadata = {**DEFAULT_METADATA, **(metadata or {})}
        self._standards = dict(standards or {})

    def load_model(self, name: str, version: str) -> dict[str, Any]:
        if name not in self._models:
            raise ModelNotFoundError(name, version)
        return copy.deepcopy(dict(self._models[name]))

    def load_standard(self, name: str) -> dict[str, Any]:
        if name not in self._standards:
            raise StandardNotFoundError(name)
        return copy.deepcopy(dict(self._standards[name]))

    def get_context(self, version: str) -> dict[str, Any]:
        return self._context

    def get_enums(self, version: str) -> dict[str, Any]:
        return self._enums

    def get_graph(self, version: str) -> Optional[dict[str, Any]]:
        return self._graph

    def get_metadata(self, version: str) -> dict[str, Any]:
        return self._metadata


class JsonDirectoryLoader:
    """Loader over a directory of published JSON definitions."""

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._documents: dict[Path, Any] = {}

    def _read(self, path: Path) -> Any:
        if path not in self._documents:
            with path.open(encoding="utf-8") as handle:
                self._documents[path] = json.load(handle)
            logger.debug(f"JsonDirectoryLoader: loaded {path}")
        return self._documents[path]

    def _read_optional(self, path: Path, default: Any) -> Any:
        if not path.is_file():
            return default
        try:
            return self._read(path)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"JsonDirectoryLoader: ignoring unreadable {path}: {exc}")
            return default

    @staticmethod
    def _is_safe_name(name: str) -> bool:
        return bool(name) and "/" not in name and "\\" not in name and not name.startswith(".")

    def load_model(self, name: str, version: str) -> dict[str, Any]:
        path = self.root / version / "models" / f"{name}.json"
        if not self._is_safe_name(name) or not path.is_file():
            raise ModelNotFoundError(name, version)
        try:
            return copy.deepcopy(self._read(path))
        except (OSError, json.JSONDecodeError) as exc:
            raise ModelNotFoundError(name, version) from exc

    def load_standard(self, name: str) -> dict[str, Any]:
        path = self.root / "standards" / f"{name}.json"
        if not self._is_safe_name(name) or not path.is_file():
            raise StandardNotFoundError(name)
        try:
            return copy.deepcopy(self._read(path))
        except (OSError, json.JSONDecodeError) as exc:
            raise StandardNotFoundError(name) from exc

    def get_context(self, version: str) -> dict[str, Any]:
        return unwrap_context(self._read_optional(self.root / version / "context.json", {}))

    def get_enums(self, version: str) -> dict[str, Any]:
        return self._read_optional(self.root / version / "enums.json", {})

    def get_graph(self, version: str) -> Optional[dict[str, Any]]:
        return self._read_optional(self.root / version / "graph.json", None)

    def get_metadata(self, version: str) -> dict[str, Any]:
        metadata = self._read_optional(self.root / version / "metadata.json", {})
        return {**DEFAULT_METADATA, **metadata}
