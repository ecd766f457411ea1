"""
Validation environment.

An ``Environment`` ties a loader to the resolvers that depend on it and owns
their append-only caches. One default environment is shared by the process;
tests and embedders build their own so that caches never leak between them.
"""

from __future__ import annotations

from typing import Any, Optional

import pydantic

from .core.cache import AppendOnlyCache
from .core.graph import ClassGraphResolver
from .core.model import Model
from .core.property import PropertyResolver
from .exceptions import DefinitionNotFoundError
from .loader import DataModelLoader, InMemoryLoader, JsonDirectoryLoader
from .logging import logger
from .options import ValidatorOptions
from .remote import RemoteDocumentFetcher


class Environment:
    def __init__(
        self,
        loader: Optional[DataModelLoader] = None,
        *,
        properties: Optional[PropertyResolver] = None,
        graphs: Optional[ClassGraphResolver] = None,
        fetcher: Optional[RemoteDocumentFetcher] = None,
    ):
        self.loader = loader if loader is not None else InMemoryLoader()
        self.properties = properties if properties is not None else PropertyResolver(self.loader, AppendOnlyCache())
        self.graphs = graphs if graphs is not None else ClassGraphResolver(cache=AppendOnlyCache())
        self.fetcher = fetcher
        self._fetchers: dict[tuple[Any, ...], RemoteDocumentFetcher] = {}

    @classmethod
    def from_options(cls, options: ValidatorOptions) -> "Environment":
        if options.data_model_path is not None:
            return cls(JsonDirectoryLoader(options.data_model_path))
        return cls()

    def load_model(self, name: Optional[str], version: str) -> Model:
        """Model for ``name``; a spec-less model when it cannot be loaded."""
        if not name:
            return Model.spec_less()
        try:
            record = self.loader.load_model(name, version)
        except DefinitionNotFoundError as exc:
            logger.debug(f"Environment: {exc}")
            return Model.spec_less(name)
        try:
            return Model(record)
        except pydantic.ValidationError as exc:
            logger.warning(f"Environment: malformed definition for model {name!r}: {exc}")
            return Model.spec_less(name)

    def get_metadata(self, version: str) -> dict[str, Any]:
        try:
            return self.loader.get_metadata(version)
        except DefinitionNotFoundError:
            return {}

    def get_namespaces(self, version: str) -> dict[str, str]:
        return self.properties.namespaces(version)

    def remote_fetcher(self, options: ValidatorOptions) -> RemoteDocumentFetcher:
        """Fetcher configured from ``options`` unless one was injected."""
        if self.fetcher is not None:
            return self.fetcher
        key = (options.remote_fetch_enabled, options.remote_cache_path, options.remote_cache_ttl_seconds)
        if key not in self._fetchers:
            self._fetchers[key] = RemoteDocumentFetcher.from_options(options)
        return self._fetchers[key]


_default_environment: Optional[Environment] = None


def get_default_environment() -> Environment:
    global _default_environment
    if _default_environment is None:
        _default_environment = Environment()
    return _default_environment


def set_default_environment(environment: Optional[Environment]) -> None:
    """Replace the process-wide environment; ``None`` resets it."""
    global _default_environment
    _default_environment = environment
