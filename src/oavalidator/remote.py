"""
Remote JSON retrieval for extension vocabularies.

Documents may reference extension ``@context`` URLs. When remote fetching is
enabled those documents are downloaded with ``httpx`` and kept in memory and,
optionally, in an on-disk cache directory where each entry expires after
``remote_cache_ttl_seconds``. A failed download is never an error for the
caller: the result simply carries no data.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from .logging import logger
from .options import ValidatorOptions

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass
class RemoteDocument:
    url: str
    data: Any = None
    status_code: Optional[int] = None
    error: Optional[str] = None
    fetched_at: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


def cache_key(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


class RemoteDocumentFetcher:
    """Fetch JSON documents over HTTP with a memory and file cache."""

    def __init__(
        self,
        *,
        enabled: bool = False,
        cache_path: Optional[Path] = None,
        ttl_seconds: int = 3600,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.enabled = enabled
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self.ttl_seconds = ttl_seconds
        self.transport = transport
        self.timeout = timeout
        self._memory: dict[str, RemoteDocument] = {}

    @classmethod
    def from_options(
        cls,
        options: ValidatorOptions,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RemoteDocumentFetcher":
        return cls(
            enabled=options.remote_fetch_enabled,
            cache_path=options.remote_cache_path,
            ttl_seconds=options.remote_cache_ttl_seconds,
            transport=transport,
        )

    async def fetch(self, url: str) -> RemoteDocument:
        key = cache_key(url)
        if key in self._memory:
            return self._memory[key]

        if not self.enabled:
            return RemoteDocument(url=url, error="remote fetching disabled", fetched_at=time.time())

        cached = self._read_cache_file(key)
        if cached is not None:
            self._memory[key] = cached
            return cached

        document = await self._download(url)
        self._memory[key] = document
        self._write_cache_file(key, document)
        return document

    async def fetch_json(self, url: str) -> Any:
        """Parsed body of ``url`` or ``None`` when it could not be retrieved."""
        document = await self.fetch(url)
        return document.data if document.ok else None

    async def _download(self, url: str) -> RemoteDocument:
        fetched_at = time.time()
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.timeout,
                follow_redirects=True,
                headers={"Accept": "application/ld+json, application/json"},
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.debug(f"RemoteDocumentFetcher: {url} failed: {exc}")
            return RemoteDocument(url=url, error=str(exc), fetched_at=fetched_at)

        if response.status_code != 200:
            logger.debug(f"RemoteDocumentFetcher: {url} returned {response.status_code}")
            return RemoteDocument(
                url=url,
                status_code=response.status_code,
                error=f"HTTP {response.status_code}",
                fetched_at=fetched_at,
            )
        try:
            data = response.json()
        except ValueError as exc:
            return RemoteDocument(
                url=url,
                status_code=response.status_code,
                error=f"invalid JSON: {exc}",
                fetched_at=fetched_at,
            )
        logger.debug(f"RemoteDocumentFetcher: fetched {url}")
        return RemoteDocument(url=url, data=data, status_code=response.status_code, fetched_at=fetched_at)

    def _cache_file(self, key: str) -> Optional[Path]:
        if self.cache_path is None:
            return None
        return self.cache_path / f"{key}.json"

    def _read_cache_file(self, key: str) -> Optional[RemoteDocument]:
        path = self._cache_file(key)
        if path is None or not path.is_file():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            document = RemoteDocument(**payload)
        except (OSError, ValueError, TypeError) as exc:
            logger.debug(f"RemoteDocumentFetcher: ignoring cache entry {path}: {exc}")
            return None
        if time.time() - document.fetched_at >= self.ttl_seconds:
            return None
        return document

    def _write_cache_file(self, key: str, document: RemoteDocument) -> None:
        path = self._cache_file(key)
        if path is None:
            return
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(asdict(document)), encoding="utf-8")
        except (OSError, TypeError) as exc:
            logger.warning(f"RemoteDocumentFetcher: could not write cache entry {path}: {exc}")
