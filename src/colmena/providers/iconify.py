"""Iconify provider: icons fetched from the Iconify HTTP API.

One provider serves one icon-set prefix (``tabler``, ``mdi``, ...). Icons
are requested as ``GET {host}/{prefix}.json?icons=a,b`` and turned into
Icons with :meth:`Icon.from_iconify_data`.

Host fallback:
    Hosts are tried in order. A transport error or a non-200 status moves
    on to the next host; only when every host has failed does the lookup
    resolve to not-found. Transport problems never raise out of ``get``.

Connections:
    Without an injected session, every lookup opens a requests.Session
    and closes it when the lookup ends; no connection outlives a call.

Caching:
    Resolved icons are written through the configured IconCache, so a
    warm cache answers without any network access.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any
from urllib.parse import quote

import requests

from colmena.cache import IconCache, NullCache
from colmena.errors import InvalidSourceDataError, ProviderError
from colmena.icon import Icon
from colmena.utils.hashing import cache_key
from colmena.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_API_HOSTS = (
    "https://api.iconify.design",
    "https://api.simplesvg.com",
    "https://api.unisvg.com",
)

USER_AGENT = "colmena (+https://iconify.design)"


class IconifyProvider:
    """Provider for one Iconify icon set over HTTP.

    Args:
        prefix: Icon-set prefix on the API (e.g. ``"tabler"``)
        cache: Cache for resolved icons (defaults to NullCache)
        timeout: Per-request timeout in seconds
        cache_ttl: TTL for cached icons in seconds (0 = never expire)
        api_hosts: Hosts to try in order (defaults to DEFAULT_API_HOSTS)
        session: requests.Session to reuse; the caller owns it. When omitted,
            each request opens a session and closes it before returning.
    """

    __slots__ = ("_api_hosts", "_cache", "_cache_ttl", "_prefix", "_session", "_timeout")

    def __init__(
        self,
        prefix: str,
        *,
        cache: IconCache | None = None,
        timeout: float = 10,
        cache_ttl: int = 0,
        api_hosts: Sequence[str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._prefix = prefix
        self._cache: IconCache = cache if cache is not None else NullCache()
        self._timeout = timeout
        self._cache_ttl = cache_ttl
        self._api_hosts = tuple(h.rstrip("/") for h in api_hosts) if api_hosts else DEFAULT_API_HOSTS
        self._session = session

    @property
    def prefix(self) -> str:
        """Icon-set prefix served by this provider."""
        return self._prefix

    @property
    def api_hosts(self) -> tuple[str, ...]:
        """Hosts in the order they are tried."""
        return self._api_hosts

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def cache(self) -> IconCache:
        return self._cache

    def get(self, name: str) -> Icon | None:
        """Return the icon from cache, or fetch it from the API.

        Raises:
            ProviderError: If the API returned a record that is not a valid
                icon (e.g. without ``body``)
        """
        key = self._cache_key(name)
        cached = self._cache.get(key)
        if isinstance(cached, Icon):
            logger.debug("Cache hit for %s:%s", self._prefix, name)
            return cached

        records = self._fetch([name])
        record = records.get(name)
        if record is None:
            return None

        try:
            icon = Icon.from_iconify_data(record)
        except InvalidSourceDataError as e:
            msg = f"Failed to create icon from Iconify data for '{self._prefix}:{name}': {e}"
            raise ProviderError(msg) from e

        self._cache.set(key, icon, self._cache_ttl)
        return icon

    def has(self, name: str) -> bool:
        """Check the cache, else perform a full ``get`` (network access)."""
        if self._cache.has(self._cache_key(name)):
            return True
        return self.get(name) is not None

    def all(self) -> list[str]:
        """Always empty: the API offers no listing endpoint."""
        return []

    def fetch_many(self, names: Iterable[str]) -> dict[str, Icon]:
        """Resolve several icons with at most one HTTP request.

        Cached icons are served from the cache; the rest are fetched
        together. Names the API does not know, and records that are not
        valid icons, are absent from the result.

        Returns:
            Mapping of name to Icon for every name that resolved
        """
        icons: dict[str, Icon] = {}
        missing: list[str] = []
        for name in dict.fromkeys(names):
            cached = self._cache.get(self._cache_key(name))
            if isinstance(cached, Icon):
                icons[name] = cached
            else:
                missing.append(name)

        if not missing:
            return icons

        for name, record in self._fetch(missing).items():
            try:
                icon = Icon.from_iconify_data(record)
            except InvalidSourceDataError:
                logger.debug("Skipping invalid record %s:%s", self._prefix, name)
                continue
            icons[name] = icon
            self._cache.set(self._cache_key(name), icon, self._cache_ttl)

        return icons

    def _fetch(self, names: Sequence[str]) -> dict[str, dict[str, Any]]:
        """Fetch icon records, with set-level dimensions filled in."""
        data = self._request({"icons": ",".join(names)})
        if data is None:
            return {}

        icons = data.get("icons")
        if not isinstance(icons, dict):
            return {}

        records: dict[str, dict[str, Any]] = {}
        for name, record in icons.items():
            if not isinstance(record, dict):
                continue
            record = dict(record)
            for dimension in ("width", "height"):
                if dimension in data:
                    record.setdefault(dimension, data[dimension])
            records[name] = record
        return records

    def _request(self, params: dict[str, str]) -> dict[str, Any] | None:
        """GET the set endpoint from the first host that answers 200."""
        if self._session is not None:
            return self._request_hosts(self._session, params)
        with requests.Session() as session:
            return self._request_hosts(session, params)

    def _request_hosts(
        self, session: requests.Session, params: dict[str, str]
    ) -> dict[str, Any] | None:
        path = f"/{quote(self._prefix, safe='')}.json"
        for host in self._api_hosts:
            url = f"{host}{path}"
            try:
                response = session.get(
                    url,
                    params=params,
                    headers={"User-Agent": USER_AGENT},
                    timeout=self._timeout,
                )
            except requests.exceptions.RequestException as e:
                logger.debug("Request to %s failed: %s", url, e)
                continue

            if response.status_code != 200:
                logger.debug("Request to %s returned HTTP %s", url, response.status_code)
                continue

            try:
                data = response.json()
            except ValueError:
                logger.debug("Invalid JSON from %s", url)
                return None
            return data if isinstance(data, dict) else None

        logger.warning("All Iconify hosts failed for prefix %r", self._prefix)
        return None

    def _cache_key(self, name: str) -> str:
        return cache_key("iconify", self._prefix, name)
