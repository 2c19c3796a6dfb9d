"""Datasource base class and multi-registry release lookup."""

import logging
from typing import ClassVar

import httpx

from .errors import UnknownDatasourceError
from .http import Http
from .models import GetReleasesConfig, ReleaseResult

logger = logging.getLogger(__name__)

_datasources: dict[str, type["Datasource"]] = {}


def register(cls: type["Datasource"]) -> type["Datasource"]:
    """Class decorator adding a datasource to the registry."""
    _datasources[cls.id] = cls
    return cls


class Datasource:
    """Base class for registry clients.

    Subclasses set ``id`` and ``default_registry_urls`` and implement
    ``get_releases``.
    """

    id: ClassVar[str] = ""
    default_registry_urls: ClassVar[list[str]] = []
    caching: ClassVar[bool] = False
    registry_strategy: ClassVar[str] = "first"  # first, hunt, merge

    def __init__(self, http: Http | None = None):
        self.http = http or Http(self.id)

    async def get_releases(self, config: GetReleasesConfig) -> ReleaseResult | None:
        raise NotImplementedError

    def handle_generic_errors(self, err: Exception) -> None:
        """Log a lookup failure; the caller treats it as "not found"."""
        if isinstance(err, httpx.HTTPStatusError):
            status = err.response.status_code
            if status == 404:
                logger.debug("%s lookup returned 404: %s", self.id, err.request.url)
            elif status == 429 or status >= 500:
                logger.warning("%s host error %s: %s", self.id, status, err.request.url)
            else:
                logger.debug("%s lookup failed with HTTP %s", self.id, status)
        elif isinstance(err, httpx.HTTPError):
            logger.warning("%s lookup network error: %s", self.id, err)
        else:
            logger.debug("%s lookup error: %r", self.id, err)
        return None


def get_datasource(datasource_id: str) -> Datasource:
    """Instantiate the datasource registered under ``datasource_id``."""
    _load_builtin_datasources()
    try:
        return _datasources[datasource_id]()
    except KeyError:
        raise UnknownDatasourceError(datasource_id) from None


def get_datasource_ids() -> list[str]:
    _load_builtin_datasources()
    return sorted(_datasources)


def _load_builtin_datasources() -> None:
    # Imported for their @register side effect
    from . import datasource_conan, datasource_pypi  # noqa: F401


async def get_pkg_releases(
    datasource_id: str,
    lookup_name: str,
    registry_urls: list[str] | None = None,
    datasource: Datasource | None = None,
) -> ReleaseResult | None:
    """Look a package up across one or more registries.

    Args:
        datasource_id: Registered datasource id, e.g. ``conan``
        lookup_name: Package identifier understood by the datasource
        registry_urls: Registries to query; datasource defaults when empty
        datasource: Pre-built datasource instance (mainly for tests)

    Returns:
        Combined release result, or None when nothing was found
    """
    datasource = datasource or get_datasource(datasource_id)
    urls = registry_urls or datasource.default_registry_urls or [None]
    strategy = datasource.registry_strategy

    if strategy == "first":
        urls = urls[:1]

    merged: ReleaseResult | None = None
    seen: set[str] = set()
    for registry_url in urls:
        result = await datasource.get_releases(
            GetReleasesConfig(lookup_name=lookup_name, registry_url=registry_url)
        )
        if not result or not result.releases:
            continue
        if strategy != "merge":
            return result

        if merged is None:
            merged = ReleaseResult()
        for release in result.releases:
            if release.version not in seen:
                seen.add(release.version)
                merged.releases.append(release)

    if merged is None:
        logger.debug("No releases found for %s in %s", lookup_name, datasource_id)
    return merged
