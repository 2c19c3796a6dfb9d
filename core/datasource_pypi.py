"""PyPI JSON API datasource."""

import logging

from .cache import cache
from .datasource import Datasource, register
from .http import ensure_trailing_slash, join_url_parts
from .models import GetReleasesConfig, Release, ReleaseResult

logger = logging.getLogger(__name__)

DATASOURCE_ID = "pypi"
DEFAULT_REGISTRY_URL = "https://pypi.org/"


@register
class PypiDatasource(Datasource):
    id = DATASOURCE_ID
    default_registry_urls = [DEFAULT_REGISTRY_URL]
    caching = True
    registry_strategy = "hunt"

    async def _fetch_package_metadata(self, package_name: str, registry_url: str) -> dict | None:
        """Fetch package metadata from a PyPI-compatible registry.

        Returns:
            Package metadata dict or None if not found
        """
        url = join_url_parts(ensure_trailing_slash(registry_url), f"pypi/{package_name}/json")
        try:
            response = await self.http.get_json(url)
        except Exception as err:
            return self.handle_generic_errors(err)
        return response.body

    @cache(
        namespace=f"datasource-{DATASOURCE_ID}",
        key=lambda config: f"{config.registry_url}:{config.lookup_name}",
    )
    async def get_releases(self, config: GetReleasesConfig) -> ReleaseResult | None:
        metadata = await self._fetch_package_metadata(
            config.lookup_name, config.registry_url or DEFAULT_REGISTRY_URL
        )
        if not metadata:
            return None

        result = ReleaseResult()
        for version_str, release_files in (metadata.get("releases") or {}).items():
            requires_python = None
            for file_info in release_files or []:
                if file_info.get("requires_python"):
                    requires_python = file_info["requires_python"]
                    break
            result.releases.append(Release(version=version_str, requires_python=requires_python))

        return result if result.releases else None
