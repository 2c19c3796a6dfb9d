"""Conan center (v2 search API) datasource."""

import logging
import re

from .cache import cache
from .datasource import Datasource, register
from .http import ensure_trailing_slash, join_url_parts
from .models import GetReleasesConfig, Release, ReleaseResult

logger = logging.getLogger(__name__)

DATASOURCE_ID = "conan"
DEFAULT_REGISTRY_URL = "https://center.conan.io/"
DEFAULT_USER_CHANNEL = "@_/_"

CONAN_RESULT_REGEX = re.compile(
    r"(?P<name>[a-z\-_0-9]+)/(?P<version>[^@/\n]+)(?P<userChannel>@\S+/\S+)",
    re.IGNORECASE,
)


def split_lookup_name(lookup_name: str) -> tuple[str, str]:
    """Split ``name/version@user/channel`` into the package name and ``@user/channel``."""
    dep_name = lookup_name.split("/")[0]
    if "@" in lookup_name:
        user_and_channel = "@" + lookup_name.split("@")[1]
    else:
        user_and_channel = DEFAULT_USER_CHANNEL
    return dep_name, user_and_channel


@register
class ConanDatasource(Datasource):
    id = DATASOURCE_ID
    default_registry_urls = [DEFAULT_REGISTRY_URL]
    caching = True
    registry_strategy = "merge"

    async def _lookup_conan_package(
        self, package_name: str, host_url: str, user_and_channel: str
    ) -> ReleaseResult | None:
        logger.debug("Looking up conan api dependency %s on %s", package_name, host_url)

        try:
            url = ensure_trailing_slash(host_url)
            lookup_url = join_url_parts(url, "v2/conans/search")

            response = await self.http.get_json(lookup_url, params={"q": package_name})
            versions = response.body
            if versions:
                logger.debug("Got conan api result for %s", lookup_url)
                dep = ReleaseResult()

                results = versions.get("results") or []
                if isinstance(results, dict):
                    results = list(results.values())

                for result_string in results:
                    match = CONAN_RESULT_REGEX.search(result_string)
                    if not match or not match.group("version") or not match.group("userChannel"):
                        continue
                    if match.group("userChannel") == user_and_channel:
                        dep.releases.append(Release(version=match.group("version")))
                return dep
        except Exception as err:
            return self.handle_generic_errors(err)
        return None

    @cache(
        namespace=f"datasource-{DATASOURCE_ID}",
        key=lambda config: f"{config.registry_url}:{config.lookup_name}release",
    )
    async def get_releases(self, config: GetReleasesConfig) -> ReleaseResult | None:
        """Return releases of ``config.lookup_name`` on the requested user/channel.

        Args:
            config: Lookup name such as ``poco/1.9.4@_/_`` and registry URL

        Returns:
            Matching releases in registry order, or None when none matched
        """
        dep_name, user_and_channel = split_lookup_name(config.lookup_name)

        result = await self._lookup_conan_package(
            dep_name,
            config.registry_url or DEFAULT_REGISTRY_URL,
            user_and_channel,
        )

        return result if result and result.releases else None
