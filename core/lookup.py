"""Update candidate lookup for extracted dependencies."""

import asyncio
import logging

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .config import get_global_config
from .datasource import get_datasource, get_pkg_releases
from .errors import UnknownDatasourceError
from .models import ManifestEntry, Release, UpdateCandidate

logger = logging.getLogger(__name__)


class LookupWorker:
    """Finds the newest usable release for each manifest entry."""

    def __init__(
        self,
        python_version: str | None = None,
        max_concurrency: int | None = None,
    ):
        """Initialize lookup worker.

        Args:
            python_version: Target Python version for PyPI lookups (e.g., "3.11")
            max_concurrency: Maximum concurrent lookups
        """
        self.python_version = python_version
        self.max_concurrency = max_concurrency or get_global_config().max_concurrency
        self._semaphore = asyncio.Semaphore(self.max_concurrency)

    async def lookup_entry(self, entry: ManifestEntry) -> UpdateCandidate:
        """Compute the update candidate for one entry."""
        if entry.skip_reason:
            return UpdateCandidate(
                entry=entry,
                new_version=None,
                reason=f"Skipped: {entry.skip_reason}",
                skip_reason=entry.skip_reason,
            )

        try:
            datasource = get_datasource(entry.datasource or "")
        except UnknownDatasourceError:
            return UpdateCandidate(
                entry=entry,
                new_version=None,
                reason=f"Skipped: no datasource for {entry.datasource}",
                skip_reason="unsupported-datasource",
            )

        async with self._semaphore:
            result = await get_pkg_releases(
                datasource.id, entry.package_name, entry.registry_urls, datasource=datasource
            )

        if not result:
            return UpdateCandidate(entry=entry, new_version=None, reason="No releases found")

        return self._choose_release(entry, result.releases)

    async def lookup_entries(self, entries: list[ManifestEntry]) -> list[UpdateCandidate]:
        """Look up multiple entries concurrently, preserving order."""
        tasks = [self.lookup_entry(entry) for entry in entries]
        return await asyncio.gather(*tasks)

    def _choose_release(self, entry: ManifestEntry, releases: list[Release]) -> UpdateCandidate:
        current = None
        if entry.current_value:
            try:
                current = Version(entry.current_value)
            except InvalidVersion:
                return UpdateCandidate(
                    entry=entry,
                    new_version=None,
                    reason=f"Current version {entry.current_value} is not a valid version",
                )

        available: dict[Version, str] = {}
        for release in releases:
            try:
                version = Version(release.version)
            except InvalidVersion:
                continue  # Skip invalid versions
            if version.is_prerelease and not (current and current.is_prerelease):
                continue
            if not self._is_compatible_with_python(release):
                continue
            available.setdefault(version, release.version)

        if not available:
            return UpdateCandidate(entry=entry, new_version=None, reason="No compatible versions found")

        if current is not None:
            newer = [v for v in available if v > current]
            if not newer:
                return UpdateCandidate(
                    entry=entry, new_version=entry.current_value, reason="Already up to date"
                )
            chosen = max(newer)
            reason = "Newer version available"
        elif entry.spec and entry.datasource == "pypi":
            try:
                spec_set = SpecifierSet(entry.spec)
                compatible = [v for v in available if v in spec_set]
                if compatible:
                    chosen = max(compatible)
                    reason = f"Latest version satisfying constraint {entry.spec}"
                else:
                    chosen = max(available)
                    reason = f"No versions satisfy {entry.spec}, using latest available"
            except InvalidSpecifier:
                chosen = max(available)
                reason = f"Invalid constraint {entry.spec}, using latest available"
        else:
            chosen = max(available)
            reason = "Latest available version (no current version)"

        if self.python_version and entry.datasource == "pypi":
            reason += f" for Python {self.python_version}"

        return UpdateCandidate(
            entry=entry,
            new_version=available[chosen],
            reason=reason,
            update_type=calculate_update_type(current, chosen),
        )

    def _is_compatible_with_python(self, release: Release) -> bool:
        if not self.python_version or not release.requires_python:
            return True
        try:
            return Version(self.python_version) in SpecifierSet(release.requires_python)
        except (InvalidSpecifier, InvalidVersion):
            return True  # Skip invalid requires_python specs


def calculate_update_type(current: Version | None, new: Version) -> str:
    """Classify a bump as "major", "minor", "patch" or "unknown"."""
    if current is None or new <= current:
        return "unknown"
    if new.major > current.major:
        return "major"
    if new.minor > current.minor:
        return "minor"
    if new.micro > current.micro:
        return "patch"
    return "unknown"
