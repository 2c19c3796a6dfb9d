"""conanfile.txt parsing."""

import re

from .datasource_conan import DEFAULT_USER_CHANNEL
from .models import Manifest, ManifestEntry

SECTION_REGEX = re.compile(r"^\s*\[(?P<section>[a-z_]+)\]\s*$")
REFERENCE_REGEX = re.compile(
    r"^\s*(?P<name>[a-z\-_0-9]+)/(?P<version>[^@/#\s]+)(?P<userChannel>@[^\s#/]+/[^\s#]+)?"
    r"(?:#[^\s]*)?\s*(?:#.*)?$",
    re.IGNORECASE,
)
REQUIRE_SECTIONS = {"requires", "build_requires", "tool_requires"}


def parse_conanfile(content: str) -> Manifest:
    """Parse conanfile.txt content into Manifest.

    Only references under ``[requires]``, ``[build_requires]`` and
    ``[tool_requires]`` are extracted. Version ranges like ``[>1.0]`` are
    reported with a skip reason.
    """
    entries: list[ManifestEntry] = []
    section = None

    for line_number, line in enumerate(content.splitlines()):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        section_match = SECTION_REGEX.match(line)
        if section_match:
            section = section_match.group("section")
            continue
        if section not in REQUIRE_SECTIONS:
            continue

        match = REFERENCE_REGEX.match(line)
        if not match:
            continue

        name = match.group("name")
        version = match.group("version")
        user_channel = match.group("userChannel") or DEFAULT_USER_CHANNEL
        entry = ManifestEntry(
            name=name,
            spec=version,
            datasource="conan",
            lookup_name=f"{name}/{version}{user_channel}",
            current_value=version,
            line_number=line_number,
        )
        if version.startswith("["):
            entry.current_value = None
            entry.skip_reason = "version-range"
        entries.append(entry)

    return Manifest(manager="conan", raw=content, entries=entries)
