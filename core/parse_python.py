"""Python requirements.txt parsing."""

import re

from packaging.requirements import InvalidRequirement, Requirement

from .models import Manifest, ManifestEntry

REQUIREMENT_LINE_REGEX = re.compile(
    r"^(?P<head>\s*[A-Za-z0-9][A-Za-z0-9._\-]*\s*(?:\[[^\]]*\])?)"
    r"(?P<spec>[^;#]*?)"
    r"(?P<tail>\s*(?:[;#].*)?)$"
)


class RequirementsParser:
    """Parser for Python requirements.txt files."""

    def __init__(self):
        # Patterns for lines to skip
        self.skip_patterns = [
            r"^\s*#",  # Comment lines
            r"^\s*$",  # Empty lines
            r"^-e\s+",  # Editable installs
            r"^git\+",  # Git URLs
            r"^hg\+",  # Mercurial URLs
            r"^svn\+",  # SVN URLs
            r"^bzr\+",  # Bazaar URLs
            r"^https?://",  # Direct URLs
            r"^file://",  # File URLs
            r"^\./",  # Local paths
            r"^-r\s+",  # Include other requirements files
            r"^-f\s+",  # Find links
            r"^--",  # Other pip options
        ]

    def _should_skip_line(self, line: str) -> bool:
        """Check if a line should be skipped during parsing."""
        stripped = line.strip()
        if not stripped:
            return True

        return any(re.match(pattern, stripped) for pattern in self.skip_patterns)

    def _parse_requirement_line(self, line: str, line_number: int) -> ManifestEntry | None:
        """Parse a single requirement line using packaging library."""
        line_for_parsing = line.strip().split("#")[0].strip()
        if not line_for_parsing:
            return None

        try:
            req = Requirement(line_for_parsing)
        except InvalidRequirement:
            # Skip malformed requirements gracefully
            return None

        if req.url:
            return None

        current_value = None
        specifiers = list(req.specifier)
        if len(specifiers) == 1 and specifiers[0].operator in ("==", "==="):
            current_value = specifiers[0].version

        return ManifestEntry(
            name=req.name,
            spec=str(req.specifier) if req.specifier else None,
            markers=str(req.marker) if req.marker else None,
            extras=sorted(req.extras) if req.extras else None,
            source_type="registry",
            datasource="pypi",
            current_value=current_value,
            line_number=line_number,
        )

    def parse(self, content: str) -> Manifest:
        """Parse requirements.txt content into Manifest."""
        entries: list[ManifestEntry] = []

        for line_number, line in enumerate(content.splitlines()):
            if self._should_skip_line(line):
                continue

            entry = self._parse_requirement_line(line, line_number)
            if entry:
                entries.append(entry)

        return Manifest(manager="pip_requirements", raw=content, entries=entries)


def parse_requirements(content: str) -> Manifest:
    """Parse requirements.txt content into Manifest.

    Args:
        content: The requirements.txt file content

    Returns:
        Parsed Manifest object
    """
    parser = RequirementsParser()
    return parser.parse(content)


def pin_requirement_line(line: str, new_version: str) -> str:
    """Replace the version specifier of a requirement line with ``==new_version``.

    Extras, environment markers and trailing comments are kept.
    """
    match = REQUIREMENT_LINE_REGEX.match(line)
    if not match:
        return line
    head = match.group("head").rstrip()
    return f"{head}=={new_version}{match.group('tail')}"
