"""Manager detection for dependency manifests."""

import re
from pathlib import PurePath


def identify(content: str, filename: str | None = None) -> str:
    """Detect the manifest manager from content and filename hints.

    Args:
        content: The manifest file content
        filename: Optional filename for additional context

    Returns:
        Detected manager: 'pip_requirements', 'conan', 'kubernetes' or 'unknown'
    """
    # Filename-based detection (takes precedence)
    if filename:
        name = PurePath(filename).name
        if re.fullmatch(r"requirements([-_.\w]*)\.(txt|in)", name):
            return "pip_requirements"
        if name == "conanfile.txt":
            return "conan"

    # Content-based detection
    if re.search(r"^\s*apiVersion\s*:", content, re.MULTILINE) and re.search(
        r"^\s*kind\s*:", content, re.MULTILINE
    ):
        return "kubernetes"

    if re.search(r"^\[(build_|tool_)?requires\]\s*$", content, re.MULTILINE):
        return "conan"

    python_patterns = [
        r"^[a-zA-Z0-9\-_]+\s*[><=!~]+\s*[\d\w\.\-]+",  # package>=1.0.0
        r"^[a-zA-Z0-9\-_]+\[.*?\]\s*[><=!~]+",  # package[extras]>=1.0.0
        r";\s*(?:sys_platform|python_version)",  # environment markers
    ]

    for pattern in python_patterns:
        if re.search(pattern, content, re.MULTILINE):
            return "pip_requirements"

    return "unknown"
