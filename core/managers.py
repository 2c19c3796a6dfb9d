"""Manifest managers: which parser handles which file."""

from collections.abc import Callable

from .errors import DepbumpError
from .models import Manifest
from .parse_conan import parse_conanfile
from .parse_kubernetes import extract_package_file as extract_kubernetes
from .parse_python import parse_requirements

SUPPORTED_DATASOURCES: dict[str, list[str]] = {
    "pip_requirements": ["pypi"],
    "conan": ["conan"],
    "kubernetes": ["docker"],
}

_extractors: dict[str, Callable[[str], Manifest | None]] = {
    "pip_requirements": parse_requirements,
    "conan": parse_conanfile,
    "kubernetes": extract_kubernetes,
}


def get_manager_list() -> list[str]:
    return list(_extractors)


def extract_package_file(manager: str, content: str) -> Manifest:
    """Run the manager's extractor over ``content``.

    Raises:
        DepbumpError: If ``manager`` is not supported
    """
    extractor = _extractors.get(manager)
    if extractor is None:
        raise DepbumpError(f"Unsupported manager: {manager}")
    manifest = extractor(content)
    if manifest is None:
        return Manifest(manager=manager, raw=content, entries=[])
    return manifest
