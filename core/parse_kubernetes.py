"""Kubernetes manifest image extraction."""

import logging
import re

from .models import Manifest, ManifestEntry

logger = logging.getLogger(__name__)

IMAGE_LINE_REGEX = re.compile(r"^\s*-?\s*image:\s*['\"]?(?P<image>[^\s'\"]+)['\"]?\s*(?:#.*)?$")


def split_image(image: str) -> tuple[str, str | None, str | None]:
    """Split ``registry/name:tag@digest`` into name, tag and digest."""
    digest = None
    if "@" in image:
        image, digest = image.split("@", 1)
    tag = None
    last_segment = image.rsplit("/", 1)[-1]
    if ":" in last_segment:
        image, tag = image.rsplit(":", 1)
    return image, tag, digest


def extract_package_file(content: str) -> Manifest | None:
    """Extract container images from a Kubernetes manifest.

    Returns:
        Manifest with one docker entry per ``image:`` line, or None when the
        content is not a Kubernetes resource
    """
    if not (
        re.search(r"^\s*apiVersion\s*:", content, re.MULTILINE)
        and re.search(r"^\s*kind\s*:", content, re.MULTILINE)
    ):
        logger.debug("Not a Kubernetes manifest")
        return None

    entries: list[ManifestEntry] = []
    for line_number, line in enumerate(content.splitlines()):
        match = IMAGE_LINE_REGEX.match(line)
        if not match:
            continue
        image = match.group("image")
        name, tag, digest = split_image(image)
        logger.debug("Kubernetes image %s", image)
        entries.append(
            ManifestEntry(
                name=name,
                spec=tag,
                source_type="image",
                datasource="docker",
                current_value=tag,
                line_number=line_number,
                skip_reason=None if tag or digest else "no-version",
            )
        )

    return Manifest(manager="kubernetes", raw=content, entries=entries)
