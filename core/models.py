"""Core data models for depbump."""

from dataclasses import dataclass, field
from enum import Enum


class BranchStatus(str, Enum):
    """Combined CI status of a branch."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class AutomergeResult(str, Enum):
    """Outcome of a branch automerge attempt."""

    AUTOMERGED = "automerged"
    PR_EXISTS = "automerge aborted - PR exists"
    BRANCH_STATUS_ERROR = "branch status error"
    FAILED = "failed"
    NO_AUTOMERGE = "no automerge"
    STALE = "stale"
    NOT_READY = "not ready"


@dataclass
class Release:
    """A single published version of a package."""

    version: str
    requires_python: str | None = None


@dataclass
class ReleaseResult:
    """Releases known to a datasource for one package."""

    releases: list[Release] = field(default_factory=list)


@dataclass
class GetReleasesConfig:
    """Arguments for a datasource release lookup."""

    lookup_name: str
    registry_url: str | None = None


@dataclass
class Pr:
    """An open pull request on the hosting platform."""

    number: int
    branch_name: str
    title: str = ""
    state: str = "open"
    url: str | None = None


@dataclass
class ManifestEntry:
    """A single dependency entry in a manifest file."""

    name: str
    spec: str | None = None
    markers: str | None = None
    extras: list[str] | None = None
    source_type: str = "registry"  # registry, vcs, path, url
    datasource: str | None = None
    lookup_name: str | None = None
    current_value: str | None = None
    registry_urls: list[str] | None = None
    line_number: int | None = None
    skip_reason: str | None = None

    @property
    def package_name(self) -> str:
        return self.lookup_name or self.name


@dataclass
class Manifest:
    """A parsed dependency manifest."""

    manager: str  # pip_requirements, conan, kubernetes
    raw: str
    entries: list[ManifestEntry]


@dataclass
class UpdateCandidate:
    """A proposed version bump for one manifest entry."""

    entry: ManifestEntry
    new_version: str | None
    reason: str
    update_type: str = "unknown"  # major, minor, patch, unknown
    skip_reason: str | None = None

    @property
    def has_change(self) -> bool:
        return bool(self.new_version) and self.new_version != self.entry.current_value


@dataclass
class UpdateReport:
    """Report of changes made to a manifest."""

    filename: str
    manager: str
    updated_content: str
    diff: str
    changes: list[UpdateCandidate]
    notes: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return any(candidate.has_change for candidate in self.changes)
