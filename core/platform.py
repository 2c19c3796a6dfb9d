"""Git hosting platform abstraction."""

import logging
from abc import ABC, abstractmethod
from urllib.parse import quote

import httpx

from .errors import PlatformError
from .http import Http, join_url_parts
from .models import BranchStatus, Pr

logger = logging.getLogger(__name__)

# Check run conclusions GitHub treats as passing
PASSING_CONCLUSIONS = ("success", "neutral", "skipped")


class Platform(ABC):
    """Queries the automerge worker needs from a hosting platform."""

    @abstractmethod
    async def get_branch_pr(self, branch_name: str) -> Pr | None:
        """Return the open PR whose head is ``branch_name``, if any."""

    @abstractmethod
    async def get_branch_status(self, branch_name: str) -> BranchStatus:
        """Return the combined CI status of ``branch_name``."""


class GitHubPlatform(Platform):
    """GitHub REST API implementation."""

    def __init__(
        self,
        repository: str,
        token: str = "",
        endpoint: str = "https://api.github.com",
        http: Http | None = None,
    ):
        if "/" not in repository:
            raise PlatformError(f"Repository must be OWNER/NAME, got {repository!r}")
        self.repository = repository
        self.owner = repository.split("/")[0]
        self.endpoint = endpoint
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.http = http or Http("github", headers=headers)

    async def _get(self, path: str, **params):
        url = join_url_parts(self.endpoint, f"repos/{self.repository}", path)
        try:
            response = await self.http.get_json(url, params=params or None)
        except httpx.HTTPStatusError as e:
            raise PlatformError(
                f"GitHub API error {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise PlatformError(f"Network error talking to GitHub: {e}") from e
        return response.body

    async def get_branch_pr(self, branch_name: str) -> Pr | None:
        pulls = await self._get("pulls", head=f"{self.owner}:{branch_name}", state="open")
        if not pulls:
            return None
        pull = pulls[0]
        logger.debug("Found PR #%s for branch %s", pull["number"], branch_name)
        return Pr(
            number=pull["number"],
            branch_name=branch_name,
            title=pull.get("title", ""),
            state=pull.get("state", "open"),
            url=pull.get("html_url"),
        )

    async def get_branch_status(self, branch_name: str) -> BranchStatus:
        """Combine commit statuses and check runs into one status.

        A branch with neither reports yellow, as does any pending check.
        """
        ref = quote(branch_name, safe="")
        status = await self._get(f"commits/{ref}/status")
        check_runs = await self._get(f"commits/{ref}/check-runs")

        results = []
        if status.get("statuses"):
            results.append(_commit_status(status.get("state")))
        for run in check_runs.get("check_runs") or []:
            results.append(_check_run_status(run))

        if not results:
            logger.debug("No status checks found for branch %s", branch_name)
            return BranchStatus.YELLOW
        if BranchStatus.RED in results:
            return BranchStatus.RED
        if BranchStatus.YELLOW in results:
            return BranchStatus.YELLOW
        return BranchStatus.GREEN


def _commit_status(state: str | None) -> BranchStatus:
    if state == "success":
        return BranchStatus.GREEN
    if state in ("failure", "error"):
        return BranchStatus.RED
    return BranchStatus.YELLOW


def _check_run_status(run: dict) -> BranchStatus:
    if run.get("status") != "completed":
        return BranchStatus.YELLOW
    if run.get("conclusion") in PASSING_CONCLUSIONS:
        return BranchStatus.GREEN
    return BranchStatus.RED
