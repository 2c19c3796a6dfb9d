"""Tests for the GitHub platform client."""

import httpx
import pytest

from core.errors import PlatformError
from core.models import BranchStatus
from core.platform import GitHubPlatform
from core.status_checks import resolve_branch_status


CHECK_RUNS_PATH = "/repos/acme/widgets/commits/main/check-runs"


def check_run(status, conclusion):
    return {"name": "tests", "status": status, "conclusion": conclusion}


def make_platform(mock_http, routes):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status_code, payload = routes[request.url.path]
        return httpx.Response(status_code, json=payload)

    platform = GitHubPlatform("acme/widgets", token="secret", http=mock_http(handler, "github"))
    return platform, requests


class TestGitHubPlatform:
    def test_repository_must_have_owner(self):
        with pytest.raises(PlatformError):
            GitHubPlatform("widgets")

    @pytest.mark.asyncio
    async def test_get_branch_pr_found(self, mock_http):
        platform, requests = make_platform(mock_http, {
            "/repos/acme/widgets/pulls": (200, [
                {"number": 12, "title": "Update poco", "state": "open",
                 "html_url": "https://github.com/acme/widgets/pull/12"},
            ]),
        })

        pr = await platform.get_branch_pr("depbump/poco-1.x")

        assert pr.number == 12
        assert pr.branch_name == "depbump/poco-1.x"
        assert pr.url == "https://github.com/acme/widgets/pull/12"
        assert requests[0].url.params["head"] == "acme:depbump/poco-1.x"
        assert requests[0].url.params["state"] == "open"

    @pytest.mark.asyncio
    async def test_get_branch_pr_none(self, mock_http):
        platform, _ = make_platform(mock_http, {"/repos/acme/widgets/pulls": (200, [])})

        assert await platform.get_branch_pr("depbump/poco-1.x") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("state,statuses,expected", [
        ("success", [{"state": "success"}], BranchStatus.GREEN),
        ("failure", [{"state": "failure"}], BranchStatus.RED),
        ("error", [{"state": "error"}], BranchStatus.RED),
        ("pending", [{"state": "pending"}], BranchStatus.YELLOW),
        ("pending", [], BranchStatus.YELLOW),
    ])
    async def test_get_branch_status(self, mock_http, state, statuses, expected):
        platform, _ = make_platform(mock_http, {
            "/repos/acme/widgets/commits/main/status": (200, {"state": state, "statuses": statuses}),
            CHECK_RUNS_PATH: (200, {"total_count": 0, "check_runs": []}),
        })

        assert await platform.get_branch_status("main") == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("runs,expected", [
        ([check_run("completed", "success")], BranchStatus.GREEN),
        ([check_run("completed", "success"), check_run("completed", "skipped")], BranchStatus.GREEN),
        ([check_run("completed", "success"), check_run("completed", "failure")], BranchStatus.RED),
        ([check_run("completed", "cancelled")], BranchStatus.RED),
        ([check_run("completed", "success"), check_run("in_progress", None)], BranchStatus.YELLOW),
        ([check_run("queued", None)], BranchStatus.YELLOW),
    ])
    async def test_check_runs_without_statuses(self, mock_http, runs, expected):
        platform, _ = make_platform(mock_http, {
            "/repos/acme/widgets/commits/main/status": (200, {"state": "pending", "statuses": []}),
            CHECK_RUNS_PATH: (200, {"total_count": len(runs), "check_runs": runs}),
        })

        assert await platform.get_branch_status("main") == expected

    @pytest.mark.asyncio
    async def test_failing_status_beats_passing_check_runs(self, mock_http):
        platform, _ = make_platform(mock_http, {
            "/repos/acme/widgets/commits/main/status": (200, {"state": "failure", "statuses": [{}]}),
            CHECK_RUNS_PATH: (200, {"check_runs": [check_run("completed", "success")]}),
        })

        assert await platform.get_branch_status("main") == BranchStatus.RED

    @pytest.mark.asyncio
    async def test_branch_name_is_quoted_in_both_requests(self, mock_http):
        raw_paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            raw_paths.append(request.url.raw_path)
            if request.url.raw_path.endswith(b"/status"):
                return httpx.Response(200, json={"state": "success", "statuses": [{}]})
            return httpx.Response(200, json={"check_runs": []})

        platform = GitHubPlatform("acme/widgets", http=mock_http(handler, "github"))

        assert await platform.get_branch_status("depbump/poco") == BranchStatus.GREEN
        assert raw_paths == [
            b"/repos/acme/widgets/commits/depbump%2Fpoco/status",
            b"/repos/acme/widgets/commits/depbump%2Fpoco/check-runs",
        ]

    @pytest.mark.asyncio
    async def test_api_error_raises_platform_error(self, mock_http):
        platform, _ = make_platform(mock_http, {
            "/repos/acme/widgets/commits/main/status": (401, {"message": "Bad credentials"}),
        })

        with pytest.raises(PlatformError) as exc_info:
            await platform.get_branch_status("main")
        assert "401" in str(exc_info.value)


class TestResolveBranchStatus:
    @pytest.mark.asyncio
    async def test_ignore_tests_is_green(self, mock_http):
        platform, requests = make_platform(mock_http, {})

        assert await resolve_branch_status("main", True, platform) == BranchStatus.GREEN
        assert requests == []

    @pytest.mark.asyncio
    async def test_delegates_to_platform(self, mock_http):
        platform, _ = make_platform(mock_http, {
            "/repos/acme/widgets/commits/main/status": (200, {"state": "failure", "statuses": [{}]}),
            CHECK_RUNS_PATH: (200, {"check_runs": []}),
        })

        assert await resolve_branch_status("main", False, platform) == BranchStatus.RED
