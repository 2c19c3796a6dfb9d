"""Tests for the datasource registry and multi-registry lookup."""

from unittest.mock import AsyncMock

import httpx
import pytest

from core.datasource import Datasource, get_datasource, get_datasource_ids, get_pkg_releases
from core.datasource_conan import ConanDatasource
from core.datasource_pypi import PypiDatasource
from core.errors import UnknownDatasourceError
from core.models import Release, ReleaseResult


def releases(*versions):
    return ReleaseResult(releases=[Release(version=v) for v in versions])


class FakeDatasource(Datasource):
    id = "fake"
    default_registry_urls = ["https://one.example.com/", "https://two.example.com/"]

    def __init__(self, strategy, results):
        super().__init__()
        self.registry_strategy = strategy
        self.get_releases = AsyncMock(side_effect=[results[url] for url in results])


class TestRegistry:
    def test_builtin_datasources_registered(self):
        assert "conan" in get_datasource_ids()
        assert "pypi" in get_datasource_ids()

    def test_get_datasource_returns_instance(self):
        assert isinstance(get_datasource("conan"), ConanDatasource)
        assert isinstance(get_datasource("pypi"), PypiDatasource)

    def test_unknown_datasource_raises(self):
        with pytest.raises(UnknownDatasourceError) as exc_info:
            get_datasource("docker")
        assert "docker" in str(exc_info.value)


class TestGetPkgReleases:
    @pytest.mark.asyncio
    async def test_merge_strategy_concatenates_without_duplicates(self):
        datasource = FakeDatasource("merge", {
            "https://one.example.com/": releases("1.0.0", "1.1.0"),
            "https://two.example.com/": releases("1.1.0", "2.0.0"),
        })

        result = await get_pkg_releases("fake", "pkg", datasource=datasource)

        assert [r.version for r in result.releases] == ["1.0.0", "1.1.0", "2.0.0"]
        assert datasource.get_releases.await_count == 2

    @pytest.mark.asyncio
    async def test_merge_strategy_skips_empty_registries(self):
        datasource = FakeDatasource("merge", {
            "https://one.example.com/": None,
            "https://two.example.com/": releases("2.0.0"),
        })

        result = await get_pkg_releases("fake", "pkg", datasource=datasource)

        assert [r.version for r in result.releases] == ["2.0.0"]

    @pytest.mark.asyncio
    async def test_hunt_strategy_stops_at_first_hit(self):
        datasource = FakeDatasource("hunt", {
            "https://one.example.com/": None,
            "https://two.example.com/": releases("2.0.0"),
        })

        result = await get_pkg_releases("fake", "pkg", datasource=datasource)

        assert [r.version for r in result.releases] == ["2.0.0"]
        assert datasource.get_releases.await_count == 2

    @pytest.mark.asyncio
    async def test_first_strategy_only_queries_first_registry(self):
        datasource = FakeDatasource("first", {
            "https://one.example.com/": None,
            "https://two.example.com/": releases("2.0.0"),
        })

        result = await get_pkg_releases("fake", "pkg", datasource=datasource)

        assert result is None
        assert datasource.get_releases.await_count == 1

    @pytest.mark.asyncio
    async def test_explicit_registry_urls_override_defaults(self):
        datasource = FakeDatasource("hunt", {"https://custom.example.com/": releases("3.0.0")})

        result = await get_pkg_releases(
            "fake", "pkg", ["https://custom.example.com/"], datasource=datasource
        )

        config = datasource.get_releases.await_args.args[0]
        assert config.registry_url == "https://custom.example.com/"
        assert config.lookup_name == "pkg"
        assert [r.version for r in result.releases] == ["3.0.0"]

    @pytest.mark.asyncio
    async def test_unknown_datasource_id_raises(self):
        with pytest.raises(UnknownDatasourceError):
            await get_pkg_releases("nope", "pkg")


class TestHandleGenericErrors:
    def _status_error(self, status_code):
        request = httpx.Request("GET", "https://registry.example.com/pkg")
        response = httpx.Response(status_code, request=request)
        return httpx.HTTPStatusError("error", request=request, response=response)

    @pytest.mark.parametrize("status_code", [404, 429, 500, 403])
    def test_status_errors_become_none(self, status_code):
        assert ConanDatasource().handle_generic_errors(self._status_error(status_code)) is None

    def test_transport_errors_become_none(self):
        err = httpx.ConnectError("refused")
        assert ConanDatasource().handle_generic_errors(err) is None

    def test_server_errors_are_logged_as_warnings(self, caplog):
        ConanDatasource().handle_generic_errors(self._status_error(503))
        assert any(record.levelname == "WARNING" for record in caplog.records)
