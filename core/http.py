"""Thin async HTTP helper shared by datasources and platforms."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import get_global_config

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    status_code: int
    body: Any
    headers: dict[str, str]


class Http:
    """HTTP client wrapper used by datasources.

    A new ``httpx.AsyncClient`` is opened per request. Tests can pass an
    ``httpx.MockTransport`` through ``transport``.
    """

    def __init__(
        self,
        host_type: str,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.host_type = host_type
        self.timeout = timeout if timeout is not None else get_global_config().http_timeout
        self.headers = headers or {}
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": "depbump", **self.headers},
            transport=self.transport,
            follow_redirects=True,
        )

    async def get_json(self, url: str, **kwargs) -> HttpResponse:
        """GET ``url`` and decode the JSON body.

        Raises:
            httpx.HTTPError: On transport failures and non-2xx responses
            ValueError: When the body is not valid JSON
        """
        logger.debug("%s GET %s", self.host_type, url)
        async with self._client() as client:
            response = await client.get(url, **kwargs)
            response.raise_for_status()
            return HttpResponse(
                status_code=response.status_code,
                body=response.json(),
                headers=dict(response.headers),
            )


def ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def join_url_parts(*parts: str) -> str:
    """Join URL segments with exactly one slash between them."""
    cleaned = []
    for index, part in enumerate(parts):
        if not part:
            continue
        if index > 0:
            part = part.lstrip("/")
        if index < len(parts) - 1:
            part = part.rstrip("/")
        cleaned.append(part)
    return "/".join(cleaned)
