"""HTTP engine support — Base class for engines that talk to an HTTP API.

Keeps one ``httpx.AsyncClient`` per engine class and event loop so persistent
connections are reused across searches (and across engine instances of that
class).

Usage::

    class MyApiEngine(HttpSearchEngine):
        required_configuration = ("api_key",)

        async def search_implementation(self, request: SearchRequest) -> ResultSet:
            data = await self.get_json(
                "https://api.example.org/search",
                params={"q": request.query, "offset": request.start, "limit": request.per_page},
            )
            return ResultSet(total_items=data["total"], items=[...])

Error handling follows the executor's containment rules: timeouts, bad
status codes and unparseable bodies propagate as their httpx/json/xml
exceptions and become failed results; other transport errors are wrapped in
``UpstreamError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar
from xml.etree import ElementTree

import httpx

from bentosearch import __version__
from bentosearch.engines.base.engine import SearchEngine
from bentosearch.engines.base.exceptions import UpstreamError

logger = logging.getLogger(__name__)

_USER_AGENT = f"bentosearch/{__version__}"


def _prune_closed_loops() -> None:
    for key in [key for key in HttpSearchEngine._clients if key[1].is_closed()]:
        del HttpSearchEngine._clients[key]


class HttpSearchEngine(SearchEngine):
    """Search engine base with a shared, class-level async HTTP client.

    Class attributes:
        timeout: Request timeout in seconds.
        user_agent: User-Agent header sent with every request.
    """

    timeout: ClassVar[float] = 15.0
    user_agent: ClassVar[str] = _USER_AGENT

    _clients: ClassVar[dict[tuple[type[HttpSearchEngine], asyncio.AbstractEventLoop], httpx.AsyncClient]] = {}

    @classmethod
    def build_http_client(cls) -> httpx.AsyncClient:
        """Create the shared client. Override to add auth, proxies or a transport."""
        return httpx.AsyncClient(
            headers={"User-Agent": cls.user_agent},
            timeout=cls.timeout,
            follow_redirects=True,
        )

    @classmethod
    def http_client(cls) -> httpx.AsyncClient:
        """The shared client for this engine class on the running event loop.

        Pooled connections are bound to the loop that opened them, so each
        loop gets its own client. Clients of loops that have since closed
        are dropped.
        """
        loop = asyncio.get_running_loop()
        _prune_closed_loops()
        client = HttpSearchEngine._clients.get((cls, loop))
        if client is None or client.is_closed:
            client = cls.build_http_client()
            HttpSearchEngine._clients[(cls, loop)] = client
        return client

    @classmethod
    async def shutdown(cls) -> None:
        """Close the shared client of this engine class on the running loop."""
        _prune_closed_loops()
        client = HttpSearchEngine._clients.pop((cls, asyncio.get_running_loop()), None)
        if client is not None:
            await client.aclose()
            logger.debug("Closed HTTP client for %s", cls.__name__)

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET *url* and return the response.

        Raises:
            httpx.TimeoutException: On timeout.
            httpx.HTTPStatusError: On a 4xx/5xx response.
            UpstreamError: On any other transport failure.
        """
        try:
            response = await self.http_client().get(url, params=params, headers=headers)
        except httpx.TimeoutException:
            raise
        except httpx.RequestError as e:
            raise UpstreamError(f"Request to {self.engine_id} failed: {e}") from e
        response.raise_for_status()
        return response

    async def get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET *url* and decode the JSON body.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        response = await self.get(url, params=params, headers={"Accept": "application/json", **(headers or {})})
        return response.json()

    async def get_xml(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ElementTree.Element:
        """GET *url* and parse the XML body.

        Raises:
            xml.etree.ElementTree.ParseError: If the body is not well-formed XML.
        """
        response = await self.get(url, params=params, headers={"Accept": "application/xml", **(headers or {})})
        return ElementTree.fromstring(response.content)
