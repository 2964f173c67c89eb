"""HTTP transport for JSON GET requests."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from ativmob._constants import USER_AGENT
from ativmob.exceptions import DecodeError, HttpStatusError, TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the remote sources.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, url: str) -> Any:
        ...


class JsonTransport:
    """GET a URL and return its decoded JSON body.

    The :class:`aiohttp.ClientSession` is owned by the caller; every call
    is an independent request (no caching, no deduplication).
    """

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 15.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def get_json(self, url: str) -> Any:
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    excerpt = body[:200].decode("utf-8", errors="replace")
                    raise HttpStatusError(
                        f"HTTP {resp.status} from {url}: {excerpt}",
                        status=resp.status,
                        url=url,
                    )
        except HttpStatusError:
            raise
        except TimeoutError as exc:
            raise TransportError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"Request to {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            excerpt = body[:200].decode("utf-8", errors="replace")
            raise DecodeError(f"Invalid JSON from {url}: {excerpt}", url=url) from exc
