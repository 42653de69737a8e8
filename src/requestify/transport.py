"""
httpx transport - Default transport capability of the client.

Non-2xx responses are returned as ordinary results; only network-level
failures (connection, DNS, timeouts) raise, as httpx exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .constants import DEFAULT_TIMEOUT
from .contracts import RequestConfig

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Transport built on httpx.AsyncClient."""

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        trust_env: bool = False,
    ) -> None:
        """
        Args:
            client: Client used for every call; when omitted a short-lived
                client is opened per request
            timeout: Default timeout in seconds
            trust_env: Honor HTTP_PROXY/HTTPS_PROXY and friends
        """
        self._client = client
        self.timeout = timeout
        self.trust_env = trust_env

    def _request_kwargs(self, config: RequestConfig) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = dict(config.options)
        kwargs["headers"] = config.headers
        kwargs["timeout"] = config.timeout if config.timeout is not None else self.timeout
        if config.content is not None:
            kwargs["content"] = config.content
        if config.follow_redirects is not None:
            kwargs["follow_redirects"] = config.follow_redirects
        return kwargs

    async def execute(self, method: str, url: str, config: RequestConfig) -> httpx.Response:
        """Perform the call and return the (fully read) httpx.Response."""
        kwargs = self._request_kwargs(config)
        logger.debug("%s %s", method, url, extra={"method": method, "url": url})

        if self._client is not None:
            response = await self._client.request(method, url, **kwargs)
        else:
            async with httpx.AsyncClient(trust_env=self.trust_env) as client:
                response = await client.request(method, url, **kwargs)

        logger.debug(
            "%s %s -> %d",
            method,
            url,
            response.status_code,
            extra={"method": method, "url": url, "status": response.status_code},
        )
        return response
