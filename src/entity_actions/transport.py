"""HTTP transport for action requests.

HttpxTransport implements protocols.Transport on top of httpx.AsyncClient.
Payloads are sent as a JSON body, except for GET/HEAD where they become
query parameters. Any non-2xx status or network failure raises
ActionRequestError, which rejects the pending future returned by
OptimisticInvoker.perform() and so triggers the optimistic rollback.

No retries: a failed action is reported to the caller as-is.
"""

from __future__ import annotations

__all__ = [
    "USER_AGENT",
    "HttpxTransport",
    "create_action_client",
]

import json
from collections.abc import Mapping
from types import TracebackType
from typing import TYPE_CHECKING, Any

import httpx

from entity_actions import __version__
from entity_actions.constants import APP_NAME, DEFAULT_HTTP_TIMEOUT_SECONDS, QUERY_STRING_METHODS
from entity_actions.exceptions import ActionRequestError

if TYPE_CHECKING:
    from entity_actions.config import AdapterConfig

# User-Agent header for action requests (informational)
USER_AGENT = f"{APP_NAME}/{__version__}"


def create_action_client(
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    headers: Mapping[str, str] | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an httpx client with the entity-actions User-Agent.

    Args:
        timeout: Request timeout in seconds.
        headers: Extra headers for every request (e.g., Authorization).
        **kwargs: Passed through to httpx.AsyncClient (e.g., transport, base_url).

    Returns:
        Configured httpx.AsyncClient.
    """
    merged_headers = {"User-Agent": USER_AGENT}
    if headers:
        merged_headers.update(headers)
    return httpx.AsyncClient(headers=merged_headers, timeout=timeout, **kwargs)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error text from a failed response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        for key in ("detail", "message", "error", "errors"):
            if body.get(key):
                value = body[key]
                return value if isinstance(value, str) else json.dumps(value)
    return json.dumps(body)


class HttpxTransport:
    """Transport sending action requests through an httpx.AsyncClient.

    Usage:
        async with HttpxTransport() as transport:
            invoker = OptimisticInvoker(actions, transport, naming=CamelCaseKeys())
            await invoker.perform(post, "like")

    A client passed in is left open; a client created here is closed by aclose().
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or create_action_client(timeout=timeout, headers=headers)

    @classmethod
    def from_config(cls, config: "AdapterConfig", headers: Mapping[str, str] | None = None) -> "HttpxTransport":
        return cls(timeout=config.timeout_seconds, headers=headers)

    async def ajax(self, url: str, method: str, options: Mapping[str, Any]) -> Any:
        """Send one action request.

        Args:
            url: Absolute or host-relative endpoint.
            method: HTTP method.
            options: {"data": payload}; payload becomes the JSON body or query string.

        Returns:
            Parsed JSON body, {} for empty responses, or the raw text for non-JSON bodies.

        Raises:
            ActionRequestError: On non-2xx status or transport failure.
        """
        data = options.get("data") or {}
        if method.upper() in QUERY_STRING_METHODS:
            request_kwargs: dict[str, Any] = {"params": data}
        else:
            request_kwargs = {"json": data}

        try:
            response = await self._client.request(method, url, **request_kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ActionRequestError(
                _error_detail(e.response),
                url=url,
                method=method,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ActionRequestError(str(e) or type(e).__name__, url=url, method=method) from e

        # Handle 204 No Content and empty bodies
        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            return response.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
