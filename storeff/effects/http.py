"""HTTP effect producer backed by :class:`httpx.AsyncClient`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from storeff.effect import Effect, Run

DEFAULT_TIMEOUT = 30.0

REQUEST_OPTIONS = frozenset(
    {"url", "method", "headers", "params", "json", "content", "data", "cookies", "timeout"}
)


def http_request(
    options: Mapping[str, Any],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Run:
    """Build a ``run(store)`` callable performing one HTTP request.

    The callable resolves with the response body as text and rejects with
    :class:`httpx.HTTPStatusError` for non-2xx responses.

    Args:
        options: ``url`` plus optional ``method`` (default ``GET``), ``headers``,
            ``params``, ``json``, ``content``, ``data``, ``cookies``, ``timeout``.
        transport: Custom httpx transport, e.g. :class:`httpx.MockTransport`.
    """
    unknown = set(options) - REQUEST_OPTIONS
    if unknown:
        raise TypeError(f"Unknown http options: {sorted(unknown)}")
    if "url" not in options:
        raise ValueError("http options require a 'url'")

    request_options = dict(options)
    url = request_options.pop("url")
    method = str(request_options.pop("method", "GET")).upper()
    timeout = request_options.pop("timeout", DEFAULT_TIMEOUT)

    async def _request(store: Any) -> str:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.request(method, url, **request_options)
            response.raise_for_status()
            return response.text

    return _request


def http(
    options: Mapping[str, Any],
    success_label: str | None = None,
    failure_label: str | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Effect:
    """An Effect fetching ``options["url"]``, routed to the given labels.

    Example:
        >>> def refresh(state, _):
        ...     return {"effect": http({"url": "https://example.com"}, "loaded", "failed")}
    """
    return Effect(
        http_request(options, transport=transport),
        success_label=success_label,
        failure_label=failure_label,
    )


__all__ = ["DEFAULT_TIMEOUT", "REQUEST_OPTIONS", "http", "http_request"]
