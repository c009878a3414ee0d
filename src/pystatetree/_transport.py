"""Minimal HTTP fetch of JSON documents for the ingest script."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from pystatetree._json import loads
from pystatetree.exceptions import StateTreeTransportError

_logger = logging.getLogger(__name__)


async def fetch_json(
    http_session: aiohttp.ClientSession,
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """GET *url* and return the decoded JSON body (big integers kept as strings)."""
    _logger.debug("GET %s", url)

    try:
        async with http_session.get(url, headers=dict(headers or {})) as resp:
            text = await resp.text()
            if resp.status != 200:
                raise StateTreeTransportError(
                    f"HTTP {resp.status} from {url}: {text[:200]}",
                    status_code=resp.status,
                    url=url,
                )
    except StateTreeTransportError:
        raise
    except aiohttp.ClientError as exc:
        raise StateTreeTransportError(f"Request to {url} failed: {exc}", url=url) from exc

    try:
        return loads(text)
    except ValueError as exc:
        raise StateTreeTransportError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
