"""
HTTP retrieval of the source page.

A single GET with a browser-like identity header. There are no retries:
a transport failure or any status other than 200 aborts the run.
"""

from __future__ import annotations

import logging

import httpx

from ..config import SourceConfig
from ..errors import RetrievalError
from ..logging_utils import log_event

logger = logging.getLogger(__name__)


def fetch_document(
    url: str,
    cfg: SourceConfig,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Fetch a page and return its body as text.

    Args:
        url: The URL to fetch
        cfg: Source settings (timeout, user agent, proxy handling)
        transport: Optional httpx transport, used by tests

    Returns:
        The response body text

    Raises:
        RetrievalError: On transport failure or a non-200 status
    """
    headers = {"User-Agent": cfg.user_agent}
    log_event(logger, f"Fetching HTML from {url}", event="fetch_start", url=url)

    try:
        with httpx.Client(
            timeout=cfg.timeout_seconds,
            headers=headers,
            follow_redirects=True,
            trust_env=cfg.trust_env,
            transport=transport,
        ) as client:
            resp = client.get(url)
    except httpx.HTTPError as exc:
        raise RetrievalError(
            f"Failed to fetch {url}: {type(exc).__name__}: {exc}", url=url
        ) from exc

    if resp.status_code != 200:
        raise RetrievalError(
            f"Failed to fetch {url}: status code {resp.status_code}",
            url=url,
            status_code=resp.status_code,
        )

    log_event(
        logger,
        "HTML fetched successfully",
        event="fetch_ok",
        url=url,
        status_code=resp.status_code,
        chars=len(resp.text),
    )
    return resp.text
