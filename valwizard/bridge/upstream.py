"""Upstream bridge — single-shot HTTP fetches from upstream nodes.

Every fetch is one GET with the configured timeout and no retry. Transport
failures surface as ``UpstreamConnectionError`` and bad responses as
``UpstreamResponseError``; disk errors while persisting the body are left as
``OSError`` so the three causes stay distinguishable.

Tests pass an ``httpx.Client`` built on ``httpx.MockTransport``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx

from valwizard.config import WizardSettings
from valwizard.core.errors import UpstreamConnectionError, UpstreamResponseError
from valwizard.core.hasher import atomic_write_bytes

logger = logging.getLogger(__name__)

TEMPLATE_FILE_NAME = "template.json"
TEMPLATE_REMOTE_NAME = "account.json"


def with_port(url: str, port: int) -> str:
    """Return *url* with its port replaced."""
    return str(httpx.URL(url).copy_with(port=port))


def template_url_for(template_url: str, web_port: int) -> str:
    """The account template lives at ``/account.json`` on the web port."""
    return str(httpx.URL(with_port(template_url, web_port)).join(TEMPLATE_REMOTE_NAME))


def fetch_bytes(
    url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = 30.0,
) -> bytes:
    """GET *url* and return the body.

    Raises
    ------
    UpstreamConnectionError
        The node could not be reached (DNS, refused, timeout, ...).
    UpstreamResponseError
        The node answered with a non-2xx status, or its response could not
        be followed or decoded.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.TransportError as exc:
        raise UpstreamConnectionError(
            f"cannot connect to upstream node at {url}: {exc}"
        ) from exc
    except httpx.HTTPStatusError as exc:
        raise UpstreamResponseError(
            f"upstream node returned HTTP {exc.response.status_code} for {url}"
        ) from exc
    except httpx.RequestError as exc:
        # Redirect loops, undecodable bodies and similar protocol failures.
        raise UpstreamResponseError(
            f"bad response from upstream node at {url}: {exc}"
        ) from exc
    finally:
        if owns_client:
            http.close()

    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content


def fetch_template(
    template_url: str,
    home_path: Path,
    *,
    client: httpx.Client | None = None,
    settings: WizardSettings | None = None,
) -> Path:
    """Download the account template and save it as ``<home>/template.json``."""
    settings = settings or WizardSettings()
    url = template_url_for(template_url, settings.web_port)
    content = fetch_bytes(url, client=client, timeout=settings.http_timeout_seconds)

    try:
        json.loads(content)
    except ValueError as exc:
        raise UpstreamResponseError(f"template at {url} is not a JSON document") from exc

    path = atomic_write_bytes(Path(home_path) / TEMPLATE_FILE_NAME, content)
    logger.info("Template from %s saved to %s", url, path)
    return path
