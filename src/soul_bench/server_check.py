#!/usr/bin/env python3
"""
Target server preflight check.
"""

import httpx

from .errors import ServerUnavailable


def check_server(url: str, timeout_s: float = 5.0, client: httpx.Client | None = None) -> int:
    """
    Confirm the target dev server answers before launching a browser.

    Returns the HTTP status code. Any response, even an error status, counts as the
    server being up; connection failures and timeouts raise ServerUnavailable.
    """
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout_s, follow_redirects=True)
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        raise ServerUnavailable(f"development server not reachable at {url}: {e}") from e
    finally:
        if owns_client:
            client.close()
    return response.status_code
