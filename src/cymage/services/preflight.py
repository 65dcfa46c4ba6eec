"""Reachability check for the Koha staff interface under test."""

import logging

import httpx

from ..constants import HOST_CHECK_TIMEOUT

logger = logging.getLogger(__name__)

MAINPAGE_PATH = "/cgi-bin/koha/mainpage.pl"


class PreflightError(Exception):
    """Koha web service is not reachable."""

    pass


def check_host(
    host: str,
    timeout: float = HOST_CHECK_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> None:
    """Verify that the staff interface main page answers with success.

    Raises:
        PreflightError: On transport errors or a non-success response
    """
    url = f"{host.rstrip('/')}{MAINPAGE_PATH}"
    logger.debug("Checking Koha web service at %s", url)
    try:
        with httpx.Client(
            timeout=timeout, transport=transport, follow_redirects=True
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as e:
        raise PreflightError(f"Koha web service is not available at {url}: {e}") from e
    if not response.is_success:
        raise PreflightError(
            f"Koha web service is not available at {url} (HTTP {response.status_code})"
        )
