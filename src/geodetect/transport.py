from __future__ import annotations

import logging

import requests

from geodetect.exceptions import TransportError

logger = logging.getLogger(__name__)


def send(
    method: str, url: str, session: requests.Session | None = None, **kwargs
) -> requests.Response:
    """
    Issues an HTTP request, through `session` if given or plain `requests` otherwise

    Any failure happening before an HTTP answer is received (DNS, connection,
    read timeout) is raised as `TransportError`; HTTP error
    statuses are returned untouched, it is up to the caller to check them.
    """
    logger.debug("%s %s", method, url)
    try:
        if session is None:
            return requests.request(method, url, **kwargs)
        return session.request(method, url, **kwargs)
    except requests.exceptions.RequestException as e:
        raise TransportError("%s %s failed: %s" % (method, url, e)) from e
