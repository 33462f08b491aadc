"""HTTP client and network functions for anime-episodes."""

import logging
import time
import random
import requests

from ..config import get_settings

logger = logging.getLogger(__name__)

# Constants
RETRY_CODES = {429, 500, 502, 503, 504}
DEFAULT_ATTEMPTS = 3


def _req(method: str, url: str, **kw) -> requests.Response:
    """Internal request function with retry logic."""
    settings = get_settings()
    timeout = kw.pop("timeout", settings.http_timeout)
    attempts = max(1, kw.pop("attempts", DEFAULT_ATTEMPTS))
    headers = {"User-Agent": settings.user_agent, **kw.pop("headers", {})}
    backoff = 0.7

    for attempt in range(attempts):
        last = attempt == attempts - 1
        try:
            r = requests.request(method, url, timeout=timeout, headers=headers, **kw)
            if r.status_code in RETRY_CODES:
                raise requests.HTTPError(f"{r.status_code} upstream", response=r)
            return r
        except requests.HTTPError as e:
            resp = getattr(e, "response", None)
            if resp is not None and resp.status_code in RETRY_CODES and not last:
                logger.debug("%s %s -> %s, retrying", method, url, resp.status_code)
                time.sleep(backoff + random.random() * 0.4)
                backoff *= 2
                continue
            raise
        except requests.RequestException as e:
            if not last:
                logger.debug("%s %s failed (%s), retrying", method, url, e)
                time.sleep(backoff + random.random() * 0.4)
                backoff *= 2
                continue
            raise


def http_get(url: str, **kw) -> requests.Response:
    return _req("GET", url, **kw)


def http_post(url: str, **kw) -> requests.Response:
    return _req("POST", url, **kw)
