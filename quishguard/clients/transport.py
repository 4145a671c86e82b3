"""HTTP transport used for redirect following and reachability probes."""
from dataclasses import dataclass
from typing import Optional

import requests

from quishguard.config import config
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FollowResult:
    final_url: str
    status_code: int
    redirect_count: int


@dataclass
class ProbeResult:
    status_code: int


class HttpTransport:
    """Thin ``requests`` wrapper; errors propagate to the calling strategy."""

    def __init__(self, session: Optional[requests.Session] = None, user_agent: Optional[str] = None):
        self.session = session or requests.Session()
        self.headers = {'User-Agent': user_agent or config.user_agent}

    def follow(self, url: str, max_redirects: int = 5, timeout: float = 5.0) -> FollowResult:
        """
        Follow redirects from ``url``.

        Raises:
            requests.TooManyRedirects: more than ``max_redirects`` hops
            requests.RequestException: any other transport failure
        """
        self.session.max_redirects = max_redirects
        # stream=True: only headers are read, the body is never downloaded
        response = self.session.get(
            url,
            headers=self.headers,
            timeout=timeout,
            allow_redirects=True,
            stream=True,
        )
        try:
            result = FollowResult(
                final_url=response.url,
                status_code=response.status_code,
                redirect_count=len(response.history),
            )
        finally:
            response.close()

        logger.debug(f"Followed {url[:50]} -> {result.final_url[:50]} ({result.redirect_count} redirects)")
        return result

    def probe(self, url: str, timeout: float = 5.0) -> ProbeResult:
        """HEAD request with certificate verification; any status is returned."""
        response = self.session.head(url, headers=self.headers, timeout=timeout, allow_redirects=True)
        return ProbeResult(status_code=response.status_code)
