"""URL shortener detection and expansion."""
from typing import Optional

from quishguard.clients.transport import HttpTransport
from quishguard.config import config
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy
from quishguard.utils.domains import get_hostname, host_matches

SHORTENERS = [
    'bit.ly', 'bitly.com', 'tinyurl.com', 'goo.gl', 'ow.ly', 't.co', 'youtu.be',
    'is.gd', 'buff.ly', 'adf.ly', 'bit.do', 'short.io', 'rebrand.ly', 'cutt.ly',
    'tiny.cc', 'shorturl.at', 'rb.gy', 'shorturl.com', 't2m.io'
]

SUSPICIOUS_REDIRECT_COUNT = 3


class URLExpansionStrategy(BaseStrategy):
    """Detects shortened URLs and resolves their destination."""

    name = CheckName.URL_EXPANSION

    def __init__(self, transport: HttpTransport, max_redirects: Optional[int] = None,
                 request_timeout: Optional[float] = None, **kwargs):
        super().__init__(**kwargs)
        self.transport = transport
        self.max_redirects = max_redirects or config.max_redirects
        self.request_timeout = request_timeout or config.expansion_timeout

    @staticmethod
    def is_shortened(url: str) -> bool:
        return host_matches(get_hostname(url), SHORTENERS) is not None

    async def check(self, url: str) -> CheckOutcome:
        if not self.is_shortened(url):
            return self._create_outcome(
                RiskLevel.LOW,
                message="Not a shortened URL",
                data={
                    "is_shortened": False,
                    "original": url,
                    "expanded": url,
                    "redirect_count": 0
                }
            )

        followed = await self._run_blocking(
            self.transport.follow,
            url,
            max_redirects=self.max_redirects,
            timeout=self.request_timeout
        )

        original_host = get_hostname(url)
        expanded_host = get_hostname(followed.final_url)
        host_changed = expanded_host != original_host
        suspicious = host_changed and followed.redirect_count > SUSPICIOUS_REDIRECT_COUNT

        details = []
        if host_changed:
            details.append(f"Expanded from {original_host} to {expanded_host}")
            message = f"Expanded from {original_host}"
        else:
            message = "Could not expand URL"
        if suspicious:
            details.append(f"Long redirect chain ({followed.redirect_count} hops)")

        return self._create_outcome(
            RiskLevel.MEDIUM if suspicious else RiskLevel.LOW,
            message=message,
            details=details,
            data={
                "is_shortened": True,
                "original": url,
                "expanded": followed.final_url,
                "redirect_count": followed.redirect_count
            },
            suspicious=suspicious,
            warnings=[] if suspicious else ["Shortened URL hides its destination"]
        )
