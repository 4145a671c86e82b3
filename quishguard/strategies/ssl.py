"""HTTPS presence and reachability check."""
from typing import Optional
from urllib.parse import urlparse

from quishguard.clients.transport import HttpTransport
from quishguard.config import config
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


class SSLStrategy(BaseStrategy):
    """
    HTTPS presence check.

    A successful HEAD request (status below 400) over a verified TLS session
    stands in for certificate validity; this is not chain validation.
    """

    name = CheckName.SSL

    def __init__(self, transport: HttpTransport, request_timeout: Optional[float] = None, **kwargs):
        super().__init__(**kwargs)
        self.transport = transport
        self.request_timeout = request_timeout or config.probe_timeout

    async def check(self, url: str) -> CheckOutcome:
        if urlparse(url).scheme.lower() != 'https':
            return self._create_outcome(
                RiskLevel.HIGH,
                message="URL does not use HTTPS encryption",
                details=["Never enter sensitive information on this site"],
                data={"has_ssl": False, "valid_cert": False}
            )

        try:
            probe = await self._run_blocking(self.transport.probe, url, timeout=self.request_timeout)
        except Exception as e:
            logger.warning(f"SSL probe failed for {url[:50]}: {str(e)}")
            return self._create_outcome(
                RiskLevel.MEDIUM,
                message="Could not validate SSL certificate",
                data={"has_ssl": True, "valid_cert": False, "error": str(e)},
                warnings=["SSL certificate could not be validated"]
            )

        if probe.status_code < 400:
            return self._create_outcome(
                RiskLevel.LOW,
                message="Valid HTTPS connection",
                data={"has_ssl": True, "valid_cert": True, "status_code": probe.status_code}
            )

        return self._create_outcome(
            RiskLevel.MEDIUM,
            message="HTTPS present but may have certificate issues",
            data={"has_ssl": True, "valid_cert": False, "status_code": probe.status_code},
            warnings=[f"Server answered with status {probe.status_code}"]
        )
