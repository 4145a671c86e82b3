"""VirusTotal domain reputation client."""
from dataclasses import dataclass
from typing import Optional

import requests

from quishguard.clients.base import BaseLookup
from quishguard.config import config
from quishguard.exceptions import APIError


@dataclass
class DomainReputationInfo:
    malicious_count: int
    suspicious_count: int
    total_engines: int
    reputation: int = 0

    @property
    def is_suspicious(self) -> bool:
        return self.malicious_count > 0 or self.suspicious_count > 0

    @property
    def detection_ratio(self) -> str:
        return f"{self.malicious_count + self.suspicious_count}/{self.total_engines}"


class VirusTotalLookup(BaseLookup):
    """Domain reputation collaborator using the VirusTotal API v3."""

    name = "VirusTotal"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else config.apis.virustotal
        self.timeout = timeout or config.lookup_timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _query(self, domain: str) -> DomainReputationInfo:
        try:
            response = requests.get(
                f'https://www.virustotal.com/api/v3/domains/{domain}',
                headers={'x-apikey': self.api_key},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise APIError(f"VirusTotal API error: {str(e)}") from e

        if response.status_code != 200:
            raise APIError(f"VirusTotal API returned status {response.status_code}")

        attributes = response.json().get('data', {}).get('attributes')
        if not attributes:
            raise APIError("No VirusTotal data")

        stats = attributes.get('last_analysis_stats', {})
        return DomainReputationInfo(
            malicious_count=stats.get('malicious', 0),
            suspicious_count=stats.get('suspicious', 0),
            total_engines=sum(stats.values()),
            reputation=attributes.get('reputation', 0),
        )
