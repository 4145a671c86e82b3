"""Google Safe Browsing threat-match client."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from quishguard.clients.base import BaseLookup
from quishguard.config import config
from quishguard.exceptions import APIError

ENDPOINT = "https://safebrowsing.googleapis.com/v4/threatMatches:find"


@dataclass
class ThreatMatchResult:
    matches: List[Dict[str, Any]] = field(default_factory=list)


class SafeBrowsingLookup(BaseLookup):
    """Threat database lookup using Google Safe Browsing API v4."""

    name = "Google Safe Browsing"

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.api_key = api_key if api_key is not None else config.apis.safe_browsing
        self.timeout = timeout or config.lookup_timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _query(self, url: str) -> ThreatMatchResult:
        payload = {
            "client": {
                "clientId": "quishguard",
                "clientVersion": config.version
            },
            "threatInfo": {
                "threatTypes": [
                    "MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE",
                    "POTENTIALLY_HARMFUL_APPLICATION"
                ],
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}]
            }
        }

        try:
            response = requests.post(
                ENDPOINT,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise APIError(f"Safe Browsing API error: {str(e)}") from e

        threats = []
        for match in data.get("matches", []):
            threats.append({
                'type': match.get('threatType', 'UNKNOWN'),
                'platform': match.get('platformType', 'ANY_PLATFORM'),
                'url': match.get('threat', {}).get('url', url)
            })
        return ThreatMatchResult(matches=threats)
