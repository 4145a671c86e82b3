"""Brand impersonation (typosquatting) detection."""
import asyncio
from dataclasses import dataclass
from typing import Optional

from quishguard.clients.base import BaseLookup
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy
from quishguard.utils.domains import extract_root_domain, get_hostname, is_ip_address, strip_tld
from quishguard.utils.logger import get_logger
from quishguard.utils.similarity import similarity

logger = get_logger(__name__)

# Iterated in sorted order so the reported target is deterministic.
BRAND_DOMAINS = sorted([
    'amazon.com', 'apple.com', 'bankofamerica.com', 'chase.com', 'citibank.com',
    'dropbox.com', 'ebay.com', 'facebook.com', 'github.com', 'gmail.com',
    'google.com', 'instagram.com', 'linkedin.com', 'microsoft.com', 'netflix.com',
    'paypal.com', 'reddit.com', 'slack.com', 'spotify.com', 'twitter.com',
    'walmart.com', 'wellsfargo.com', 'yahoo.com', 'youtube.com', 'zoom.us'
])

# Infrastructure roots owned by a listed brand; never treated as impersonation.
BRAND_OWNED_ROOTS = {
    'googleusercontent.com', 'googleapis.com', 'googlevideo.com', 'gstatic.com',
    'githubusercontent.com', 'githubassets.com', 'github.io',
    'microsoftonline.com', 'microsoftonline-p.com', 'amazonaws.com', 'amazontrust.com',
    'paypalobjects.com', 'ebaystatic.com', 'facebookmail.com',
    'spotifycdn.com', 'redditmedia.com', 'redditstatic.com',
    'slack-edge.com', 'yahooapis.com', 'youtubekids.com', 'zoomgov.com'
}

LEETSPEAK = str.maketrans({'0': 'o', '1': 'l', '5': 's', '8': 'b'})

SIMILARITY_FLOOR = 0.75
LEETSPEAK_SCORE = 90
CONTAINS_SCORE = 85


@dataclass
class TyposquatMatch:
    target: str
    score: int
    rule: str


def find_suspected_target(domain: str) -> Optional[TyposquatMatch]:
    """
    First brand ``domain`` appears to impersonate, or None.

    Rules per brand, first hit wins: leetspeak-normalized equality, brand
    label contained in the candidate, then edit-distance similarity.
    """
    domain = domain.lower()
    if domain.startswith('www.'):
        domain = domain[4:]
    if not domain or is_ip_address(domain):
        return None
    root_domain = extract_root_domain(domain)
    if root_domain in BRAND_DOMAINS or root_domain in BRAND_OWNED_ROOTS:
        return None

    candidate = strip_tld(domain)
    normalized = candidate.translate(LEETSPEAK)

    for brand in BRAND_DOMAINS:
        brand_root = strip_tld(brand)

        if normalized == brand_root and candidate != brand_root:
            return TyposquatMatch(brand, LEETSPEAK_SCORE, "character substitution")

        if brand_root in candidate:
            return TyposquatMatch(brand, CONTAINS_SCORE, "brand name embedded")

        ratio = similarity(candidate, brand_root)
        if SIMILARITY_FLOOR < ratio < 1.0:
            return TyposquatMatch(brand, round(ratio * 100), "similar spelling")

    return None


class TyposquattingStrategy(BaseStrategy):
    """Flags domains resembling high-value brands; VirusTotal can corroborate."""

    name = CheckName.TYPOSQUATTING

    def __init__(self, reputation_lookup: Optional[BaseLookup] = None, **kwargs):
        super().__init__(**kwargs)
        self.reputation_lookup = reputation_lookup

    async def check(self, url: str) -> CheckOutcome:
        domain = get_hostname(url)
        match = find_suspected_target(domain)

        if match is None:
            return self._create_outcome(
                RiskLevel.LOW,
                message="No typosquatting detected",
                data={"is_typosquat": False, "domain": domain}
            )

        data = {
            "is_typosquat": True,
            "domain": domain,
            "suspected_target": match.target,
            "score": match.score,
            "rule": match.rule
        }
        details = [f"Resembles {match.target} ({match.rule})"]

        if self.reputation_lookup is not None and self.reputation_lookup.is_configured:
            try:
                reputation = await self._query_lookup(self.reputation_lookup, domain)
            except asyncio.TimeoutError:
                logger.warning(f"Reputation lookup timed out after {self.lookup_timeout}s, using heuristics only")
            except Exception as e:
                logger.warning(f"Reputation lookup failed, using heuristics only: {str(e)}")
            else:
                data["detection_ratio"] = reputation.detection_ratio
                data["corroborated"] = reputation.is_suspicious
                if reputation.is_suspicious:
                    return self._create_outcome(
                        RiskLevel.HIGH,
                        message=f"Possible typosquat of {match.target} (confirmed by VirusTotal)",
                        details=details,
                        data=data,
                        suspicious=True
                    )
                return self._create_outcome(
                    RiskLevel.MEDIUM,
                    message=f"Similar to {match.target}, no engine detections",
                    details=details,
                    data=data,
                    suspicious=True
                )

        return self._create_outcome(
            RiskLevel.MEDIUM,
            message=f"Domain similar to {match.target} - verify authenticity",
            details=details,
            data=data,
            suspicious=True
        )
