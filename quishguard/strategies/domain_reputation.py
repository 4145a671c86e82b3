"""Domain reputation heuristics with optional WHOIS age overlay."""
import asyncio
import re
from typing import Any, Dict, Optional

from quishguard.clients.base import BaseLookup
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy
from quishguard.utils.domains import extract_root_domain, get_hostname, is_ip_address
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)

TRUSTED_DOMAINS = {
    'google.com', 'microsoft.com', 'apple.com', 'amazon.com', 'github.com',
    'youtube.com', 'facebook.com', 'twitter.com', 'linkedin.com', 'instagram.com',
    'netflix.com', 'spotify.com', 'reddit.com', 'wikipedia.org', 'stackoverflow.com',
    'medium.com', 'paypal.com', 'ebay.com', 'zoom.us', 'dropbox.com'
}

SUSPICIOUS_TLDS = [
    '.xyz', '.top', '.club', '.online', '.info', '.biz', '.work', '.click', '.link', '.download'
]

NEUTRAL_SCORE = 50
TRUSTED_SCORE = 90
CLEAN_SCORE = 60


def describe_age(days: Optional[int]) -> str:
    if days is None:
        return "unknown"
    if days < 30:
        return "very new (< 1 month)"
    if days < 365:
        return f"{days // 30} months"
    return f"{days // 365} years"


def risk_for_age(days: int) -> RiskLevel:
    if days < 30:
        return RiskLevel.HIGH
    if days < 365:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def risk_for_score(score: int) -> RiskLevel:
    if score >= 60:
        return RiskLevel.LOW
    if score >= 40:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


class DomainReputationStrategy(BaseStrategy):
    """Scores the domain shape; overlays registration age when WHOIS is available."""

    name = CheckName.DOMAIN_REPUTATION

    def __init__(self, age_lookup: Optional[BaseLookup] = None, **kwargs):
        super().__init__(**kwargs)
        self.age_lookup = age_lookup

    def score_domain(self, domain: str) -> Dict[str, Any]:
        """Heuristic score, 0-100 where higher is more reputable."""
        root_domain = extract_root_domain(domain)
        if root_domain in TRUSTED_DOMAINS:
            return {
                "root_domain": root_domain,
                "score": TRUSTED_SCORE,
                "trusted": True,
                "details": ["Domain is from a trusted provider"]
            }

        score = NEUTRAL_SCORE
        details = []

        if any(domain.endswith(tld) for tld in SUSPICIOUS_TLDS):
            score -= 20
            details.append("Domain uses an uncommon TLD")

        if len(domain) > 40:
            score -= 10
            details.append("Unusually long domain name")

        subdomain_count = len(domain.split('.')) - 2
        if subdomain_count > 2:
            score -= 15
            details.append("Multiple subdomains detected")

        if re.search(r'\d{3,}', domain):
            score -= 5
            details.append("Contains multiple numbers")

        red_flags = list(details)
        if not details:
            score = CLEAN_SCORE
            details.append("No immediate red flags detected")

        return {
            "root_domain": root_domain,
            "score": score,
            "trusted": False,
            "details": details,
            "red_flags": red_flags
        }

    def _wants_age(self, domain: str, heuristic: Dict[str, Any]) -> bool:
        """Raw IP hosts and trusted domains have no registration age worth asking for."""
        if heuristic["trusted"] or is_ip_address(domain):
            return False
        return self.age_lookup is not None and self.age_lookup.is_configured

    async def check(self, url: str) -> CheckOutcome:
        domain = get_hostname(url)
        heuristic = self.score_domain(domain)

        risk = RiskLevel.LOW if heuristic["trusted"] else risk_for_score(heuristic["score"])
        message = (
            "Trusted domain" if heuristic["trusted"]
            else f"Domain reputation score: {heuristic['score']}/100"
        )
        data: Dict[str, Any] = {
            "domain": domain,
            "root_domain": heuristic["root_domain"],
            "score": heuristic["score"],
            "trusted": heuristic["trusted"]
        }

        if self._wants_age(domain, heuristic):
            try:
                age = await self._query_lookup(self.age_lookup, heuristic["root_domain"])
                risk = risk_for_age(age.age_in_days)
                message = f"Domain created {describe_age(age.age_in_days)} ago"
                data.update({
                    "registrar": age.registrar,
                    "created_date": age.created_date,
                    "age_in_days": age.age_in_days,
                    "age_description": describe_age(age.age_in_days)
                })
            except asyncio.TimeoutError:
                logger.warning(f"WHOIS lookup timed out after {self.lookup_timeout}s, using heuristics only")
            except Exception as e:
                logger.warning(f"WHOIS lookup failed, using heuristics only: {str(e)}")

        warnings = heuristic.get("red_flags", []) if risk is RiskLevel.LOW else []

        return self._create_outcome(
            risk,
            message=message,
            details=heuristic["details"],
            data=data,
            warnings=warnings
        )
