"""Main analysis orchestrator."""
import asyncio
import time
from typing import Dict, List, Optional

from quishguard.config import config, AppConfig
from quishguard.models import (
    CheckName,
    CheckOutcome,
    CompositeReport,
    SafetyLevel,
)
from quishguard.core.cache import ResultCache
from quishguard.core.scoring import (
    apply_information_floor,
    calculate_risk_score,
    determine_overall_safety,
    generate_recommendations,
)
from quishguard.core.validator import URLValidator
from quishguard.clients.transport import HttpTransport
from quishguard.clients.safe_browsing import SafeBrowsingLookup
from quishguard.clients.virustotal import VirusTotalLookup
from quishguard.clients.whois_lookup import WhoisLookup
from quishguard.exceptions import ValidationError
from quishguard.strategies.base import BaseStrategy
from quishguard.strategies.domain_reputation import DomainReputationStrategy
from quishguard.strategies.phishing_pattern import PhishingPatternStrategy
from quishguard.strategies.ssl import SSLStrategy
from quishguard.strategies.threat_database import ThreatDatabaseStrategy
from quishguard.strategies.typosquatting import TyposquattingStrategy
from quishguard.strategies.url_expansion import URLExpansionStrategy
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


class URLAnalyzer:
    """
    Facade over the check strategies and the result cache.

    One instance owns one cache; share the instance to share the cache.
    Concurrent misses for the same URL are not coalesced: both run the full
    fan-out and the later write wins.
    """

    def __init__(self, strategies: Optional[List[BaseStrategy]] = None,
                 cache: Optional[ResultCache] = None):
        """
        Initialize analyzer.

        Args:
            strategies: Check strategies, at most one per CheckName
            cache: Result cache; None disables caching
        """
        self.validator = URLValidator()
        self.cache = cache
        self._strategies: Dict[CheckName, BaseStrategy] = {}
        for strategy in strategies or []:
            self.register_strategy(strategy)

    @classmethod
    def default(cls, settings: AppConfig = config,
                transport: Optional[HttpTransport] = None) -> "URLAnalyzer":
        """Build the standard six-check analyzer from configuration."""
        transport = transport or HttpTransport()
        cache = ResultCache(
            max_size=settings.cache_max_size,
            ttl=settings.cache_ttl
        ) if settings.cache_enabled else None

        strategies = [
            URLExpansionStrategy(transport),
            DomainReputationStrategy(age_lookup=WhoisLookup(enabled=settings.apis.whois_enabled)),
            SSLStrategy(transport),
            TyposquattingStrategy(reputation_lookup=VirusTotalLookup(api_key=settings.apis.virustotal)),
            PhishingPatternStrategy(),
            ThreatDatabaseStrategy(lookup=SafeBrowsingLookup(api_key=settings.apis.safe_browsing)),
        ]
        return cls(strategies=strategies, cache=cache)

    def register_strategy(self, strategy: BaseStrategy) -> None:
        """Register a strategy, replacing any existing one with the same name."""
        if strategy.name in self._strategies:
            logger.info(f"Replacing strategy {strategy.name.value}")
        self._strategies[strategy.name] = strategy

    @property
    def strategies(self) -> List[BaseStrategy]:
        return list(self._strategies.values())

    async def analyze(self, url: str, force_refresh: bool = False) -> CompositeReport:
        """
        Perform complete URL analysis.

        Args:
            url: Raw URL as decoded from a scan
            force_refresh: Skip the cache lookup (the result is still cached)

        Returns:
            CompositeReport
        """
        start_time = time.time()

        # 1. Validate
        try:
            sanitized_url = self.validator.process(url)
        except ValidationError as e:
            logger.warning(f"Validation error: {str(e)}")
            return self._invalid_report(url, str(e), time.time() - start_time)

        # 2. Cache
        if self.cache is not None and not force_refresh:
            cached = self.cache.get(sanitized_url)
            if cached is not None:
                return cached

        # 3. Resolve shortened links before the other checks run
        checks: Dict[CheckName, CheckOutcome] = {}
        destination = sanitized_url
        expansion = self._strategies.get(CheckName.URL_EXPANSION)
        if expansion is not None:
            outcome = await expansion.analyze(sanitized_url)
            checks[CheckName.URL_EXPANSION] = outcome
            destination = self._destination_from(outcome, sanitized_url)

        # 4. Parallel checks on the destination
        others = [s for s in self._strategies.values() if s.name is not CheckName.URL_EXPANSION]
        results = await asyncio.gather(
            *(strategy.analyze(destination) for strategy in others),
            return_exceptions=True
        )
        for strategy, result in zip(others, results):
            if isinstance(result, BaseException):
                logger.error(f"Strategy {strategy.name.value} raised: {str(result)}")
                result = CheckOutcome.failed(strategy.name, f"Check failed: {str(result)}")
            checks[strategy.name] = result

        ordered_checks = {
            name: checks.get(name) or CheckOutcome.failed(name, "Check not registered")
            for name in CheckName
        }

        # 5. Aggregate
        report = self._aggregate(sanitized_url, destination, ordered_checks)
        report.execution_time = time.time() - start_time

        if self.cache is not None and report.error is None:
            self.cache.put(sanitized_url, report)

        logger.info(
            f"Analyzed {sanitized_url[:50]}: score={report.risk_score} "
            f"safety={report.overall_safety.value}"
        )
        return report

    def _destination_from(self, outcome: CheckOutcome, url: str) -> str:
        expanded = outcome.data.get("expanded") if outcome.success else None
        if not expanded or expanded == url:
            return url

        is_valid, error = self.validator.validate(expanded)
        if not is_valid:
            logger.warning(f"Ignoring expanded URL {expanded[:50]}: {error}")
            return url
        return expanded

    def _aggregate(self, url: str, destination: str,
                   checks: Dict[CheckName, CheckOutcome]) -> CompositeReport:
        try:
            risk_score = calculate_risk_score(checks)
            band = apply_information_floor(determine_overall_safety(risk_score), checks)
            recommendations = generate_recommendations(checks, band)
        except Exception as e:
            logger.error(f"Aggregation failed for {url[:50]}: {str(e)}", exc_info=True)
            return CompositeReport(
                url=url,
                analyzed_url=destination,
                checks=checks,
                risk_score=0,
                overall_safety=SafetyLevel.UNKNOWN,
                recommendations=generate_recommendations({}, SafetyLevel.UNKNOWN),
                error=f"Aggregation failed: {str(e)}"
            )

        return CompositeReport(
            url=url,
            analyzed_url=destination,
            checks=checks,
            risk_score=risk_score,
            overall_safety=band,
            recommendations=recommendations
        )

    def _invalid_report(self, url: str, error: str, execution_time: float) -> CompositeReport:
        message = f"Invalid URL: {error}"
        return CompositeReport(
            url=url,
            checks={name: CheckOutcome.failed(name, message) for name in CheckName},
            risk_score=0,
            overall_safety=SafetyLevel.UNKNOWN,
            recommendations=[
                "Do not open this link",
                "The scanned code does not contain a valid web address"
            ],
            error=message,
            execution_time=execution_time
        )

    def clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear()
        logger.info("Analysis cache cleared")

    def cache_stats(self) -> Dict:
        """Cache size, capacity and whether caching is enabled."""
        if self.cache is None:
            return {"size": 0, "max_size": 0, "enabled": False}
        stats = self.cache.stats()
        stats["enabled"] = True
        return stats
