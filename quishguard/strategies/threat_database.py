"""External threat-database lookup (Safe Browsing style)."""
import asyncio
from typing import Optional

from quishguard.clients.base import BaseLookup
from quishguard.exceptions import APIError, StrategyFailure
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy


class ThreatDatabaseStrategy(BaseStrategy):
    """Checks the URL against an external threat-matching service."""

    name = CheckName.THREAT_DATABASE

    def __init__(self, lookup: Optional[BaseLookup] = None, **kwargs):
        super().__init__(**kwargs)
        self.lookup = lookup

    async def check(self, url: str) -> CheckOutcome:
        if self.lookup is None or not self.lookup.is_configured:
            return self._create_outcome(
                RiskLevel.UNKNOWN,
                message="Threat database lookup not configured",
                data={"threats": []},
                requires_setup=True
            )

        try:
            result = await self._query_lookup(self.lookup, url)
        except asyncio.TimeoutError as e:
            raise StrategyFailure(f"{self.lookup.name} did not answer within {self.lookup_timeout}s") from e
        except APIError as e:
            raise StrategyFailure(f"{self.lookup.name} unavailable: {str(e)}") from e

        is_safe = len(result.matches) == 0

        if is_safe:
            return self._create_outcome(
                RiskLevel.LOW,
                message=f"No threats detected by {self.lookup.name}",
                data={"threats": []},
                is_safe=True
            )

        threat_types = ', '.join(sorted({t.get('type', 'UNKNOWN') for t in result.matches}))
        return self._create_outcome(
            RiskLevel.HIGH,
            message=f"Threats detected by {self.lookup.name}",
            details=[f"Dangerous threat detected ({threat_types})"],
            data={"threats": result.matches},
            is_safe=False
        )
