"""Domain age lookup using WHOIS."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import whois

from quishguard.clients.base import BaseLookup
from quishguard.config import config
from quishguard.exceptions import APIError


@dataclass
class DomainAgeInfo:
    registrar: str
    created_date: str
    age_in_days: int


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class WhoisLookup(BaseLookup):
    """Registration-age collaborator backed by ``python-whois``."""

    name = "WHOIS"

    def __init__(self, enabled: Optional[bool] = None):
        self.enabled = config.apis.whois_enabled if enabled is None else enabled

    @property
    def is_configured(self) -> bool:
        return self.enabled

    def _query(self, domain: str) -> DomainAgeInfo:
        try:
            w = whois.whois(domain)
        except Exception as e:
            raise APIError(f"WHOIS lookup failed for {domain}: {str(e)}") from e

        creation_date = w.creation_date
        if isinstance(creation_date, list):
            creation_date = creation_date[0] if creation_date else None

        if not isinstance(creation_date, datetime):
            raise APIError(f"No creation date in WHOIS record for {domain}")

        creation_date = _as_utc(creation_date)
        age_days = (datetime.now(timezone.utc) - creation_date).days
        return DomainAgeInfo(
            registrar=w.registrar or "Unknown",
            created_date=creation_date.isoformat(),
            age_in_days=age_days,
        )
