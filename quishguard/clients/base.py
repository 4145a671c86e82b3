"""Common behaviour of optional lookup collaborators."""
from abc import ABC, abstractmethod
from typing import Any

from quishguard.exceptions import ConfigurationMissing


class BaseLookup(ABC):
    """
    Optional external lookup.

    ``is_configured`` is the "not configured" sentinel: strategies check it
    and fall back to heuristics without surfacing an error. ``query`` raises
    ``ConfigurationMissing`` when called anyway, and ``APIError`` on runtime
    failures.
    """

    name = "lookup"

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        pass

    def query(self, target: str) -> Any:
        if not self.is_configured:
            raise ConfigurationMissing(f"{self.name} is not configured")
        return self._query(target)

    @abstractmethod
    def _query(self, target: str) -> Any:
        pass
