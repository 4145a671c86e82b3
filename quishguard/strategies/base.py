"""Base strategy class."""
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional
import asyncio
import time

from quishguard.clients.base import BaseLookup
from quishguard.config import config
from quishguard.exceptions import StrategyFailure
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)


class BaseStrategy(ABC):
    """Base class for all check strategies."""

    name: CheckName

    def __init__(self, timeout: Optional[float] = None, lookup_timeout: Optional[float] = None):
        """
        Initialize strategy.

        Args:
            timeout: Budget for the whole check
            lookup_timeout: Budget for each optional lookup call within the check
        """
        self.timeout = timeout if timeout is not None else config.strategy_timeout
        self.lookup_timeout = lookup_timeout if lookup_timeout is not None else config.lookup_timeout

    @abstractmethod
    async def check(self, url: str) -> CheckOutcome:
        """
        Perform the check.

        Args:
            url: URL to analyze

        Returns:
            CheckOutcome
        """
        pass

    def _create_outcome(
        self,
        risk: RiskLevel,
        message: str = "",
        details: list = None,
        data: dict = None,
        suspicious: bool = False,
        is_safe: Optional[bool] = None,
        warnings: list = None,
        requires_setup: bool = False
    ) -> CheckOutcome:
        """Create a successful check outcome."""
        return CheckOutcome(
            name=self.name,
            success=True,
            risk=risk,
            message=message,
            details=details or [],
            data=data or {},
            suspicious=suspicious,
            is_safe=is_safe,
            warnings=warnings or [],
            requires_setup=requires_setup
        )

    async def _run_blocking(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Run blocking collaborator call in executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    async def _query_lookup(self, lookup: BaseLookup, target: str) -> Any:
        """
        Query an optional lookup within ``lookup_timeout``.

        Raises:
            asyncio.TimeoutError: The lookup did not answer in time
        """
        return await asyncio.wait_for(
            self._run_blocking(lookup.query, target),
            timeout=self.lookup_timeout
        )

    async def analyze(self, url: str) -> CheckOutcome:
        """
        Run the check without letting errors escape.

        Timeouts and exceptions become a failed outcome for this check only.

        Args:
            url: URL to analyze

        Returns:
            CheckOutcome (failed variant if the check raised or timed out)
        """
        start_time = time.time()

        try:
            outcome = await asyncio.wait_for(self.check(url), timeout=self.timeout)
            outcome.execution_time = time.time() - start_time
            return outcome
        except asyncio.TimeoutError:
            logger.warning(f"{self.name.value} check timed out after {self.timeout}s")
            return CheckOutcome.failed(
                self.name,
                f"Check timed out after {self.timeout}s",
                execution_time=time.time() - start_time
            )
        except StrategyFailure as e:
            logger.warning(f"{self.name.value} check unavailable: {str(e)}")
            return CheckOutcome.failed(
                self.name,
                f"Check failed: {str(e)}",
                execution_time=time.time() - start_time
            )
        except Exception as e:
            logger.error(f"{self.name.value} check failed: {str(e)}", exc_info=True)
            return CheckOutcome.failed(
                self.name,
                f"Check failed: {str(e)}",
                execution_time=time.time() - start_time
            )
