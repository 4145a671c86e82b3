"""Data models and schemas."""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Callable
from datetime import datetime, timezone
from enum import Enum


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CheckName(Enum):
    """Stable identifier of each check; used as the aggregation key."""
    URL_EXPANSION = "url_expansion"
    DOMAIN_REPUTATION = "domain_reputation"
    SSL = "ssl"
    TYPOSQUATTING = "typosquatting"
    PHISHING_PATTERN = "phishing_pattern"
    THREAT_DATABASE = "threat_database"


class RiskLevel(Enum):
    """Risk level reported by a single check."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


class SafetyLevel(Enum):
    """Overall verdict of a composite report."""
    SAFE = "safe"
    CAUTION = "caution"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"
    UNKNOWN = "unknown"


class ReportStatus(Enum):
    """Lifecycle of a submitted threat report."""
    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


class ReportEventType(Enum):
    """Events broadcast to reporting observers."""
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    ERROR = "error"
    HISTORY_CLEARED = "history_cleared"


@dataclass
class AnalysisRequest:
    """URL analysis request model."""
    url: str
    force_refresh: bool = False


@dataclass
class CheckOutcome:
    """
    Result of one check strategy.

    ``success=False`` is the failed variant: it carries only a message and an
    error, contributes nothing to the risk score and reads as ``unknown``.
    """
    name: CheckName
    success: bool = True
    risk: RiskLevel = RiskLevel.UNKNOWN
    message: str = ""
    details: List[str] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    suspicious: bool = False
    is_safe: Optional[bool] = None
    warnings: List[str] = field(default_factory=list)
    requires_setup: bool = False
    error: Optional[str] = None
    execution_time: float = 0.0

    @classmethod
    def failed(cls, name: CheckName, message: str, execution_time: float = 0.0) -> "CheckOutcome":
        """Build the failed variant for ``name``."""
        return cls(
            name=name,
            success=False,
            risk=RiskLevel.UNKNOWN,
            message=message,
            error=message,
            execution_time=execution_time,
        )

    @property
    def has_verdict(self) -> bool:
        """Whether this outcome says anything definite about the URL."""
        return self.success and self.risk is not RiskLevel.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name.value,
            "success": self.success,
            "risk": self.risk.value,
            "message": self.message,
            "details": list(self.details),
            "data": dict(self.data),
            "suspicious": self.suspicious,
            "is_safe": self.is_safe,
            "warnings": list(self.warnings),
            "requires_setup": self.requires_setup,
            "error": self.error,
            "execution_time": self.execution_time,
        }


@dataclass
class CompositeReport:
    """Complete URL analysis result."""
    url: str
    checks: Dict[CheckName, CheckOutcome]
    risk_score: int
    overall_safety: SafetyLevel
    recommendations: List[str] = field(default_factory=list)
    analyzed_url: Optional[str] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=utc_now_iso)
    execution_time: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "analyzed_url": self.analyzed_url or self.url,
            "timestamp": self.timestamp,
            "checks": {name.value: outcome.to_dict() for name, outcome in self.checks.items()},
            "risk_score": self.risk_score,
            "overall_safety": self.overall_safety.value,
            "recommendations": list(self.recommendations),
            "error": self.error,
            "execution_time": self.execution_time,
        }


@dataclass
class Submission:
    """Outcome of one reporting sub-action."""
    service: str
    status: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"service": self.service, "status": self.status, "data": self.data}


@dataclass
class ReportRecord:
    """A URL a user chose to escalate."""
    report_id: str
    url: str
    category: str
    description: str = ""
    timestamp: str = field(default_factory=utc_now_iso)
    status: ReportStatus = ReportStatus.PENDING
    submissions: List[Submission] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "report_id": self.report_id,
            "url": self.url,
            "category": self.category,
            "description": self.description,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "submissions": [s.to_dict() for s in self.submissions],
        }


@dataclass
class ReportEvent:
    """Payload delivered to reporting observers."""
    type: ReportEventType
    report: Optional[ReportRecord] = None
    error: Optional[str] = None


ReportObserver = Callable[[ReportEvent], None]
