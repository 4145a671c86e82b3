"""Reporting of suspicious URLs with observer notifications."""
import asyncio
import csv
import io
import json
import threading
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from quishguard.config import config, ReportingConfig
from quishguard.exceptions import ReportingError, ValidationError
from quishguard.models import (
    ReportEvent,
    ReportEventType,
    ReportObserver,
    ReportRecord,
    ReportStatus,
    Submission,
)
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)

CSV_HEADERS = ['Report ID', 'URL', 'Category', 'Timestamp', 'Status', 'Description']
RECENT_WINDOW = timedelta(hours=24)


class ReportingService:
    """
    Accepts URLs a user escalates, keeps them in history and tells observers.

    Observers receive a ``ReportEvent`` for each lifecycle change. An observer
    that raises is logged and skipped; the others are still notified.
    """

    def __init__(self, endpoints: Optional[ReportingConfig] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.endpoints = endpoints or config.reporting
        self._clock = clock
        self._observers: List[ReportObserver] = []
        self._history: List[ReportRecord] = []
        self._lock = threading.Lock()

    # Observers

    def subscribe(self, observer: ReportObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def unsubscribe(self, observer: ReportObserver) -> None:
        with self._lock:
            self._observers = [obs for obs in self._observers if obs != observer]

    def notify(self, event: ReportEvent) -> None:
        with self._lock:
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(event)
            except Exception as e:
                logger.error(f"Observer notification error: {str(e)}", exc_info=True)

    # Submission

    @staticmethod
    def generate_report_id() -> str:
        return f"report_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"

    async def report_url(self, url: str, category: str = "phishing", description: str = "") -> ReportRecord:
        """
        Report a suspicious URL.

        Args:
            url: URL to report
            category: Category (phishing, malware, ...)
            description: Free-text description of the threat

        Returns:
            The completed ReportRecord

        Raises:
            ReportingError: If a submission step failed; the record is kept
                in history with status ``error``
        """
        report = ReportRecord(
            report_id=self.generate_report_id(),
            url=url,
            category=category,
            description=description or "",
            timestamp=self._clock().isoformat()
        )
        self.notify(ReportEvent(ReportEventType.SUBMITTING, report=report))

        services = ['Internal Log', 'Manual Submission Info']
        results = await asyncio.gather(
            self.log_to_internal(report),
            self.prepare_manual_submissions(url),
            return_exceptions=True
        )

        failure: Optional[BaseException] = None
        for service, result in zip(services, results):
            if isinstance(result, BaseException):
                failure = failure or result
                report.submissions.append(Submission(service, "failed", str(result)))
            else:
                report.submissions.append(Submission(service, "success", result))

        if failure is not None:
            report.status = ReportStatus.ERROR
            self._append(report)
            logger.error(f"Reporting error for {report.report_id}: {str(failure)}")
            self.notify(ReportEvent(ReportEventType.ERROR, report=report, error=str(failure)))
            raise ReportingError(f"Report {report.report_id} failed: {str(failure)}") from failure

        report.status = ReportStatus.COMPLETED
        self._append(report)
        self.notify(ReportEvent(ReportEventType.COMPLETED, report=report))
        return report

    def _append(self, report: ReportRecord) -> None:
        with self._lock:
            self._history.append(report)

    async def log_to_internal(self, report: ReportRecord) -> Dict[str, Any]:
        logger.info(f"Report {report.report_id} logged: {report.category} {report.url[:50]}")
        return {
            "service": "Internal Log",
            "status": "success",
            "timestamp": self._clock().isoformat(),
            "report_id": report.report_id,
            "message": "Logged locally for tracking"
        }

    async def prepare_manual_submissions(self, url: str) -> Dict[str, Any]:
        return {
            "service": "Manual Submissions",
            "instructions": self.get_manual_reporting_instructions(url),
            "message": "Manual submission info prepared"
        }

    def get_manual_reporting_instructions(self, url: str) -> Dict[str, Any]:
        """Where and how to report ``url`` by hand, ordered by priority."""
        return {
            "url": url,
            "services": [
                {
                    "name": "Google Safe Browsing",
                    "url": self.endpoints.google_safe_browsing,
                    "instructions": [
                        "1. Visit the Google Safe Browsing report page",
                        "2. Enter the suspicious URL",
                        "3. Provide additional details about the threat",
                        "4. Submit the report"
                    ],
                    "priority": "high"
                },
                {
                    "name": "PhishTank",
                    "url": self.endpoints.phishtank,
                    "instructions": [
                        "1. Create a PhishTank account (if needed)",
                        "2. Visit the PhishTank submission page",
                        "3. Enter the phishing URL",
                        "4. Describe the phishing attempt",
                        "5. Submit for community verification"
                    ],
                    "priority": "high"
                },
                {
                    "name": "Anti-Phishing Working Group (APWG)",
                    "email": self.endpoints.apwg_email,
                    "instructions": [
                        f"1. Forward the phishing message to {self.endpoints.apwg_email}",
                        "2. Include all headers and original content",
                        "3. APWG will analyze and share with affected parties"
                    ],
                    "priority": "medium"
                },
                {
                    "name": "US-CERT",
                    "url": self.endpoints.cisa,
                    "instructions": [
                        "1. Visit the CISA reporting page",
                        "2. Fill out the incident report form",
                        "3. Provide details about the malicious URL",
                        "4. Submit to US-CERT for analysis"
                    ],
                    "priority": "medium"
                }
            ]
        }

    # History

    def get_history(self) -> List[ReportRecord]:
        with self._lock:
            return list(self._history)

    def get_report(self, report_id: str) -> Optional[ReportRecord]:
        with self._lock:
            return next((r for r in self._history if r.report_id == report_id), None)

    def clear_history(self) -> None:
        with self._lock:
            self._history = []
        self.notify(ReportEvent(ReportEventType.HISTORY_CLEARED))

    def export_reports(self, fmt: str = "json") -> str:
        """
        Export report history for sharing with authorities.

        Args:
            fmt: ``json`` or ``csv``

        Raises:
            ValidationError: Unsupported format
        """
        history = self.get_history()

        if fmt == "json":
            return json.dumps([r.to_dict() for r in history], indent=2)
        if fmt == "csv":
            return self._to_csv(history)
        raise ValidationError(f"Unsupported export format: {fmt}")

    @staticmethod
    def _to_csv(reports: List[ReportRecord]) -> str:
        if not reports:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for report in reports:
            writer.writerow([
                report.report_id,
                report.url,
                report.category,
                report.timestamp,
                report.status.value,
                (report.description or "").replace(",", ";")
            ])
        return buffer.getvalue().rstrip("\n")

    def get_statistics(self) -> Dict[str, Any]:
        history = self.get_history()
        cutoff = self._clock() - RECENT_WINDOW

        by_category: Dict[str, int] = {}
        by_status: Dict[str, int] = {}
        recent = 0
        for report in history:
            by_category[report.category] = by_category.get(report.category, 0) + 1
            by_status[report.status.value] = by_status.get(report.status.value, 0) + 1
            if datetime.fromisoformat(report.timestamp) > cutoff:
                recent += 1

        return {
            "total": len(history),
            "by_category": by_category,
            "by_status": by_status,
            "recent_count": recent
        }
