"""Weighted URL pattern scan for common phishing tells."""
from quishguard.models import CheckName, CheckOutcome, RiskLevel
from quishguard.strategies.base import BaseStrategy
from quishguard.utils.similarity import COUNT_THRESHOLD, PatternRule, score_patterns

PHISHING_PATTERNS = [
    PatternRule.compile(
        r'password|passwd|login|signin|authenticate|auth|account|verify|confirm|update',
        'Contains sensitive action terms', 15),
    PatternRule.compile(
        r'\.(exe|dll|bat|sh|msi|scr|vbs|ps1|apk)(\?|$)',
        'Links to executable file', 30),
    PatternRule.compile(
        r'[?&][^=]+=https?(%3A|:)',
        'Contains URL redirection pattern', 20),
    PatternRule.compile(
        r'@',
        'Contains @ symbol (potential URL trickery)', 25),
    PatternRule.compile(
        r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}',
        'Uses raw IP address instead of domain', 20),
    PatternRule.compile(
        r'free|offer|prize|won|winner|discount|urgent|act.now|limited.time',
        'Contains marketing bait terms', 10),
    PatternRule.compile(
        r'credit|wallet|ssn|social.security|bank|payment',
        'Contains financial/sensitive terms', 15),
    PatternRule.compile(
        r'secure|protect|restore|unlock|suspended|unusual.activity',
        'Contains urgency/fear tactics', 12),
    PatternRule.compile(
        r'[-_]',
        'Excessive use of hyphens or underscores', 5, mode=COUNT_THRESHOLD, threshold=3),
]

PHISHING_THRESHOLD = 40
MEDIUM_THRESHOLD = 20


class PhishingPatternStrategy(BaseStrategy):
    """Scores the full URL against the phishing pattern table."""

    name = CheckName.PHISHING_PATTERN

    async def check(self, url: str) -> CheckOutcome:
        result = score_patterns(url, PHISHING_PATTERNS)
        is_phishing = result.score >= PHISHING_THRESHOLD

        if result.score >= PHISHING_THRESHOLD:
            risk = RiskLevel.HIGH
        elif result.score >= MEDIUM_THRESHOLD:
            risk = RiskLevel.MEDIUM
        else:
            risk = RiskLevel.LOW

        message = (
            f"{len(result.matches)} phishing indicators found" if result.matches
            else "No obvious phishing patterns detected"
        )

        return self._create_outcome(
            risk,
            message=message,
            details=result.matches,
            data={
                "is_phishing": is_phishing,
                "suspicion_score": result.score,
                "flags": result.matches
            },
            warnings=result.matches if risk is RiskLevel.LOW else []
        )
