"""Risk aggregation over settled check outcomes."""
from typing import Dict, List, Mapping

from quishguard.exceptions import AggregationFailure
from quishguard.models import CheckName, CheckOutcome, RiskLevel, SafetyLevel
from quishguard.utils.domains import get_hostname

HIGH_WEIGHT = 30
MEDIUM_WEIGHT = 15
WARNING_WEIGHT = 5

# (minimum score, band), highest first
SAFETY_THRESHOLDS = [
    (50, SafetyLevel.DANGEROUS),
    (25, SafetyLevel.SUSPICIOUS),
    (10, SafetyLevel.CAUTION),
]

SEVERITY = {
    SafetyLevel.SAFE: 0,
    SafetyLevel.CAUTION: 1,
    SafetyLevel.SUSPICIOUS: 2,
    SafetyLevel.DANGEROUS: 3,
}

BAND_RECOMMENDATIONS: Dict[SafetyLevel, List[str]] = {
    SafetyLevel.DANGEROUS: ["Do not visit this URL", "Report this URL to authorities"],
    SafetyLevel.SUSPICIOUS: ["Exercise extreme caution", "Verify the sender or source"],
    SafetyLevel.CAUTION: ["Be cautious when proceeding"],
    SafetyLevel.SAFE: [],
    SafetyLevel.UNKNOWN: ["Safety could not be determined - do not enter sensitive information"],
}


def outcome_weight(outcome: CheckOutcome) -> int:
    """Score contribution of one outcome; failed outcomes are neutral."""
    if not outcome.success:
        return 0
    if outcome.is_safe is False or outcome.risk is RiskLevel.HIGH:
        return HIGH_WEIGHT
    if outcome.risk is RiskLevel.MEDIUM or outcome.suspicious:
        return MEDIUM_WEIGHT
    if outcome.risk is RiskLevel.LOW and outcome.warnings:
        return WARNING_WEIGHT
    return 0


def calculate_risk_score(checks: Mapping[CheckName, CheckOutcome]) -> int:
    """
    Order-independent sum of outcome weights, clamped to [0, 100].

    Raises:
        AggregationFailure: If an outcome is filed under another check's name
    """
    for name, outcome in checks.items():
        if outcome.name is not name:
            raise AggregationFailure(f"Outcome for {outcome.name.value} filed under {name.value}")
    return min(100, sum(outcome_weight(outcome) for outcome in checks.values()))


def determine_overall_safety(risk_score: int) -> SafetyLevel:
    for minimum, band in SAFETY_THRESHOLDS:
        if risk_score >= minimum:
            return band
    return SafetyLevel.SAFE


def apply_information_floor(band: SafetyLevel, checks: Mapping[CheckName, CheckOutcome]) -> SafetyLevel:
    """A report with no definite verdict from any check is never rendered as safe."""
    if any(outcome.has_verdict for outcome in checks.values()):
        return band
    if SEVERITY.get(band, 0) < SEVERITY[SafetyLevel.CAUTION]:
        return SafetyLevel.CAUTION
    return band


def generate_recommendations(checks: Mapping[CheckName, CheckOutcome], band: SafetyLevel) -> List[str]:
    """Band-level advice followed by call-outs for checks that fired."""
    recommendations = list(BAND_RECOMMENDATIONS.get(band, []))

    def fired(name: CheckName) -> Dict:
        outcome = checks.get(name)
        if outcome is None or not outcome.success:
            return {}
        return outcome.data

    expansion = fired(CheckName.URL_EXPANSION)
    if expansion.get("is_shortened") and expansion.get("expanded") != expansion.get("original"):
        recommendations.append(f"Shortened link leads to {get_hostname(expansion['expanded'])}")

    reputation = fired(CheckName.DOMAIN_REPUTATION)
    age = reputation.get("age_in_days")
    if age is not None and age < 30:
        recommendations.append("Domain is very new (< 30 days)")

    ssl = checks.get(CheckName.SSL)
    if ssl is not None and ssl.success:
        if ssl.data.get("has_ssl") is False:
            recommendations.append("Connection is not encrypted - never enter sensitive information")
        elif ssl.warnings:
            recommendations.append("SSL certificate has warnings")

    typosquatting = fired(CheckName.TYPOSQUATTING)
    if typosquatting.get("is_typosquat"):
        recommendations.append(f"Possible impersonation of {typosquatting.get('suspected_target')}")

    if fired(CheckName.PHISHING_PATTERN).get("is_phishing"):
        recommendations.append("Confirmed phishing patterns detected")

    threat = checks.get(CheckName.THREAT_DATABASE)
    if threat is not None and threat.success and threat.is_safe is False:
        recommendations.append("URL is listed in a threat database")

    return recommendations
