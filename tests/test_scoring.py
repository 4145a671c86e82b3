import random

import pytest

from quishguard.core.scoring import (
    SEVERITY,
    apply_information_floor,
    calculate_risk_score,
    determine_overall_safety,
    generate_recommendations,
    outcome_weight,
)
from quishguard.exceptions import AggregationFailure
from quishguard.models import CheckName, CheckOutcome, RiskLevel, SafetyLevel


def outcome(name, risk, **kwargs):
    return CheckOutcome(name=name, risk=risk, **kwargs)


def test_outcome_weights():
    assert outcome_weight(outcome(CheckName.SSL, RiskLevel.HIGH)) == 30
    assert outcome_weight(outcome(CheckName.THREAT_DATABASE, RiskLevel.LOW, is_safe=False)) == 30
    assert outcome_weight(outcome(CheckName.SSL, RiskLevel.MEDIUM)) == 15
    assert outcome_weight(outcome(CheckName.TYPOSQUATTING, RiskLevel.LOW, suspicious=True)) == 15
    assert outcome_weight(outcome(CheckName.PHISHING_PATTERN, RiskLevel.LOW, warnings=["x"])) == 5
    assert outcome_weight(outcome(CheckName.PHISHING_PATTERN, RiskLevel.LOW)) == 0
    assert outcome_weight(outcome(CheckName.THREAT_DATABASE, RiskLevel.UNKNOWN)) == 0
    assert outcome_weight(CheckOutcome.failed(CheckName.SSL, "boom")) == 0


def test_all_failed_scores_zero():
    checks = {name: CheckOutcome.failed(name, "down") for name in CheckName}
    assert calculate_risk_score(checks) == 0


def test_score_is_clamped_to_100():
    checks = {name: outcome(name, RiskLevel.HIGH) for name in CheckName}
    assert calculate_risk_score(checks) == 100


def test_score_is_order_independent():
    outcomes = [
        outcome(CheckName.SSL, RiskLevel.HIGH),
        outcome(CheckName.PHISHING_PATTERN, RiskLevel.MEDIUM),
        outcome(CheckName.URL_EXPANSION, RiskLevel.LOW, warnings=["short"]),
        CheckOutcome.failed(CheckName.TYPOSQUATTING, "down"),
    ]
    expected = calculate_risk_score({o.name: o for o in outcomes})
    for _ in range(10):
        random.shuffle(outcomes)
        assert calculate_risk_score({o.name: o for o in outcomes}) == expected
    assert expected == 50


def test_band_boundaries():
    assert determine_overall_safety(0) is SafetyLevel.SAFE
    assert determine_overall_safety(9) is SafetyLevel.SAFE
    assert determine_overall_safety(10) is SafetyLevel.CAUTION
    assert determine_overall_safety(24) is SafetyLevel.CAUTION
    assert determine_overall_safety(25) is SafetyLevel.SUSPICIOUS
    assert determine_overall_safety(49) is SafetyLevel.SUSPICIOUS
    assert determine_overall_safety(50) is SafetyLevel.DANGEROUS
    assert determine_overall_safety(100) is SafetyLevel.DANGEROUS


def test_band_is_monotonic():
    severities = [SEVERITY[determine_overall_safety(score)] for score in range(101)]
    assert severities == sorted(severities)


def test_information_floor_when_nothing_is_known():
    checks = {name: CheckOutcome.failed(name, "down") for name in CheckName}
    checks[CheckName.THREAT_DATABASE] = outcome(CheckName.THREAT_DATABASE, RiskLevel.UNKNOWN, requires_setup=True)

    assert apply_information_floor(SafetyLevel.SAFE, checks) is SafetyLevel.CAUTION
    assert apply_information_floor(SafetyLevel.DANGEROUS, checks) is SafetyLevel.DANGEROUS


def test_information_floor_not_applied_with_verdict():
    checks = {CheckName.SSL: outcome(CheckName.SSL, RiskLevel.LOW)}
    assert apply_information_floor(SafetyLevel.SAFE, checks) is SafetyLevel.SAFE


def test_recommendations_seeded_by_band_then_call_outs():
    checks = {
        CheckName.DOMAIN_REPUTATION: outcome(CheckName.DOMAIN_REPUTATION, RiskLevel.HIGH, data={"age_in_days": 3}),
        CheckName.TYPOSQUATTING: outcome(
            CheckName.TYPOSQUATTING, RiskLevel.MEDIUM,
            data={"is_typosquat": True, "suspected_target": "paypal.com"}
        ),
        CheckName.PHISHING_PATTERN: outcome(CheckName.PHISHING_PATTERN, RiskLevel.HIGH, data={"is_phishing": True}),
    }

    recommendations = generate_recommendations(checks, SafetyLevel.DANGEROUS)

    assert recommendations == [
        "Do not visit this URL",
        "Report this URL to authorities",
        "Domain is very new (< 30 days)",
        "Possible impersonation of paypal.com",
        "Confirmed phishing patterns detected",
    ]


def test_recommendations_ignore_failed_checks():
    checks = {CheckName.TYPOSQUATTING: CheckOutcome.failed(CheckName.TYPOSQUATTING, "down")}
    assert generate_recommendations(checks, SafetyLevel.SAFE) == []


def test_misfiled_outcome_fails_aggregation():
    checks = {CheckName.SSL: outcome(CheckName.TYPOSQUATTING, RiskLevel.LOW)}
    with pytest.raises(AggregationFailure):
        calculate_risk_score(checks)
