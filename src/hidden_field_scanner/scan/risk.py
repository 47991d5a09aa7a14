"""Turns a finding count into a risk level and recommendations."""

from __future__ import annotations

from ..core.models import RiskAssessment, RiskLevel

MEDIUM_THRESHOLD = 3
HIGH_THRESHOLD = 7

REVIEW_RECOMMENDATION = "Review hidden fields to ensure they are not used for malicious autofill."
BLOCK_RECOMMENDATION = "Block autofill on hidden or suspicious fields."
CLEAN_RECOMMENDATION = "No suspicious hidden fields detected."
FAILED_RECOMMENDATION = "Scan failed. Please retry or check the page manually."


def risk_level_for(count: int) -> RiskLevel:
    if count >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if count >= MEDIUM_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def assess_risk(count: int) -> RiskAssessment:
    if count > 0:
        recommendations = (REVIEW_RECOMMENDATION, BLOCK_RECOMMENDATION)
    else:
        recommendations = (CLEAN_RECOMMENDATION,)
    return RiskAssessment(level=risk_level_for(count), recommendations=recommendations)


def failed_assessment() -> RiskAssessment:
    return RiskAssessment(level=RiskLevel.LOW, recommendations=(FAILED_RECOMMENDATION,))
