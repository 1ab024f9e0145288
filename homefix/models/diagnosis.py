"""Diagnosis data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, Tuple


class RiskLevel(str, Enum):
    """Ordinal safety classification, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def requires_professional(self) -> bool:
        return self in (RiskLevel.HIGH, RiskLevel.CRITICAL)


class Recommendation(str, Enum):
    DIY = "diy"
    HIRE = "hire"


@dataclass(frozen=True)
class SafetyGateResult:
    """
    Outcome of scanning text for high-risk repair categories.

    Attributes:
        triggered: Whether any high-risk keyword was found
        reason: "Detected high-risk category: <keyword>" when triggered
        force_hire: Whether the diagnosis must recommend a professional
        category: Name of the matched category (e.g., "GAS")
    """
    triggered: bool
    reason: Optional[str] = None
    force_hire: bool = False
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "triggered": self.triggered,
            "reason": self.reason,
            "force_hire": self.force_hire,
        }


@dataclass(frozen=True)
class Diagnosis:
    """
    Structured diagnosis of a home repair issue.

    Attributes:
        issue_type: Short name of the identified issue (max 100 chars)
        risk_level: Safety classification
        recommendation: DIY or hire a professional
        confidence: Confidence score, 0-100
        safety_concerns: Up to 4 concerns, safety gate reason first when triggered
        summary: First 300 characters of the model's answer
        diy_disabled: Whether DIY options must be hidden from the user
        safety_gate_reason: Reason reported by the safety gate, if triggered
    """
    issue_type: str
    risk_level: RiskLevel
    recommendation: Recommendation
    confidence: int
    safety_concerns: Tuple[str, ...] = ()
    summary: str = ""
    diy_disabled: bool = False
    safety_gate_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issue_type": self.issue_type,
            "risk_level": self.risk_level.value,
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "safety_concerns": list(self.safety_concerns),
            "summary": self.summary,
            "diy_disabled": self.diy_disabled,
            "safety_gate": self.safety_gate_reason,
        }
