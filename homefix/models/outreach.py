"""Contractor quote and outcome feedback data models."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any


@dataclass
class Contractor:
    """
    A contractor that can be asked for a quote.

    Attributes:
        name: Business name
        rating: Average review rating (0-5)
        review_count: Number of reviews
        years_in_business: Years operating
        specialties: Trades the contractor covers
        typical_response_time: Typical response window (e.g., "2-4 hours")
        distance_miles: Distance from the requested ZIP code
        licensed: Whether the contractor holds a license
        insured: Whether the contractor carries insurance
    """
    name: str
    rating: float
    review_count: int
    years_in_business: int
    specialties: List[str]
    typical_response_time: str
    distance_miles: float
    licensed: bool = True
    insured: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SuccessMetrics:
    """Community statistics for a repair type."""
    total_attempts: int
    success_rate: int
    avg_time_minutes: int
    avg_cost: float
    diy_recommendation_rate: int
    common_tips: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OutcomeRecord:
    """
    User-reported result of a repair attempt.

    After photos are counted, never stored.
    """
    outcome_id: str
    diagnosis_id: str
    outcome: str  # "success" | "partial" | "failed" | "hired_pro"
    submitted_at: str
    actual_time_minutes: Optional[float] = None
    actual_cost: Optional[float] = None
    difficulty_rating: Optional[int] = None
    after_photo_count: int = 0
    tips: Optional[str] = None
    would_recommend_diy: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
