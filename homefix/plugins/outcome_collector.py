"""Repair outcome feedback plugin for Semantic Kernel."""

import logging
import time
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from semantic_kernel.functions import kernel_function

from ..models.outreach import OutcomeRecord, SuccessMetrics
from ..storage.outcomes import OutcomeStore
from ..utils.errors import ValidationError

logger = logging.getLogger(__name__)


OUTCOMES = ("success", "partial", "failed", "hired_pro")

THANK_YOU_MESSAGES = {
    "success": "Awesome work! Thanks for sharing your success.",
    "partial": "Thanks for the honest feedback! Every repair is a learning experience.",
    "failed": "We appreciate you sharing this. Not all repairs go as planned, and that is okay.",
    "hired_pro": "Smart decision! Knowing when to call a pro is an important skill.",
}

NEXT_STEPS = {
    "success": [
        "Share before/after photos to inspire others (optional)",
        "Save your diagnosis for future reference",
        "Rate your experience to help improve the app",
        "Explore other common home repair issues"
    ],
    "partial": [
        "Consider getting a quote for the remaining work",
        "Share what worked and what did not",
        "Keep your repair notes for future reference",
        "Ask in the community for additional tips"
    ],
    "failed": [
        "No worries - we can help you find a pro",
        "Get 3 quotes from local contractors",
        "Review what went wrong to learn for next time",
        "Save your diagnosis for the contractor"
    ],
    "hired_pro": [
        "Use your diagnosis notes when talking to contractors",
        "Get at least 3 quotes before deciding",
        "Verify contractor licenses and insurance",
        "Share contractor experience to help others"
    ],
}

TIP_IMPACT = "Your tip will help others attempting this repair!"


def community_insight(outcome: str, metrics: SuccessMetrics) -> str:
    """Message putting the user's outcome next to the community numbers."""
    if outcome == "success":
        return (
            f"You're one of {metrics.success_rate}% who completed this DIY repair "
            f"successfully. The community appreciates your feedback!"
        )
    if outcome == "partial":
        return (
            f"{metrics.success_rate}% of users complete this repair. Your feedback "
            f"helps us improve guidance for future users."
        )
    if outcome == "failed":
        return (
            "Your feedback will help us improve our difficulty assessments and "
            "provide better guidance to future users."
        )
    return (
        f"{100 - metrics.diy_recommendation_rate}% of users choose to hire professionals "
        f"for this type of repair. You made the right call for your situation."
    )


class OutcomeCollectorPlugin:
    """Semantic Kernel plugin that records how a repair turned out."""

    def __init__(self, outcome_store: OutcomeStore):
        self.store = outcome_store
        logger.info("Initialized OutcomeCollectorPlugin")

    @kernel_function(
        name="submit_outcome",
        description=(
            "Record the outcome of a repair attempt (success, partial, failed or "
            "hired_pro) and return community insight."
        )
    )
    async def submit_outcome(
        self,
        diagnosis_id: str,
        outcome: str,
        actual_time_minutes: Optional[float] = None,
        actual_cost: Optional[float] = None,
        difficulty_rating: Optional[int] = None,
        after_photos: Optional[List[Any]] = None,
        tips: Optional[str] = None,
        would_recommend_diy: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Record an outcome.

        Args:
            diagnosis_id: Identifier of the diagnosis being reported on
            outcome: One of OUTCOMES
            actual_time_minutes: Time the repair took
            actual_cost: Money spent
            difficulty_rating: Perceived difficulty, 1-5
            after_photos: Photos of the finished repair (counted, not stored)
            tips: Advice for other users
            would_recommend_diy: Whether the user recommends doing it yourself

        Returns:
            Acknowledgement with outcome_id, messages, success_metrics and next_steps

        Raises:
            ValidationError: If outcome or difficulty_rating is out of range
        """
        if outcome not in OUTCOMES:
            raise ValidationError.invalid(
                f"Outcome must be one of: {', '.join(OUTCOMES)}",
                errors=[{"field": "outcome", "message": "invalid outcome type"}]
            )
        if difficulty_rating is not None and not 1 <= difficulty_rating <= 5:
            raise ValidationError.invalid(
                "Difficulty rating must be between 1 and 5",
                errors=[{"field": "difficulty_rating", "message": "out of range"}]
            )

        logger.info(f"Processing outcome submission: diagnosis={diagnosis_id[:8]}..., outcome={outcome}")

        record = OutcomeRecord(
            outcome_id=f"outcome_{int(time.time() * 1000)}",
            diagnosis_id=diagnosis_id,
            outcome=outcome,
            submitted_at=datetime.now(timezone.utc).isoformat(),
            actual_time_minutes=actual_time_minutes,
            actual_cost=actual_cost,
            difficulty_rating=difficulty_rating,
            after_photo_count=len(after_photos or []),
            tips=tips or None,
            would_recommend_diy=would_recommend_diy
        )
        self.store.save(record)

        metrics = self.store.metrics_for(diagnosis_id, outcome)

        result = {
            "success": True,
            "outcome_id": record.outcome_id,
            "thank_you_message": THANK_YOU_MESSAGES[outcome],
            "community_insight": community_insight(outcome, metrics),
            "success_metrics": metrics.to_dict(),
            "next_steps": list(NEXT_STEPS[outcome])
        }
        if tips:
            result["tip_shared"] = True
            result["tip_impact"] = TIP_IMPACT

        logger.info(f"Outcome {record.outcome_id} recorded")
        return result
