"""Repair outcome storage backends."""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.outreach import OutcomeRecord, SuccessMetrics

logger = logging.getLogger(__name__)


class OutcomeStore(ABC):
    """Records repair outcomes and reports community success metrics."""

    @abstractmethod
    def save(self, record: OutcomeRecord) -> None:
        """Persist an outcome record."""

    @abstractmethod
    def metrics_for(self, issue_type: str, outcome: Optional[str] = None) -> SuccessMetrics:
        """
        Success metrics for a repair type.

        Args:
            issue_type: Repair type (or diagnosis identifier) to report on
            outcome: Outcome just submitted, if any

        Returns:
            SuccessMetrics
        """


class InMemoryOutcomeStore(OutcomeStore):
    """
    Keeps records in process memory and reports fixed sample metrics.

    Stands in for a database-backed store; records are lost on restart.
    """

    def __init__(self):
        self.records: List[OutcomeRecord] = []
        logger.info("Initialized InMemoryOutcomeStore")

    def save(self, record: OutcomeRecord) -> None:
        self.records.append(record)
        logger.debug(f"Stored outcome {record.outcome_id} ({len(self.records)} total)")

    def metrics_for(self, issue_type: str, outcome: Optional[str] = None) -> SuccessMetrics:
        return SuccessMetrics(
            total_attempts=847,
            success_rate=92 if outcome == "success" else 89,
            avg_time_minutes=45,
            avg_cost=38.50,
            diy_recommendation_rate=88,
            common_tips=[
                "Have extra towels ready",
                "Take photos before disassembly",
                "Label parts as you remove them"
            ]
        )
