"""Contractor matching backends."""

import logging
from abc import ABC, abstractmethod
from typing import List

from ..models.outreach import Contractor
from ..utils.logging import mask_zip

logger = logging.getLogger(__name__)


class ContractorMatcher(ABC):
    """Finds contractors that serve a ZIP code."""

    @abstractmethod
    def match(self, zip_code: str) -> List[Contractor]:
        """
        Find contractors near a ZIP code.

        Args:
            zip_code: 5-digit US ZIP code

        Returns:
            Contractors, closest first
        """


class MockContractorMatcher(ContractorMatcher):
    """
    Returns the same three sample contractors for every ZIP code.

    Stands in for a contractor directory integration.
    """

    def __init__(self):
        self.contractors = [
            Contractor(
                name="ABC Home Repair",
                rating=4.8,
                review_count=234,
                years_in_business=12,
                specialties=["Plumbing", "Electrical", "General Repair"],
                typical_response_time="2-4 hours",
                distance_miles=3.2
            ),
            Contractor(
                name="Quality Fix Pros",
                rating=4.9,
                review_count=156,
                years_in_business=8,
                specialties=["Plumbing", "HVAC", "Handyman"],
                typical_response_time="1-3 hours",
                distance_miles=5.7
            ),
            Contractor(
                name="Reliable Home Services",
                rating=4.7,
                review_count=312,
                years_in_business=15,
                specialties=["General Contractor", "Remodeling", "Repair"],
                typical_response_time="4-8 hours",
                distance_miles=7.1
            ),
        ]
        logger.info("Initialized MockContractorMatcher")

    def match(self, zip_code: str) -> List[Contractor]:
        logger.debug(f"Matching contractors for ZIP {mask_zip(zip_code)}")
        return sorted(self.contractors, key=lambda contractor: contractor.distance_miles)
