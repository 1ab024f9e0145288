"""Contractor quote request plugin for Semantic Kernel."""

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Any

from semantic_kernel.functions import kernel_function

from ..storage.contractors import ContractorMatcher
from ..utils.errors import ConfirmationRequired, ValidationError
from ..utils.logging import mask_zip

logger = logging.getLogger(__name__)


ZIP_PATTERN = re.compile(r'^[0-9]{5}$')

NEXT_STEPS = [
    "Contractors will review your request within 24 hours",
    "You'll receive 3-5 quotes via email",
    "Compare quotes, reviews, and availability",
    "Schedule consultations with top candidates"
]
PRIVACY_NOTE = "Your contact info is shared only with contractors you approve."


class QuoteRequesterPlugin:
    """
    Semantic Kernel plugin that prepares contractor quote requests.

    Nothing is sent on the user's behalf without explicit confirmation.
    """

    def __init__(self, contractor_matcher: ContractorMatcher):
        self.matcher = contractor_matcher
        logger.info("Initialized QuoteRequesterPlugin")

    @kernel_function(
        name="request_quotes",
        description=(
            "Request quotes from local licensed contractors. Requires the user's "
            "explicit confirmation before any contractor is contacted."
        )
    )
    async def request_quotes(self, zip_code: str, scope: str, confirmed: bool = False) -> Dict[str, Any]:
        """
        Prepare a quote request and list matching contractors.

        Args:
            zip_code: 5-digit US ZIP code
            scope: Description of the work to quote
            confirmed: Whether the user agreed to contractor outreach

        Returns:
            Dictionary with quote_request, contractors, next_steps and privacy_note

        Raises:
            ConfirmationRequired: If confirmed is not True
            ValidationError: If the ZIP code is not 5 digits
        """
        if confirmed is not True:
            logger.info("Quote request rejected: user confirmation missing")
            raise ConfirmationRequired.for_quotes()

        if not isinstance(zip_code, str) or not ZIP_PATTERN.match(zip_code):
            raise ValidationError.invalid(
                "Invalid ZIP code. Please provide a valid 5-digit ZIP code.",
                errors=[{"field": "zip", "message": "must be 5 digits"}]
            )

        logger.info(f"Preparing quote request for ZIP {mask_zip(zip_code)}, scope length={len(scope)}")

        contractors = self.matcher.match(zip_code)

        return {
            "success": True,
            "quote_request": {
                "zip_code": zip_code,
                "work_scope": scope,
                "requested_at": datetime.now(timezone.utc).isoformat(),
                "status": "pending",
                "message": "Quote request prepared. Contractors are contacted once the request is submitted."
            },
            "contractors": [contractor.to_dict() for contractor in contractors],
            "next_steps": list(NEXT_STEPS),
            "privacy_note": PRIVACY_NOTE
        }
