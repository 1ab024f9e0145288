"""Safety gate plugin: keyword scan for high-risk repair categories."""

import logging
from typing import Dict, Any, Tuple

from semantic_kernel.functions import kernel_function

from ..models.diagnosis import SafetyGateResult

logger = logging.getLogger(__name__)


# Ordered: the first matching keyword (in category order, then keyword order)
# is the one reported.
HIGH_RISK_CATEGORIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("GAS", ("gas", "natural gas", "propane", "gas line", "gas leak", "gas smell")),
    ("ELECTRICAL", (
        "electrical panel", "breaker box", "main panel", "service panel",
        "live wire", "electrical shock"
    )),
    ("STRUCTURAL", (
        "structural", "foundation", "load bearing", "beam", "joist",
        "support beam", "foundation crack"
    )),
    ("ROOF", ("roof", "roofing", "shingles", "flashing", "chimney", "roof height")),
    ("HAZMAT", ("asbestos", "mold", "black mold", "toxic", "hazardous material")),
    ("PLUMBING_MAJOR", ("sewer", "main water line", "septic", "sewer backup", "main drain")),
)


class SafetyGatePlugin:
    """
    Semantic Kernel plugin that forces a conservative outcome for dangerous repairs.

    Scans text case-insensitively for keywords in six categories: gas,
    electrical panel, structural, roofing, hazardous materials and major
    plumbing. Matching is plain substring containment, so "Gas-smell" and
    "GAS." both trigger the gate.
    """

    def __init__(self, categories: Tuple[Tuple[str, Tuple[str, ...]], ...] = HIGH_RISK_CATEGORIES):
        self.categories = categories
        logger.info("Initialized SafetyGatePlugin")

    def check(self, text: str) -> SafetyGateResult:
        """
        Scan text for the first high-risk keyword.

        Args:
            text: Description, optionally followed by the model's answer

        Returns:
            SafetyGateResult, triggered with a reason on the first match
        """
        lowered = (text or "").lower()

        for category, keywords in self.categories:
            for keyword in keywords:
                if keyword in lowered:
                    logger.info(f"Safety gate triggered: category={category}, keyword='{keyword}'")
                    return SafetyGateResult(
                        triggered=True,
                        reason=f"Detected high-risk category: {keyword}",
                        force_hire=True,
                        category=category
                    )

        return SafetyGateResult(triggered=False)

    @kernel_function(
        name="check_safety",
        description=(
            "Check repair text for high-risk categories (gas, electrical panel, structural, "
            "roofing, hazardous materials, major plumbing) that require a professional."
        )
    )
    def check_safety(self, text: str) -> Dict[str, Any]:
        return self.check(text).to_dict()
