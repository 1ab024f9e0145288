"""Diagnosis plugin for Semantic Kernel using a vision-language model."""

import logging
import re
import time
from typing import List, Optional, Sequence, Tuple

from semantic_kernel.functions import kernel_function

from ..models.diagnosis import Diagnosis, RiskLevel, Recommendation, SafetyGateResult
from ..models.photo import Photo
from ..utils.bedrock_client import BedrockClient
from ..utils.config import GenerationConfig
from ..utils.validation import sanitize_input, MAX_INPUT_CHARS
from .safety_gate import SafetyGatePlugin

logger = logging.getLogger(__name__)


DIAGNOSIS_SYSTEM_PROMPT = """You are a home repair expert. Analyze the photos and description to:
1. Identify the exact issue
2. Assess risk level (low/medium/high/critical)
3. Determine if DIY is safe or if professional help is required
4. Provide confidence score (0-100%)
5. List key safety concerns

CRITICAL SAFETY RULES:
- Gas/electrical panel/structural/roof height/hazardous material/major plumbing issues → FORCE "Hire a Professional"
- High-risk issues → Disable all DIY options
- Be conservative with safety assessments

Start your answer with a short name for the issue on its own line."""

# Evaluated top to bottom, first match wins. A triggered safety gate
# short-circuits to the first rule.
RISK_RULES: Tuple[Tuple[RiskLevel, bool, Tuple[str, ...]], ...] = (
    (RiskLevel.CRITICAL, True, ("critical", "dangerous")),
    (RiskLevel.HIGH, False, ("high risk", "professional required")),
    (RiskLevel.MEDIUM, False, ("medium risk", "caution")),
)
DEFAULT_RISK = RiskLevel.LOW

CONCERN_KEYWORDS = ("safety", "danger", "risk", "warning")
CONFIDENCE_PATTERN = re.compile(r'(\d{1,3})%')

DEFAULT_CONFIDENCE = 75
MAX_ISSUE_TYPE_CHARS = 100
MAX_SUMMARY_CHARS = 300
MAX_REPLY_CONCERNS = 3


class DiagnosisExtractorPlugin:
    """
    Semantic Kernel plugin that turns photos and a description into a Diagnosis.

    Sends one request to the vision model, then parses its free-text answer
    with a fixed set of substring and regex rules. The safety gate runs over
    the description and the answer and overrides the model's own verdict.
    """

    def __init__(
        self,
        bedrock_client: BedrockClient,
        safety_gate: SafetyGatePlugin,
        generation: Optional[GenerationConfig] = None,
        max_input_chars: int = MAX_INPUT_CHARS
    ):
        """
        Initialize diagnosis plugin.

        Args:
            bedrock_client: Configured BedrockClient instance
            safety_gate: Safety gate applied to every diagnosis
            generation: Sampling settings for the diagnosis call
            max_input_chars: Cap applied to the sanitized description
        """
        self.bedrock = bedrock_client
        self.safety_gate = safety_gate
        self.generation = generation or GenerationConfig(temperature=0.3, max_tokens=1000)
        self.max_input_chars = max_input_chars
        logger.info("Initialized DiagnosisExtractorPlugin")

    @kernel_function(
        name="diagnose_issue",
        description=(
            "Diagnose a home repair issue from photos and a description. "
            "Returns issue type, risk level, DIY/hire recommendation, confidence "
            "and safety concerns."
        )
    )
    async def diagnose(
        self,
        description: str,
        photos: Sequence[Photo]
    ) -> Tuple[Diagnosis, str]:
        """
        Diagnose an issue.

        Args:
            description: User's description of the issue
            photos: Normalized photos

        Returns:
            Tuple of (Diagnosis, raw model answer)

        Raises:
            UpstreamCallError: If the model call fails (no retry)
        """
        start_time = time.time()
        clean_description = sanitize_input(description, self.max_input_chars)
        logger.info(f"Starting diagnosis with {len(photos)} photo(s)")

        reply = await self.bedrock.converse(
            system_prompt=DIAGNOSIS_SYSTEM_PROMPT,
            text=self._build_user_text(clean_description, photos),
            images=photos,
            temperature=self.generation.temperature,
            max_tokens=self.generation.max_tokens,
            operation="diagnosis"
        )

        gate = self.safety_gate.check(f"{clean_description}\n{reply}")
        diagnosis = self.extract(reply, gate)

        logger.info(
            f"Diagnosis complete in {time.time() - start_time:.2f}s: "
            f"risk={diagnosis.risk_level.value}, "
            f"recommendation={diagnosis.recommendation.value}, "
            f"confidence={diagnosis.confidence}"
        )
        return diagnosis, reply

    def extract(self, reply: str, gate: SafetyGateResult) -> Diagnosis:
        """
        Parse the model's free-text answer into a Diagnosis.

        Args:
            reply: Model answer
            gate: Safety gate result for description + answer

        Returns:
            Diagnosis with safety overrides applied
        """
        reply = reply or ""
        risk_level = classify_risk(reply, gate)

        concerns: List[str] = [gate.reason] if gate.triggered and gate.reason else []
        concerns.extend(_concern_lines(reply))

        force_hire = gate.triggered or risk_level.requires_professional

        return Diagnosis(
            issue_type=_issue_type(reply),
            risk_level=risk_level,
            recommendation=Recommendation.HIRE if force_hire else Recommendation.DIY,
            confidence=_confidence(reply),
            safety_concerns=tuple(concerns),
            summary=reply[:MAX_SUMMARY_CHARS],
            diy_disabled=gate.triggered or risk_level == RiskLevel.CRITICAL,
            safety_gate_reason=gate.reason if gate.triggered else None
        )

    def _build_user_text(self, description: str, photos: Sequence[Photo]) -> str:
        text = f"Description: {description}\n\nAnalyze these photos and provide a diagnosis."

        marks = [
            f"Photo {index}: {annotation.label or 'Marked area'} "
            f"at position ({round(annotation.x)}, {round(annotation.y)})"
            for index, photo in enumerate(photos, 1)
            for annotation in photo.annotations
        ]
        if marks:
            text += "\n\nIMPORTANT: User has marked specific problem areas:\n" + "\n".join(marks)

        return text


def classify_risk(reply: str, gate: SafetyGateResult) -> RiskLevel:
    """
    Apply RISK_RULES to a model answer.

    Args:
        reply: Model answer
        gate: Safety gate result

    Returns:
        First matching RiskLevel, DEFAULT_RISK if none match
    """
    lowered = reply.lower()
    for level, gate_forces, keywords in RISK_RULES:
        if (gate_forces and gate.triggered) or any(keyword in lowered for keyword in keywords):
            return level
    return DEFAULT_RISK


def _issue_type(reply: str) -> str:
    for line in reply.splitlines():
        if line.strip():
            return line[:MAX_ISSUE_TYPE_CHARS]
    return "Unknown issue"


def _confidence(reply: str) -> int:
    match = CONFIDENCE_PATTERN.search(reply)
    if not match:
        return DEFAULT_CONFIDENCE
    return min(int(match.group(1)), 100)


def _concern_lines(reply: str) -> List[str]:
    lines = [line for line in reply.splitlines() if any(keyword in line.lower() for keyword in CONCERN_KEYWORDS)]
    return lines[:MAX_REPLY_CONCERNS]
