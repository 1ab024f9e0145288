"""Repair plan plugin for Semantic Kernel."""

import logging
from typing import List, Dict, Any, Optional, Union

from semantic_kernel.functions import kernel_function

from ..models.diagnosis import RiskLevel
from ..models.plan import Plan, PlanStep
from ..utils.bedrock_client import BedrockClient
from ..utils.config import GenerationConfig
from ..utils.errors import UpstreamParseError, ValidationError
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)


PLAN_SYSTEM_PROMPT = """You are a home repair expert creating a step-by-step repair plan.
Return ONLY a JSON object with this structure:
{
  "steps": [
    {
      "step_number": 1,
      "title": "...",
      "description": "...",
      "duration_minutes": 10,
      "safety_note": "...",
      "tools_needed": ["..."],
      "parts_needed": ["..."]
    }
  ],
  "total_time_minutes": 60,
  "difficulty": "Beginner|Intermediate|Advanced"
}

Provide 5-10 clear, actionable steps numbered from 1. Put safety first."""

DIY_DIFFICULTIES = ("Beginner", "Intermediate", "Advanced")
DEFAULT_DIFFICULTY = "Intermediate"
PROFESSIONAL_DIFFICULTY = "Professional Required"


def professional_plan(issue_type: str, risk_level: RiskLevel) -> Plan:
    """
    Fixed plan returned for high and critical risk issues.

    Args:
        issue_type: Issue the plan is for
        risk_level: HIGH or CRITICAL

    Returns:
        Two-step "do not DIY, contact a professional" plan
    """
    steps = [
        PlanStep(
            step_number=1,
            title="Do Not Attempt DIY Repair",
            description=(
                "This repair involves significant safety risks and should only be "
                "performed by licensed professionals."
            ),
            duration_minutes=0,
            safety_note=(
                "CRITICAL: This is a high-risk repair. Attempting DIY could result in "
                "injury, property damage, or code violations."
            )
        ),
        PlanStep(
            step_number=2,
            title="Contact Licensed Professionals",
            description=(
                "Get multiple quotes from certified contractors who are licensed and "
                "insured for this type of work."
            ),
            duration_minutes=30,
            safety_note="Verify contractor licenses and insurance before hiring."
        ),
    ]
    return Plan(
        issue_type=issue_type,
        risk_level=risk_level.value,
        steps=steps,
        total_time_minutes=30,
        difficulty=PROFESSIONAL_DIFFICULTY,
        safety_warning=(
            f"This repair is classified as {risk_level.value} risk and requires "
            f"professional expertise."
        )
    )


class PlanGeneratorPlugin:
    """
    Semantic Kernel plugin that produces an ordered repair plan.

    High and critical risk issues get the fixed professional plan without a
    model call. Otherwise the model is asked for a DIY step sequence whose
    step numbers must run 1..n in the order given; a plan that does not is
    rejected rather than renumbered.
    """

    def __init__(
        self,
        bedrock_client: BedrockClient,
        generation: Optional[GenerationConfig] = None
    ):
        """
        Initialize plan plugin.

        Args:
            bedrock_client: Configured BedrockClient instance
            generation: Sampling settings for the plan call
        """
        self.bedrock = bedrock_client
        self.generation = generation or GenerationConfig(temperature=0.4, max_tokens=2000)
        logger.info("Initialized PlanGeneratorPlugin")

    @kernel_function(
        name="generate_plan",
        description=(
            "Create a step-by-step repair plan for an issue. High and critical risk "
            "issues always get a plan that directs the user to a professional."
        )
    )
    async def generate(
        self,
        issue_type: str,
        risk_level: Union[RiskLevel, str]
    ) -> Plan:
        """
        Generate a plan.

        Args:
            issue_type: Issue to plan for
            risk_level: Risk level from the diagnosis

        Returns:
            Plan

        Raises:
            ValidationError: If risk_level is not a known level
            UpstreamCallError: If the model call fails
            UpstreamParseError: If the reply is not a valid plan
        """
        level = _risk_level(risk_level)

        if level.requires_professional:
            logger.info(f"Risk level {level.value}: returning professional-only plan")
            return professional_plan(issue_type, level)

        logger.info(f"Generating DIY plan for: {issue_type[:60]} (risk={level.value})")

        reply = await self.bedrock.converse(
            system_prompt=PLAN_SYSTEM_PROMPT,
            text=f"Create a repair plan for: {issue_type}\nRisk level: {level.value}",
            temperature=self.generation.temperature,
            max_tokens=self.generation.max_tokens,
            operation="repair plan"
        )

        data = ResponseFormatter.parse_json_object(reply, operation="repair plan")
        plan = self.normalize(data, issue_type, level)

        logger.info(
            f"Plan ready: {len(plan.steps)} steps, {plan.total_time_minutes} minutes, "
            f"difficulty={plan.difficulty}"
        )
        return plan

    def normalize(self, data: Dict[str, Any], issue_type: str, risk_level: RiskLevel) -> Plan:
        """
        Validate a model-supplied plan.

        Args:
            data: Parsed JSON object from the model
            issue_type: Issue the plan is for
            risk_level: LOW or MEDIUM

        Returns:
            Plan

        Raises:
            UpstreamParseError: If steps are missing, malformed or not numbered 1..n
        """
        raw_steps = data.get("steps")
        if not isinstance(raw_steps, list) or not raw_steps:
            raise UpstreamParseError.invalid_reply(
                operation="repair plan",
                reason="'steps' must be a non-empty list"
            )

        steps: List[PlanStep] = []
        for position, raw in enumerate(raw_steps, 1):
            if not isinstance(raw, dict):
                raise UpstreamParseError.invalid_reply(
                    operation="repair plan",
                    reason=f"step {position} is not an object"
                )

            number = raw.get("step_number")
            if isinstance(number, bool) or not isinstance(number, int) or number != position:
                raise UpstreamParseError.invalid_reply(
                    operation="repair plan",
                    reason=f"step at position {position} is numbered {number!r}"
                )

            steps.append(_normalize_step(raw, position))

        difficulty = data.get("difficulty")
        if difficulty not in DIY_DIFFICULTIES:
            logger.warning(f"Unknown plan difficulty {difficulty!r}, using {DEFAULT_DIFFICULTY}")
            difficulty = DEFAULT_DIFFICULTY

        total_time = _duration(data.get("total_time_minutes"))
        if total_time is None:
            total_time = sum(step.duration_minutes for step in steps)

        return Plan(
            issue_type=issue_type,
            risk_level=risk_level.value,
            steps=steps,
            total_time_minutes=total_time,
            difficulty=difficulty
        )


def _risk_level(value: Union[RiskLevel, str]) -> RiskLevel:
    try:
        return RiskLevel(value)
    except ValueError:
        raise ValidationError.invalid(
            f"Unknown risk level '{value}'",
            errors=[{"field": "risk_level", "message": "must be one of low, medium, high, critical"}]
        )


def _normalize_step(raw: Dict[str, Any], number: int) -> PlanStep:
    title = raw.get("title")
    description = raw.get("description")
    safety_note = raw.get("safety_note")

    return PlanStep(
        step_number=number,
        title=title if isinstance(title, str) and title else f"Step {number}",
        description=description if isinstance(description, str) else "",
        duration_minutes=_duration(raw.get("duration_minutes")) or 0,
        safety_note=safety_note if isinstance(safety_note, str) and safety_note else None,
        tools_needed=_strings(raw.get("tools_needed")),
        parts_needed=_strings(raw.get("parts_needed"))
    )


def _duration(value: Any) -> Optional[float]:
    """Non-negative duration in minutes, or None if not numeric."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(value, 0)


def _strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, str)]
