"""Tests for repair plan generation."""

import json

import pytest

from homefix.models.diagnosis import RiskLevel
from homefix.plugins.plan_generator import PlanGeneratorPlugin
from homefix.utils.errors import UpstreamParseError, ValidationError


def _steps(numbers):
    return [
        {
            "step_number": number,
            "title": f"Step title {number}",
            "description": f"Do thing {number}",
            "duration_minutes": 5,
            "safety_note": "Wear gloves" if number == 1 else "",
            "tools_needed": ["Adjustable wrench"],
            "parts_needed": ["Cartridge"] if number == 3 else [],
        }
        for number in numbers
    ]


@pytest.fixture
def generator(mock_bedrock):
    return PlanGeneratorPlugin(mock_bedrock)


@pytest.mark.asyncio
@pytest.mark.parametrize("risk_level", ["high", "critical", RiskLevel.HIGH, RiskLevel.CRITICAL])
@pytest.mark.parametrize("issue_type", ["leaking faucet", "gas line rupture", "x" * 120])
async def test_high_risk_returns_fixed_plan_without_model_call(generator, mock_bedrock, risk_level, issue_type):
    plan = await generator.generate(issue_type, risk_level)

    mock_bedrock.converse.assert_not_awaited()
    assert plan.difficulty == "Professional Required"
    assert [step.title for step in plan.steps] == [
        "Do Not Attempt DIY Repair",
        "Contact Licensed Professionals",
    ]
    assert [step.step_number for step in plan.steps] == [1, 2]
    assert [step.duration_minutes for step in plan.steps] == [0, 30]
    assert plan.total_time_minutes == 30
    assert plan.safety_warning == (
        f"This repair is classified as {RiskLevel(risk_level).value} risk and requires "
        f"professional expertise."
    )
    assert plan.steps[0].safety_note.startswith("CRITICAL: This is a high-risk repair.")


@pytest.mark.asyncio
async def test_low_risk_plan_with_five_steps(generator, mock_bedrock):
    mock_bedrock.converse.return_value = json.dumps({
        "steps": _steps([1, 2, 3, 4, 5]),
        "total_time_minutes": 45,
        "difficulty": "Beginner",
    })

    plan = await generator.generate("leaking faucet", "low")

    assert len(plan.steps) == 5
    assert plan.steps[0].step_number == 1
    assert [step.step_number for step in plan.steps] == [1, 2, 3, 4, 5]
    assert plan.total_time_minutes == 45
    assert plan.difficulty == "Beginner"
    assert plan.safety_warning is None
    assert plan.steps[0].safety_note == "Wear gloves"
    assert plan.steps[1].safety_note is None
    assert plan.steps[2].parts_needed == ["Cartridge"]

    kwargs = mock_bedrock.converse.await_args.kwargs
    assert kwargs["text"] == "Create a repair plan for: leaking faucet\nRisk level: low"
    assert kwargs["temperature"] == 0.4


@pytest.mark.asyncio
@pytest.mark.parametrize("numbers", [[2, 1, 3], [1, 2, 4], [0, 1, 2], [1, 1, 2]])
async def test_misnumbered_steps_are_rejected(generator, mock_bedrock, numbers):
    mock_bedrock.converse.return_value = json.dumps({"steps": _steps(numbers), "difficulty": "Beginner"})

    with pytest.raises(UpstreamParseError):
        await generator.generate("leaking faucet", "medium")


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [
    "Step 1: turn off the water.",
    json.dumps({"steps": []}),
    json.dumps({"steps": "turn off the water"}),
    json.dumps({"steps": ["turn off the water"]}),
    json.dumps({"steps": [{"step_number": "1", "title": "Shut off"}]}),
])
async def test_invalid_plan_reply_is_rejected(generator, mock_bedrock, reply):
    mock_bedrock.converse.return_value = reply

    with pytest.raises(UpstreamParseError):
        await generator.generate("leaking faucet", "low")


def test_normalize_defaults(generator):
    plan = generator.normalize(
        {
            "steps": [
                {"step_number": 1, "duration_minutes": -5},
                {"step_number": 2, "title": "Reassemble", "duration_minutes": 12.5, "tools_needed": ["Pliers", 3]},
            ],
            "difficulty": "Expert",
            "total_time_minutes": "an hour",
        },
        "squeaky door",
        RiskLevel.LOW,
    )

    assert plan.difficulty == "Intermediate"
    assert plan.steps[0].title == "Step 1"
    assert plan.steps[0].duration_minutes == 0
    assert plan.steps[1].tools_needed == ["Pliers"]
    assert plan.total_time_minutes == 12.5
    assert plan.to_dict()["title"] == "Repair Plan: squeaky door"
    assert plan.to_dict()["risk_level"] == "low"


@pytest.mark.asyncio
async def test_unknown_risk_level(generator, mock_bedrock):
    with pytest.raises(ValidationError):
        await generator.generate("leaking faucet", "extreme")

    mock_bedrock.converse.assert_not_awaited()
