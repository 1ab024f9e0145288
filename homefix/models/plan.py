"""Repair plan data models."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


DIFFICULTIES = ("Beginner", "Intermediate", "Advanced", "Professional Required")


@dataclass
class PlanStep:
    """
    One step of a repair plan.

    Attributes:
        step_number: 1-based position in the plan
        title: Short step title
        description: What to do
        duration_minutes: Estimated duration, never negative
        safety_note: Optional safety reminder for this step
        tools_needed: Tool names used in this step
        parts_needed: Part names used in this step
    """
    step_number: int
    title: str
    description: str
    duration_minutes: float = 0
    safety_note: Optional[str] = None
    tools_needed: List[str] = field(default_factory=list)
    parts_needed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number": self.step_number,
            "title": self.title,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "safety_note": self.safety_note,
            "tools_needed": list(self.tools_needed),
            "parts_needed": list(self.parts_needed),
        }


@dataclass
class Plan:
    """
    Ordered repair plan for an issue.

    Attributes:
        issue_type: Issue the plan addresses
        risk_level: Risk level the plan was generated for
        steps: Ordered steps, numbered 1..n
        total_time_minutes: Estimated total duration
        difficulty: One of DIFFICULTIES
        safety_warning: Plan-wide warning, set for professional-only plans
    """
    issue_type: str
    risk_level: str
    steps: List[PlanStep]
    total_time_minutes: float
    difficulty: str
    safety_warning: Optional[str] = None

    @property
    def title(self) -> str:
        return f"Repair Plan: {self.issue_type}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "issue_type": self.issue_type,
            "risk_level": self.risk_level,
            "steps": [step.to_dict() for step in self.steps],
            "total_time_minutes": self.total_time_minutes,
            "difficulty": self.difficulty,
            "safety_warning": self.safety_warning,
        }


@dataclass
class Progress:
    """
    Client-held progress through a plan.

    The server only hands out the initial state; the host application
    persists and mutates it.
    """
    started_at: Optional[str] = None
    completed_steps: List[int] = field(default_factory=list)
    paused_at: Optional[str] = None
    actual_costs: Dict[str, float] = field(default_factory=lambda: {"parts": 0, "tools": 0})
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at,
            "completed_steps": list(self.completed_steps),
            "paused_at": self.paused_at,
            "actual_costs": dict(self.actual_costs),
            "notes": list(self.notes),
        }
