"""Data models for diagnoses, materials, plans and contractor outreach."""

from .photo import Annotation, Photo, IMAGE_FORMATS
from .diagnosis import RiskLevel, Recommendation, SafetyGateResult, Diagnosis
from .materials import BillOfMaterialsItem, BillOfMaterials
from .plan import PlanStep, Plan, Progress, DIFFICULTIES
from .outreach import Contractor, SuccessMetrics, OutcomeRecord

__all__ = [
    'Annotation',
    'Photo',
    'IMAGE_FORMATS',
    'RiskLevel',
    'Recommendation',
    'SafetyGateResult',
    'Diagnosis',
    'BillOfMaterialsItem',
    'BillOfMaterials',
    'PlanStep',
    'Plan',
    'Progress',
    'DIFFICULTIES',
    'Contractor',
    'SuccessMetrics',
    'OutcomeRecord'
]
