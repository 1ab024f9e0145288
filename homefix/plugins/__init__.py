"""Semantic Kernel plugins for diagnosis, planning and contractor outreach."""

from .safety_gate import SafetyGatePlugin
from .diagnosis_extractor import DiagnosisExtractorPlugin
from .materials_estimator import MaterialsEstimatorPlugin
from .plan_generator import PlanGeneratorPlugin
from .quote_requester import QuoteRequesterPlugin
from .outcome_collector import OutcomeCollectorPlugin

__all__ = [
    'SafetyGatePlugin',
    'DiagnosisExtractorPlugin',
    'MaterialsEstimatorPlugin',
    'PlanGeneratorPlugin',
    'QuoteRequesterPlugin',
    'OutcomeCollectorPlugin'
]
