"""Process bootstrap: builds every component once and wires them together."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .plugins.diagnosis_extractor import DiagnosisExtractorPlugin
from .plugins.materials_estimator import MaterialsEstimatorPlugin
from .plugins.outcome_collector import OutcomeCollectorPlugin
from .plugins.plan_generator import PlanGeneratorPlugin
from .plugins.quote_requester import QuoteRequesterPlugin
from .plugins.safety_gate import SafetyGatePlugin
from .resources import ResourceRegistry
from .storage.contractors import ContractorMatcher, MockContractorMatcher
from .storage.outcomes import InMemoryOutcomeStore, OutcomeStore
from .tools import ToolRegistry
from .utils.bedrock_client import BedrockClient
from .utils.config import Config
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"


@dataclass
class Application:
    """Fully wired tool server components."""
    config: Config
    bedrock_client: BedrockClient
    resources: ResourceRegistry
    tools: ToolRegistry


def build_application(
    config: Optional[Config] = None,
    bedrock_client: Optional[BedrockClient] = None,
    contractor_matcher: Optional[ContractorMatcher] = None,
    outcome_store: Optional[OutcomeStore] = None,
    configure_logging: bool = True
) -> Application:
    """
    Build the application from configuration.

    The model client is constructed here and injected into every plugin that
    calls the model; nothing is created lazily on first use.

    Args:
        config: Loaded configuration; read from HOMEFIX_CONFIG (or config.yaml) if omitted
        bedrock_client: Model client to inject instead of a new BedrockClient
        contractor_matcher: Contractor backend, MockContractorMatcher by default
        outcome_store: Outcome backend, InMemoryOutcomeStore by default
        configure_logging: Whether to install the logging handlers

    Returns:
        Application

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    if config is None:
        config = Config.load(os.getenv("HOMEFIX_CONFIG", DEFAULT_CONFIG_PATH))

    if configure_logging:
        setup_logging(
            level=config.logging.level,
            log_format=config.logging.format,
            log_file=config.logging.file or None
        )

    if bedrock_client is None:
        bedrock_client = BedrockClient(
            region=config.aws_region,
            model_id=config.bedrock.model_id,
            timeout=config.bedrock.timeout
        )

    safety_gate = SafetyGatePlugin()
    diagnosis_extractor = DiagnosisExtractorPlugin(
        bedrock_client,
        safety_gate,
        generation=config.generation.diagnosis,
        max_input_chars=config.limits.max_input_chars
    )
    materials_estimator = MaterialsEstimatorPlugin(
        bedrock_client,
        generation=config.generation.materials,
        max_items_per_category=config.limits.max_items_per_category
    )
    plan_generator = PlanGeneratorPlugin(bedrock_client, generation=config.generation.plan)
    quote_requester = QuoteRequesterPlugin(contractor_matcher or MockContractorMatcher())
    outcome_collector = OutcomeCollectorPlugin(outcome_store or InMemoryOutcomeStore())

    resources = ResourceRegistry(config.resources)
    tools = ToolRegistry(
        diagnosis_extractor=diagnosis_extractor,
        materials_estimator=materials_estimator,
        plan_generator=plan_generator,
        quote_requester=quote_requester,
        outcome_collector=outcome_collector,
        resources=resources,
        limits=config.limits
    )

    logger.info("Home repair tool server initialized")
    return Application(config=config, bedrock_client=bedrock_client, resources=resources, tools=tools)
