"""Tool registry: the remote-callable tool surface exposed to the host."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .models.plan import Progress
from .plugins.diagnosis_extractor import DiagnosisExtractorPlugin
from .plugins.materials_estimator import MaterialsEstimatorPlugin
from .plugins.outcome_collector import OutcomeCollectorPlugin
from .plugins.plan_generator import PlanGeneratorPlugin
from .plugins.quote_requester import QuoteRequesterPlugin
from .resources import ResourceRegistry
from .schemas import (
    AnalyzeIssueInput,
    GenerateBomInput,
    GeneratePlanInput,
    RequestQuotesInput,
    SubmitOutcomeInput,
    analyze_issue_schema,
    validate_input,
)
from .utils.config import LimitsConfig
from .utils.errors import ConfirmationRequired, HomeRepairError, ResourceNotFound
from .utils.logging import clear_context, redact_sensitive, set_context
from .utils.photo_input import normalize_photos

logger = logging.getLogger(__name__)

ToolResult = Dict[str, Any]


@dataclass(frozen=True)
class ToolDefinition:
    """
    A named tool with its input schema and handler.

    Attributes:
        name: Tool name used by callers
        title: Human-readable title
        description: What the tool does, shown to the host model
        input_schema: Pydantic model validating the arguments
        handler: Coroutine turning validated input into a tool result
        output_template: Resource key of the widget that renders the result
    """
    name: str
    title: str
    description: str
    input_schema: Type[BaseModel]
    handler: Callable[[Any], Awaitable[ToolResult]]
    output_template: Optional[str] = None


def _result(text: str, structured: Dict[str, Any], meta: Optional[Dict[str, Any]] = None,
            is_error: bool = False) -> ToolResult:
    return {
        "content": [{"type": "text", "text": text}],
        "structuredContent": structured,
        "_meta": meta or {},
        "isError": is_error
    }


class ToolRegistry:
    """
    Validates, dispatches and logs tool calls.

    Every call runs with the tool name in the logging context and with
    photo payloads and personal data redacted from the logged arguments.
    Errors propagate to the transport, except ConfirmationRequired which
    becomes a structured result carrying confirmation_needed.
    """

    def __init__(
        self,
        diagnosis_extractor: DiagnosisExtractorPlugin,
        materials_estimator: MaterialsEstimatorPlugin,
        plan_generator: PlanGeneratorPlugin,
        quote_requester: QuoteRequesterPlugin,
        outcome_collector: OutcomeCollectorPlugin,
        resources: ResourceRegistry,
        limits: LimitsConfig
    ):
        self.diagnosis_extractor = diagnosis_extractor
        self.materials_estimator = materials_estimator
        self.plan_generator = plan_generator
        self.quote_requester = quote_requester
        self.outcome_collector = outcome_collector
        self.resources = resources
        self.limits = limits

        definitions = [
            ToolDefinition(
                name="analyze_issue",
                title="Analyze Home Repair Issue",
                description=(
                    "Analyze photos and description to produce a safety-aware diagnosis "
                    "with a starter materials list."
                ),
                input_schema=analyze_issue_schema(limits),
                handler=self._analyze_issue,
                output_template="diagnosis"
            ),
            ToolDefinition(
                name="generate_plan",
                title="Generate Repair Plan",
                description=(
                    "Create a step-by-step repair plan with progress tracking and "
                    "bill of materials."
                ),
                input_schema=GeneratePlanInput,
                handler=self._generate_plan,
                output_template="steps"
            ),
            ToolDefinition(
                name="generate_bom",
                title="Generate Bill of Materials",
                description="List the parts and tools for a repair with retail price ranges.",
                input_schema=GenerateBomInput,
                handler=self._generate_bom
            ),
            ToolDefinition(
                name="request_quotes",
                title="Request Contractor Quotes",
                description="Prepare contractor quote requests for the scoped repair.",
                input_schema=RequestQuotesInput,
                handler=self._request_quotes
            ),
            ToolDefinition(
                name="submit_outcome",
                title="Submit Repair Outcome",
                description="Share the repair outcome to improve future recommendations.",
                input_schema=SubmitOutcomeInput,
                handler=self._submit_outcome
            ),
        ]
        self.tools: Dict[str, ToolDefinition] = {tool.name: tool for tool in definitions}
        logger.info(f"Initialized ToolRegistry with {len(self.tools)} tools")

    def manifest(self) -> List[Dict[str, Any]]:
        """Tool descriptions with JSON Schemas and rendering hints."""
        return [
            {
                "name": tool.name,
                "title": tool.title,
                "description": tool.description,
                "inputSchema": tool.input_schema.model_json_schema(),
                "_meta": self._meta(tool)
            }
            for tool in self.tools.values()
        ]

    async def call(self, name: str, arguments: Optional[Dict[str, Any]]) -> ToolResult:
        """
        Validate arguments and run a tool.

        Args:
            name: Tool name
            arguments: Raw tool arguments

        Returns:
            Tool result with content, structuredContent, _meta and isError

        Raises:
            ResourceNotFound: If no tool has this name
            HomeRepairError: Whatever the tool raised, except ConfirmationRequired
        """
        tool = self.tools.get(name)
        if tool is None:
            raise ResourceNotFound.unknown_tool(name)

        set_context(tool=name)
        start_time = time.time()
        try:
            logger.info(f"Tool call: {redact_sensitive(arguments or {})}")
            params = validate_input(tool.input_schema, arguments, name)

            try:
                result = await tool.handler(params)
            except ConfirmationRequired as e:
                logger.info("Tool call needs user confirmation")
                return _result(e.context.message, e.to_result(), self._meta(tool), is_error=True)

            result["_meta"] = self._meta(tool)
            logger.info(f"Tool call completed in {time.time() - start_time:.2f}s")
            return result

        except HomeRepairError as e:
            logger.error(f"Tool call failed: {str(e)}")
            raise
        finally:
            clear_context()

    def _meta(self, tool: ToolDefinition) -> Dict[str, Any]:
        if tool.output_template is None:
            return {}
        return {"openai/outputTemplate": self.resources.uri_for(tool.output_template)}

    async def _analyze_issue(self, params: AnalyzeIssueInput) -> ToolResult:
        photos = normalize_photos(params.photo_payloads(), self.limits.max_photos)

        diagnosis, raw_analysis = await self.diagnosis_extractor.diagnose(params.description, photos)
        bom = await self.materials_estimator.estimate(diagnosis.issue_type)

        return _result(
            f"Identified {diagnosis.issue_type} ({diagnosis.risk_level.value} risk).",
            {
                "diagnosis": diagnosis.to_dict(),
                "bom": bom.to_dict(),
                "raw_analysis": raw_analysis
            }
        )

    async def _generate_plan(self, params: GeneratePlanInput) -> ToolResult:
        plan = await self.plan_generator.generate(params.issue_type, params.risk_level)
        bom = await self.materials_estimator.estimate(params.issue_type)

        return _result(
            f"Generated plan with {len(plan.steps)} steps ({plan.difficulty}).",
            {
                "plan": plan.to_dict(),
                "bom": bom.to_dict(),
                "progress": Progress().to_dict()
            }
        )

    async def _generate_bom(self, params: GenerateBomInput) -> ToolResult:
        bom = await self.materials_estimator.estimate(params.issue_type)

        return _result(
            f"Bill of materials with {bom.item_count} items "
            f"(${bom.total_min:.2f}-${bom.total_max:.2f}).",
            bom.to_dict()
        )

    async def _request_quotes(self, params: RequestQuotesInput) -> ToolResult:
        result = await self.quote_requester.request_quotes(
            zip_code=params.zip,
            scope=params.scope,
            confirmed=params.confirmed
        )
        return _result("Quote request prepared with recommended contractors.", result)

    async def _submit_outcome(self, params: SubmitOutcomeInput) -> ToolResult:
        result = await self.outcome_collector.submit_outcome(**params.model_dump())
        return _result(result["thank_you_message"], result)
