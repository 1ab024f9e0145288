"""Bill of materials plugin for Semantic Kernel."""

import logging
import math
from typing import List, Dict, Any, Optional

from semantic_kernel.functions import kernel_function

from ..models.materials import BillOfMaterials, BillOfMaterialsItem
from ..utils.bedrock_client import BedrockClient
from ..utils.config import GenerationConfig
from ..utils.errors import UpstreamParseError
from ..utils.response_formatter import ResponseFormatter

logger = logging.getLogger(__name__)


MATERIALS_SYSTEM_PROMPT = """You are a home repair expert creating a bill of materials.
Return ONLY a JSON object with this structure:
{
  "parts": [
    {"name": "...", "category": "...", "quantity": 1, "unit": "each", "price_min": 0.00, "price_max": 0.00, "optional": false, "notes": "..."}
  ],
  "tools": [
    {"name": "...", "category": "...", "quantity": 1, "unit": "each", "price_min": 0.00, "price_max": 0.00, "optional": false, "notes": "..."}
  ],
  "total_cost_min": 0.00,
  "total_cost_max": 0.00
}

Use realistic US retail prices from home improvement stores. List common tools
a homeowner may already own as optional."""

CATEGORIES = ("parts", "tools")


class MaterialsEstimatorPlugin:
    """
    Semantic Kernel plugin that produces a priced parts and tools list.

    The model's JSON is treated as untrusted: list sizes are capped, prices
    are coerced to 2-decimal USD values and totals fall back to the sum of
    the item bounds when the model leaves them out.
    """

    def __init__(
        self,
        bedrock_client: BedrockClient,
        generation: Optional[GenerationConfig] = None,
        max_items_per_category: int = 10
    ):
        """
        Initialize materials plugin.

        Args:
            bedrock_client: Configured BedrockClient instance
            generation: Sampling settings for the materials call
            max_items_per_category: Cap on parts and on tools
        """
        self.bedrock = bedrock_client
        self.generation = generation or GenerationConfig(temperature=0.3, max_tokens=2000)
        self.max_items_per_category = max_items_per_category
        logger.info("Initialized MaterialsEstimatorPlugin")

    @kernel_function(
        name="generate_bom",
        description=(
            "Create a bill of materials (parts and tools with price ranges) "
            "for a home repair issue."
        )
    )
    async def estimate(self, issue_type: str) -> BillOfMaterials:
        """
        Build a bill of materials for an issue.

        Args:
            issue_type: Issue to gather materials for

        Returns:
            Normalized BillOfMaterials

        Raises:
            UpstreamCallError: If the model call fails
            UpstreamParseError: If the reply is not a JSON object of the expected shape
        """
        logger.info(f"Generating bill of materials for: {issue_type[:60]}")

        reply = await self.bedrock.converse(
            system_prompt=MATERIALS_SYSTEM_PROMPT,
            text=f"Create a bill of materials for: {issue_type}",
            temperature=self.generation.temperature,
            max_tokens=self.generation.max_tokens,
            operation="bill of materials"
        )

        data = ResponseFormatter.parse_json_object(reply, operation="bill of materials")
        bom = self.normalize(data)

        logger.info(
            f"Bill of materials ready: {len(bom.parts)} parts, {len(bom.tools)} tools, "
            f"total=${bom.total_min:.2f}-${bom.total_max:.2f}"
        )
        return bom

    def normalize(self, data: Dict[str, Any]) -> BillOfMaterials:
        """
        Validate and normalize a model-supplied bill of materials.

        Args:
            data: Parsed JSON object from the model

        Returns:
            BillOfMaterials

        Raises:
            UpstreamParseError: If parts or tools is present but not a list
        """
        lists: Dict[str, List[BillOfMaterialsItem]] = {}

        for category in CATEGORIES:
            raw_items = data.get(category)
            if raw_items is None:
                raw_items = []
            if not isinstance(raw_items, list):
                raise UpstreamParseError.invalid_reply(
                    operation="bill of materials",
                    reason=f"'{category}' must be a list"
                )

            items = [_normalize_item(item) for item in raw_items if isinstance(item, dict)]
            if len(items) > self.max_items_per_category:
                logger.debug(f"Truncating {category} from {len(items)} to {self.max_items_per_category}")
            lists[category] = items[:self.max_items_per_category]

        all_items = lists["parts"] + lists["tools"]
        total_min = _as_number(data.get("total_cost_min"))
        total_max = _as_number(data.get("total_cost_max"))

        if total_min is None:
            total_min = sum(item.price_min for item in all_items)
        if total_max is None:
            total_max = sum(item.price_max for item in all_items)

        total_min, total_max = sorted((round(total_min, 2), round(total_max, 2)))

        return BillOfMaterials(
            parts=lists["parts"],
            tools=lists["tools"],
            total_min=total_min,
            total_max=total_max
        )


def _normalize_item(item: Dict[str, Any]) -> BillOfMaterialsItem:
    price_min = _to_currency(item.get("price_min"))
    price_max = _to_currency(item.get("price_max"))
    if price_min > price_max:
        price_min, price_max = price_max, price_min

    quantity = _as_number(item.get("quantity"))
    name = item.get("name")
    unit = item.get("unit")
    notes = item.get("notes")
    category = item.get("category")

    return BillOfMaterialsItem(
        name=name.strip() if isinstance(name, str) and name.strip() else "Unnamed item",
        quantity=_quantity(quantity),
        unit=unit if isinstance(unit, str) and unit else None,
        price_min=price_min,
        price_max=price_max,
        optional=item.get("optional") is True,
        notes=notes if isinstance(notes, str) else "",
        category=category if isinstance(category, str) else "",
        have_it=False
    )


def _quantity(value: Optional[float]) -> float:
    if value is None or value <= 0:
        return 1
    return int(value) if value.is_integer() else value


def _as_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_currency(value: Any) -> float:
    number = _as_number(value)
    return round(number, 2) if number is not None else 0.0
