"""Bill of materials data models."""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class BillOfMaterialsItem:
    """
    A single part or tool with its retail price range.

    Attributes:
        name: Item name
        quantity: Number of units needed
        unit: Optional unit (e.g., "each", "ft")
        price_min: Lower price bound in USD, 2 decimals
        price_max: Upper price bound in USD, 2 decimals, never below price_min
        optional: Whether the repair can be done without it
        notes: Free-text notes
        category: Store category (e.g., "Plumbing")
        have_it: Whether the user already owns it (always False server-side)
    """
    name: str
    quantity: float = 1
    unit: Optional[str] = None
    price_min: float = 0.0
    price_max: float = 0.0
    optional: bool = False
    notes: str = ""
    category: str = ""
    have_it: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "price_min": self.price_min,
            "price_max": self.price_max,
            "optional": self.optional,
            "notes": self.notes,
            "have_it": self.have_it,
        }


@dataclass
class BillOfMaterials:
    """
    Parts and tools needed for a repair, with total cost bounds.

    Attributes:
        parts: Parts list (at most 10 entries)
        tools: Tools list (at most 10 entries)
        total_min: Lower bound of the total cost
        total_max: Upper bound of the total cost
    """
    parts: List[BillOfMaterialsItem] = field(default_factory=list)
    tools: List[BillOfMaterialsItem] = field(default_factory=list)
    total_min: float = 0.0
    total_max: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.parts) + len(self.tools)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parts": [item.to_dict() for item in self.parts],
            "tools": [item.to_dict() for item in self.tools],
            "total": {"min": self.total_min, "max": self.total_max},
            "item_count": self.item_count,
        }
