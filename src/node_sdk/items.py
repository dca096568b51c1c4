"""
Node Items - Data structures flowing through workflows.

NodeItem is the fundamental data unit in workflows.
Each item has JSON data and an optional reference to the
input item that produced it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PairedItem(BaseModel):
    """
    Reference to the source item that produced this item.

    Used for tracking data lineage through workflows.
    """
    model_config = ConfigDict(extra="forbid")

    item: int = Field(..., description="Index of source item", ge=0)
    input: int = Field(0, description="Input branch index", ge=0)


class NodeItem(BaseModel):
    """
    A single data item flowing through a workflow.

    Example:
        item = NodeItem(json_data={"name": "John", "email": "john@example.com"})
    """
    model_config = ConfigDict(extra="forbid")

    json_data: Dict[str, Any] = Field(default_factory=dict, description="JSON data")
    paired_item: Optional[PairedItem] = Field(
        None,
        description="Reference to source item"
    )

    @classmethod
    def from_value(cls, value: Any, item_index: Optional[int] = None) -> "NodeItem":
        """
        Wrap an arbitrary JSON value.

        Objects become the item's data, an object that already carries a
        ``json`` key is unwrapped, anything else lands under ``data``.
        """
        if isinstance(value, dict) and isinstance(value.get("json"), dict):
            data = value["json"]
        elif isinstance(value, dict):
            data = value
        else:
            data = {"data": value}
        paired = PairedItem(item=item_index) if item_index is not None else None
        return cls(json_data=data, paired_item=paired)

    def to_execution_data(self) -> Dict[str, Any]:
        """Dump to the host wire format."""
        result: Dict[str, Any] = {"json": self.json_data}
        if self.paired_item is not None:
            result["pairedItem"] = {"item": self.paired_item.item}
        return result


def return_json_array(values: List[Any], item_index: Optional[int] = None) -> List[Dict[str, Any]]:
    """Convert a list of JSON values into host execution items, order preserved."""
    return [NodeItem.from_value(v, item_index).to_execution_data() for v in values]


__all__ = ["NodeItem", "PairedItem", "return_json_array"]
