# tool_schema.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Parameters an agent always sees, even when not set on the node instance
ALWAYS_EXPOSED = ("resource", "operation")


def _is_active(param: Dict[str, Any], selected: Dict[str, Any]) -> bool:
    """
    n8n-like visibility:
      - If any `displayOptions.hide` condition matches -> inactive
      - All `displayOptions.show` conditions must match for it to be active
    """
    disp = param.get("displayOptions") or {}
    show = disp.get("show") or {}
    hide = disp.get("hide") or {}

    for key, vals in hide.items():
        cur = selected.get(key)
        if (cur in vals) if isinstance(vals, list) else (cur == vals):
            return False

    for key, vals in show.items():
        cur = selected.get(key)
        if (cur not in vals) if isinstance(vals, list) else (cur != vals):
            return False

    return True


def _json_type(p_type: Any) -> str:
    """Map node param types to JSON Schema types (best-effort)."""
    t = (str(p_type) if p_type is not None else "").lower()
    if t in {"number", "float"}:
        return "number"
    if t in {"boolean", "bool"}:
        return "boolean"
    # json parameters are entered as JSON text
    return "string"


def node_to_tool_function(
    node_cls: Any,
    selected_params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Build an OpenAI tool/function schema from an n8n-style node class.

    - A parameter is included when it is active per displayOptions and it
      is either always exposed (resource/operation) or explicitly set on
      the node instance.
    - Fixed scalar values configured on the instance are hidden from the
      model; empty ones become required when the class marks them required.
    - Instance values for resource/operation appear as `default` and `const`.
    """
    description = node_cls.description.get("description") or node_cls.description.get("displayName", "")
    params: List[Dict[str, Any]] = node_cls.properties.get("parameters", [])
    explicit = dict(selected_params or {})

    # For visibility checks, allow defaults so show/hide still works
    visibility = dict(explicit)
    for p in params:
        if p["name"] not in visibility and "default" in p:
            visibility[p["name"]] = p["default"]

    properties: Dict[str, Any] = {}
    required: List[str] = []

    for p in params:
        name = p["name"]
        if not _is_active(p, visibility):
            continue
        if name not in ALWAYS_EXPOSED and name not in explicit:
            continue

        schema: Dict[str, Any] = {"type": _json_type(p.get("type"))}
        if p.get("description"):
            schema["description"] = p["description"]
        if "default" in p:
            schema["default"] = p["default"]

        opts = p.get("options")
        if isinstance(opts, list):
            enum_vals = [opt["value"] for opt in opts if isinstance(opt, dict) and "value" in opt]
            if enum_vals:
                schema["enum"] = enum_vals

        inst_val = explicit.get(name)
        if inst_val not in (None, ""):
            if name in ALWAYS_EXPOSED:
                schema["default"] = inst_val
                schema["const"] = inst_val
            elif isinstance(inst_val, str) and "{{" in inst_val:
                # Template parameters stay visible so the model knows they exist
                schema["description"] = (schema.get("description", "") + f" [Template: {inst_val}]").strip()
            else:
                continue
        elif p.get("required") and name in explicit:
            required.append(name)

        properties[name] = schema

    return {
        "name": node_cls.description.get("name", node_cls.type),
        "description": description,
        "parameters": {
            "type": "object",
            "properties": properties,
            "required": [r for r in required if r in properties],
        },
    }


def build_tool_schema(
    node_cls: Any,
    selected_params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Public entry for building tool schemas.

    A node class providing get_custom_tool_schema() wins; otherwise the
    schema is generated from its parameters.
    """
    custom = getattr(node_cls, "get_custom_tool_schema", None)
    if callable(custom):
        schema = custom(dict(selected_params or {}))
        if isinstance(schema, dict) and schema:
            return schema
        logger.warning(f"[TOOL SCHEMA] {node_cls.__name__} returned no custom schema, using generic")
    return node_to_tool_function(node_cls, selected_params=selected_params)


__all__ = ["build_tool_schema", "node_to_tool_function"]
