"""
AppSheet Nodes - add, read, update, delete records or invoke actions via the AppSheet API.

Two node types share one implementation:
- AppSheetNode: regular workflow node
- AIAgentAppSheetNode: same operations, exposed as a tool for AI agents

All nodes execute synchronously.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.node_sdk.basenode import BaseNode, NodeExecutionData, NodeOperationError
from src.node_sdk.tool_schema import node_to_tool_function

from .actions import AppSheetDispatcher, execute_items, read_credentials
from .description import COMMON_PARAMETERS, CREDENTIAL_NAME, NODE_CREDENTIALS, build_parameters


class AppSheetBaseNode(BaseNode):
    """
    Shared execute() for the AppSheet nodes.

    One POST per input item, in input order. The first failing item
    aborts the execution.
    """

    def __init__(self, dispatcher: Optional[AppSheetDispatcher] = None) -> None:
        super().__init__()
        self._dispatcher = dispatcher

    def execute(self) -> List[List[NodeExecutionData]]:
        items = self.get_input_data()
        credentials = read_credentials(self.get_credentials(CREDENTIAL_NAME))
        dispatcher = self._dispatcher or AppSheetDispatcher()

        self.logger.info(f"Executing {self.type} for {len(items)} item(s)")
        try:
            results = execute_items(items, self.get_node_parameter, credentials, dispatcher)
        except NodeOperationError as e:
            if e.node is None:
                e.node = self
            raise

        return [results]


class AppSheetNode(AppSheetBaseNode):
    """
    AppSheet - interact with AppSheet tables.
    """

    type = "appSheet"
    version = 1

    description = {
        "displayName": "AppSheet",
        "name": "appSheet",
        "icon": "file:appsheet.svg",
        "group": ["transform"],
        "subtitle": '={{$parameter["operation"]}}',
        "description": (
            "Interact with the AppSheet API to add, read, update, delete records, "
            "or invoke a custom action on table records."
        ),
        "version": 1,
        "defaults": {"name": "AppSheet"},
        "inputs": ["main"],
        "outputs": ["main"],
        "credentials": NODE_CREDENTIALS,
    }

    properties = {
        "parameters": build_parameters(),
        "credentials": NODE_CREDENTIALS,
    }


class AIAgentAppSheetNode(AppSheetBaseNode):
    """
    AppSheet (AI Agent Tool) - the AppSheet node as a callable agent tool.

    The operation can be chosen dynamically; get_custom_tool_schema() tells
    the agent which arguments it may supply.
    """

    type = "aiAgentAppSheet"
    version = 1

    description = {
        "displayName": "AppSheet (AI Agent Tool)",
        "name": "aiAgentAppSheet",
        "icon": "file:appsheet.svg",
        "group": ["aiTools"],
        "subtitle": '={{$parameter["operation"]}}',
        "description": (
            "This node exposes the AppSheet API as a tool for AI agents. It supports the same "
            "operations as the standard AppSheet node (create, read, update, delete, and invoke "
            "actions) but is intended for use by AI agents."
        ),
        "version": 1,
        "defaults": {"name": "AI Agent AppSheet"},
        "inputs": ["main"],
        "outputs": ["main"],
        "usableAsTool": True,
        "credentials": NODE_CREDENTIALS,
    }

    properties = {
        "parameters": build_parameters(
            operation_description=(
                "Which operation to perform in AppSheet. "
                "This can be set dynamically via expressions."
            ),
        ),
        "credentials": NODE_CREDENTIALS,
    }

    @classmethod
    def get_custom_tool_schema(cls, selected_params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Tool schema for agents.

        Starts from the generic schema and adds every operation field the
        workflow left empty, so the agent can fill in table, rows or selector.
        Region, locale, location and timezone stay under workflow control.
        """
        schema = node_to_tool_function(cls, selected_params)
        properties = schema["parameters"]["properties"]

        for param in cls.properties["parameters"]:
            name = param["name"]
            if name in COMMON_PARAMETERS or name in properties:
                continue
            if selected_params.get(name) not in (None, ""):
                continue
            prop: Dict[str, Any] = {"type": "string", "description": param.get("description", "")}
            shown_for = ((param.get("displayOptions") or {}).get("show") or {}).get("operation")
            if shown_for:
                prop["description"] = f"[{', '.join(shown_for)}] {prop['description']}".strip()
            properties[name] = prop

        required = schema["parameters"]["required"]
        if "tableName" in properties and "tableName" not in required:
            required.append("tableName")
        return schema


__all__ = ["AppSheetBaseNode", "AppSheetNode", "AIAgentAppSheetNode"]
