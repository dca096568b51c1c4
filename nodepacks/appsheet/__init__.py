"""
AppSheet Node Pack - records and actions on AppSheet tables.

This pack provides:
- AppSheetNode: create / read / update / delete records, invoke actions
- AIAgentAppSheetNode: the same node exposed as an AI agent tool
- appSheetApi credential type (API key + app ID)

All nodes execute synchronously.
"""

from .errors import InvalidFieldJson, OperationUnsupported
from .manifest import MANIFEST, register_nodes
from .nodes import AppSheetNode, AIAgentAppSheetNode

__all__ = [
    "AppSheetNode",
    "AIAgentAppSheetNode",
    "InvalidFieldJson",
    "OperationUnsupported",
    "MANIFEST",
    "register_nodes",
]
