"""
Node SDK - Minimal Python node execution semantics.

This package provides the runtime for executing Python nodes:
- NodeItem: Data item flowing through workflows
- NodeExecutionContext: Runtime context for a node
- BaseNode: Abstract base class for node implementations
- HttpClient: Timeout-bounded HTTP transport

All nodes execute synchronously.
"""

from .items import NodeItem, PairedItem, return_json_array
from .basenode import (
    BaseNode,
    NodeExecutionContext,
    NodeExecutionData,
    NodeParameter,
    NodeCredential,
    NodeParameterType,
    NodeOperationError,
)
from .expressions import ExpressionError, resolve_parameter
from .http import HttpClient, HttpResponse, HttpApiError, NodeTimeoutError
from .tool_schema import build_tool_schema

__all__ = [
    # Items
    "NodeItem",
    "PairedItem",
    "NodeExecutionData",
    "return_json_array",
    # Context
    "NodeExecutionContext",
    "ExpressionError",
    "resolve_parameter",
    # Base class
    "BaseNode",
    "NodeParameter",
    "NodeCredential",
    "NodeParameterType",
    # Errors
    "NodeOperationError",
    # HTTP
    "HttpClient",
    "HttpResponse",
    "HttpApiError",
    "NodeTimeoutError",
    # Agent tools
    "build_tool_schema",
]
