"""
AppSheet Node Pack

Workflow nodes that turn configured form fields into calls against the
AppSheet tabular-data API.

Architecture:
- node_sdk/: Node execution semantics (BaseNode, NodeContext, items, HTTP)
- node_registry/: Plugin discovery + credential types
- nodepack_runtime/: Settings, structured logging, CLI
"""

__version__ = "1.0.0"
