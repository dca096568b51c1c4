"""
CLI for running node packs outside the workflow host.

Provides terminal access to:
- Listing registered nodes
- Describing a node (definition or AI agent tool schema)
- Running a node against a JSON job file
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Any

from src.node_registry import NodeRegistry, get_global_registry
from src.node_sdk import (
    HttpApiError,
    NodeExecutionContext,
    NodeOperationError,
    NodeTimeoutError,
    build_tool_schema,
)
from src.nodepack_runtime.observability import setup_logging, with_execution_context

logger = logging.getLogger(__name__)


def build_registry() -> NodeRegistry:
    """Registry populated from installed node packs."""
    registry = get_global_registry()
    registry.discover_entry_points()
    return registry


def load_job(path: Path) -> dict[str, Any]:
    """
    Load a job file.

    Format:
        {
          "node": "appSheet",
          "parameters": {"operation": "read", "tableName": "People", ...},
          "credentials": {"appSheetApi": {"apiKey": "...", "appId": "..."}},
          "items": [{"json": {...}}],
          "workflowId": "optional",
          "nodeName": "optional"
        }
    """
    job = json.loads(path.read_text())
    if not isinstance(job, dict) or "node" not in job:
        raise ValueError(f"Job file {path} must be a JSON object with a 'node' key")
    job.setdefault("parameters", {})
    job.setdefault("credentials", {})
    # A node with no upstream still runs once
    job.setdefault("items", [{"json": {}}])
    return job


def cmd_list(args: argparse.Namespace) -> int:
    """List registered node types."""
    registry = build_registry()
    for definition in registry:
        tool = " (tool)" if definition.usable_as_tool else ""
        print(f"{definition.node_type}\t{definition.display_name}{tool}")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    """Print a node definition or its agent tool schema."""
    registry = build_registry()
    if args.node not in registry:
        print(f"Unknown node type: {args.node}", file=sys.stderr)
        return 1

    if args.tool_schema:
        selected = json.loads(args.params) if args.params else {}
        output = build_tool_schema(registry.get_node_class(args.node), selected)
    else:
        output = registry.get_node(args.node).model_dump()

    print(json.dumps(output, indent=2))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run a node against a job file and print its output items."""
    try:
        job = load_job(Path(args.job))
    except (OSError, ValueError) as e:
        print(f"Cannot read job file: {e}", file=sys.stderr)
        return 1

    registry = build_registry()
    node = registry.create_node(job["node"])
    if node is None:
        print(f"Unknown node type: {job['node']}", file=sys.stderr)
        return 1

    context = NodeExecutionContext(
        parameters=job["parameters"],
        credentials=job["credentials"],
        input_data=job["items"],
        workflow_id=job.get("workflowId"),
        node_name=job.get("nodeName", job["node"]),
    )
    node.set_context(context)
    logger.info(
        f"Running {node.type} on {len(job['items'])} item(s)",
        extra=with_execution_context(
            workflow_id=context.workflow_id,
            node_name=context.node_name,
            node_type=node.type,
        ),
    )

    try:
        output = node.execute()
    except NodeOperationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except (HttpApiError, NodeTimeoutError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2 if args.pretty else None))
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="appsheet-node",
        description="Run and inspect AppSheet workflow nodes",
    )
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # list command
    subparsers.add_parser('list', help='List registered nodes')

    # describe command
    describe_parser = subparsers.add_parser('describe', help='Show a node definition')
    describe_parser.add_argument('node', help='Node type, e.g. appSheet')
    describe_parser.add_argument('--tool-schema', action='store_true',
                                 help='Show the AI agent tool schema instead')
    describe_parser.add_argument('--params', help='JSON object of configured parameters')

    # run command
    run_parser = subparsers.add_parser('run', help='Run a node from a job file')
    run_parser.add_argument('job', help='Path to job JSON file')
    run_parser.add_argument('--pretty', action='store_true', help='Indent output JSON')

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    setup_logging()

    if args.command == 'list':
        return cmd_list(args)
    elif args.command == 'describe':
        return cmd_describe(args)
    elif args.command == 'run':
        return cmd_run(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
