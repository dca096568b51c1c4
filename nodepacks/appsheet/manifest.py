"""
AppSheet Node Pack Manifest - Registration function for entry-points.
"""

from src.node_registry.models import NodePackManifest
from .description import APPSHEET_API_CREDENTIAL
from .nodes import AppSheetNode, AIAgentAppSheetNode


MANIFEST = NodePackManifest(
    name="appsheet",
    version="1.0.0",
    description="AppSheet table records and actions",
    license="MIT",
    nodes=[
        AppSheetNode.type,
        AIAgentAppSheetNode.type,
    ],
    credentials=[APPSHEET_API_CREDENTIAL],
    entry_point="nodepacks.appsheet",
)


# Node classes by type
NODE_CLASSES = {
    AppSheetNode.type: AppSheetNode,
    AIAgentAppSheetNode.type: AIAgentAppSheetNode,
}


def register_nodes():
    """
    Entry point function for node pack discovery.

    Returns tuple of (manifest, node_classes).
    """
    return MANIFEST, NODE_CLASSES


__all__ = [
    "MANIFEST",
    "NODE_CLASSES",
    "register_nodes",
]
