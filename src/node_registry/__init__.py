"""
Node Registry - Discovery and registration of node implementations.

This package provides:
- NodeDefinition: Metadata about a registered node
- NodePackManifest: Package metadata for a node pack
- CredentialDefinition: Credential type shipped by a pack
- NodeRegistry: Central registry for discovering nodes

Supports entry-points based discovery for plugin node packs.
"""

from .models import CredentialDefinition, NodeDefinition, NodePackManifest
from .registry import NODE_PACK_ENTRY_POINT, NodeRegistry, get_global_registry

__all__ = [
    "CredentialDefinition",
    "NodeDefinition",
    "NodePackManifest",
    "NodeRegistry",
    "NODE_PACK_ENTRY_POINT",
    "get_global_registry",
]
