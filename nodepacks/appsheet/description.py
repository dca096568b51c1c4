"""
AppSheet node parameters and credential type, as shown in the host's property panel.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.node_registry.models import CredentialDefinition
from src.node_sdk.basenode import NodeCredential, NodeParameter

from .models import Operation, Region

CREDENTIAL_NAME = "appSheetApi"

APPSHEET_API_CREDENTIAL = CredentialDefinition(
    name=CREDENTIAL_NAME,
    display_name="AppSheet API",
    description="Application access key and app ID of an AppSheet app",
    properties=[
        {
            "name": "apiKey",
            "displayName": "API Key",
            "type": "string",
            "typeOptions": {"password": True},
            "default": "",
            "required": True,
        },
        {
            "name": "appId",
            "displayName": "App ID",
            "type": "string",
            "default": "",
            "required": True,
        },
    ],
    auth_type="header",
)

NODE_CREDENTIALS = [NodeCredential(name=CREDENTIAL_NAME, required=True).model_dump(exclude_none=True)]

OPERATION_OPTIONS = [
    {"name": "Create Record", "value": Operation.CREATE.value},
    {"name": "Read Records", "value": Operation.READ.value},
    {"name": "Update Record", "value": Operation.UPDATE.value},
    {"name": "Delete Record", "value": Operation.DELETE.value},
    {"name": "Invoke Action", "value": Operation.INVOKE.value},
]

# Parameters that are never per-item
COMMON_PARAMETERS = ("region", "locale", "location", "timezone")


def _show(**conditions: List[str]) -> Dict[str, Any]:
    return {"show": conditions}


def build_parameters(operation_description: Optional[str] = None) -> List[Dict[str, Any]]:
    """Parameter list shared by both AppSheet nodes."""
    parameters = [
        NodeParameter(
            name="region",
            display_name="Region",
            type="options",
            options=[
                {"name": "Global (www.appsheet.com)", "value": Region.GLOBAL.value},
                {"name": "EU (eu.appsheet.com)", "value": Region.EU.value},
            ],
            default=Region.GLOBAL.value,
            description="The AppSheet region domain to use in the API URL.",
        ),
        NodeParameter(
            name="operation",
            display_name="Operation",
            type="options",
            options=OPERATION_OPTIONS,
            default=Operation.CREATE.value,
            description=operation_description,
            noDataExpression=False,
        ),
        NodeParameter(
            name="tableName",
            display_name="Table Name",
            type="string",
            required=True,
            default="",
            description="Name of the AppSheet table (URL-encoded if needed).",
        ),
        # Read
        NodeParameter(
            name="selector",
            display_name="Selector (for Read)",
            type="string",
            default="",
            display_options=_show(operation=["read"]),
            description=(
                "Enter a valid AppSheet selector expression (e.g., FILTER(People, [Age]>=21)). "
                'If provided, the "Rows" input is ignored.'
            ),
        ),
        NodeParameter(
            name="rows",
            display_name="Rows (for Read if Selector is empty)",
            type="json",
            default="",
            display_options=_show(operation=["read"], selector=[""]),
            description=(
                "Optional: Enter a JSON array of key objects to read specific rows. "
                'Example: [ { "Product Group": "Helmet" } ]'
            ),
        ),
        # Create
        NodeParameter(
            name="recordData",
            display_name="Record Data",
            type="json",
            default="",
            display_options=_show(operation=["create"]),
            description=(
                "Enter a JSON array of objects representing the record(s) to add. "
                "Each object must include the key fields required by your table. Example:"
                '\n\n```json\n[{\n  "Product Group": "New Product Group",\n'
                '  "Product Group Short Code": "NPG"\n}]\n```'
            ),
        ),
        # Update
        NodeParameter(
            name="updateData",
            display_name="Update Data",
            type="json",
            default="",
            display_options=_show(operation=["update"]),
            description=(
                "Enter a JSON array of objects representing the record(s) to update. "
                "Each object must include the key fields and the fields to update. Example:"
                '\n\n```json\n[{\n  "Product Group": "Existing Group",\n'
                '  "Product Group Short Code": "EG"\n}]\n```'
            ),
        ),
        # Delete
        NodeParameter(
            name="deleteData",
            display_name="Delete Data (JSON)",
            type="json",
            default="",
            display_options=_show(operation=["delete"]),
            description=(
                "Enter a JSON array of objects specifying the key fields of the record(s) to delete. "
                'Example:\n\n```json\n[{\n  "Product Group": "Group To Delete"\n}]\n```'
            ),
        ),
        # Invoke
        NodeParameter(
            name="actionName",
            display_name="Action Name",
            type="string",
            default="",
            display_options=_show(operation=["invoke"]),
            description='The name of the action to invoke. For example, "IncrementCountAction".',
        ),
        NodeParameter(
            name="actionProperties",
            display_name="Action Properties",
            type="json",
            default="",
            display_options=_show(operation=["invoke"]),
            description=(
                "Optional: Enter additional properties for the action as a JSON object. For example:"
                '\n\n```json\n{"UserSettings": {"Option 1": "value1", "Option 2": "value2"}}\n```'
            ),
        ),
        NodeParameter(
            name="invokeRows",
            display_name="Rows (for Invoke, if needed)",
            type="json",
            default="",
            display_options=_show(operation=["invoke"]),
            description=(
                "Optional: Enter a JSON array of key objects for the rows on which to invoke the action. "
                'Example: [ { "Product Group": "Group Key" } ]'
            ),
        ),
        # Sent as Properties with every request
        NodeParameter(
            name="locale",
            display_name="Locale",
            type="string",
            default="en-US",
            description="Locale used for formatting dates and numbers (e.g., en-US).",
        ),
        NodeParameter(
            name="location",
            display_name="Location",
            type="string",
            default="47.623098, -122.330184",
            description="Geographical coordinates (e.g., 47.623098, -122.330184).",
        ),
        NodeParameter(
            name="timezone",
            display_name="Timezone",
            type="string",
            default="Pacific Standard Time",
            description="Timezone used for date/time formatting.",
        ),
    ]
    return [p.as_property() for p in parameters]


__all__ = [
    "APPSHEET_API_CREDENTIAL",
    "COMMON_PARAMETERS",
    "CREDENTIAL_NAME",
    "NODE_CREDENTIALS",
    "OPERATION_OPTIONS",
    "build_parameters",
]
