"""
AppSheet request builder and dispatcher.

Turns the node's parameters into one POST per input item:

    POST https://{region}/api/v2/apps/{appId}/tables/{table}/Action
    {"AppID": ..., "TableName": ..., "Action": ..., "Properties": {...}, "Rows": [...]}

Items are handled strictly in order; the first failure aborts the run.
Locale, location, timezone and region are read once from item 0 and
shared by every item of the execution.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from src.node_sdk.basenode import NodeExecutionData, NodeOperationError
from src.node_sdk.http import HttpClient
from src.node_sdk.items import return_json_array
from src.nodepack_runtime.config import get_settings
from src.nodepack_runtime.observability import with_execution_context

from .errors import InvalidFieldJson, OperationUnsupported
from .models import (
    ActionBody,
    AppSheetCredentials,
    CommonProperties,
    Operation,
    OperationRequest,
)

logger = logging.getLogger(__name__)

ParameterGetter = Callable[[str, int], Any]

ROWS_EXPECTED = "a JSON array of objects"
OBJECT_EXPECTED = "a JSON object"

# Fixed AppSheet Action value per CRUD operation; invoke uses actionName
CRUD_ACTIONS = {
    Operation.CREATE: "Add",
    Operation.READ: "Find",
    Operation.UPDATE: "Edit",
    Operation.DELETE: "Delete",
}

# Parameters read per item for each operation; read also reads `rows` when the selector is blank
OPERATION_FIELDS: Dict[Operation, tuple] = {
    Operation.CREATE: ("recordData",),
    Operation.READ: ("selector",),
    Operation.UPDATE: ("updateData",),
    Operation.DELETE: ("deleteData",),
    Operation.INVOKE: ("actionName", "actionProperties", "invokeRows"),
}

# Labels used in error messages
FIELD_LABELS = {
    "recordData": "Record Data",
    "rows": "Rows data",
    "updateData": "Update Data",
    "deleteData": "Delete Data",
    "actionProperties": "Action Properties",
    "invokeRows": "Invoke Rows data",
}

# Characters encodeURIComponent leaves unescaped on top of quote()'s own
_URI_COMPONENT_SAFE = "!~*'()"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_json_field(
    field: str,
    value: Any,
    expected: str = ROWS_EXPECTED,
    item_index: Optional[int] = None,
) -> Any:
    """
    Parse a JSON-typed parameter.

    Strings are decoded; values the host already decoded (lists, dicts)
    are returned as they are.
    """
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise InvalidFieldJson(field, FIELD_LABELS[field], expected, item_index) from e
    if value is None:
        raise InvalidFieldJson(field, FIELD_LABELS[field], expected, item_index)
    return value


def read_common_properties(get_parameter: ParameterGetter) -> CommonProperties:
    """Locale, location and timezone, always taken from item 0."""
    values = {name: get_parameter(name, 0) for name in ("locale", "location", "timezone")}
    return CommonProperties(**{k: str(v) for k, v in values.items() if v is not None})


def read_credentials(raw: Dict[str, Any]) -> AppSheetCredentials:
    try:
        return AppSheetCredentials.model_validate(raw)
    except ValidationError as e:
        # A non-mapping credential reports an empty loc
        missing = ", ".join(str(err["loc"][0]) if err["loc"] else "credentials" for err in e.errors())
        raise NodeOperationError(f"AppSheet credentials are incomplete: {missing}") from e


def build_operation_request(
    get_parameter: ParameterGetter,
    item_index: int,
    credentials: AppSheetCredentials,
    common: CommonProperties,
    region: str,
) -> OperationRequest:
    """Read the per-item parameters into an OperationRequest."""
    raw_operation = get_parameter("operation", item_index)
    try:
        operation = Operation(raw_operation)
    except ValueError:
        raise OperationUnsupported(raw_operation, item_index) from None

    table_name = get_parameter("tableName", item_index)
    fields = {name: get_parameter(name, item_index) for name in OPERATION_FIELDS[operation]}
    if operation is Operation.READ and _is_blank(fields["selector"]):
        fields["rows"] = get_parameter("rows", item_index)

    return OperationRequest(
        operation=operation,
        table_name="" if table_name is None else str(table_name),
        region=region,
        credentials=credentials,
        common=common,
        fields=fields,
        item_index=item_index,
    )


def build_action_body(request: OperationRequest) -> ActionBody:
    """Map an OperationRequest to the AppSheet Action payload."""
    fields = request.fields
    index = request.item_index
    properties = request.common.to_properties()
    body: Dict[str, Any] = {
        "AppID": request.credentials.app_id,
        "TableName": request.table_name,
    }

    if request.operation is Operation.CREATE:
        body["Rows"] = parse_json_field("recordData", fields.get("recordData"), item_index=index)

    elif request.operation is Operation.READ:
        selector = fields.get("selector")
        if not _is_blank(selector):
            properties["Selector"] = selector
        else:
            body["Rows"] = parse_json_field("rows", fields.get("rows"), item_index=index)

    elif request.operation is Operation.UPDATE:
        body["Rows"] = parse_json_field("updateData", fields.get("updateData"), item_index=index)

    elif request.operation is Operation.DELETE:
        body["Rows"] = parse_json_field("deleteData", fields.get("deleteData"), item_index=index)

    elif request.operation is Operation.INVOKE:
        action_properties = fields.get("actionProperties")
        if not _is_blank(action_properties):
            overrides = parse_json_field(
                "actionProperties", action_properties, OBJECT_EXPECTED, item_index=index
            )
            if not isinstance(overrides, dict):
                raise InvalidFieldJson(
                    "actionProperties", FIELD_LABELS["actionProperties"], OBJECT_EXPECTED, index
                )
            properties.update(overrides)

        invoke_rows = fields.get("invokeRows")
        if not _is_blank(invoke_rows):
            body["Rows"] = parse_json_field("invokeRows", invoke_rows, item_index=index)

    action = CRUD_ACTIONS.get(request.operation)
    if action is None:
        action_name = fields.get("actionName")
        action = "" if action_name is None else str(action_name)

    body["Action"] = action
    body["Properties"] = properties
    return ActionBody.model_validate(body)


def build_action_url(region: str, app_id: str, table_name: str) -> str:
    """Table Action endpoint; the table name is percent-encoded like encodeURIComponent."""
    return (
        f"https://{region}/api/v2/apps/{app_id}"
        f"/tables/{quote(table_name, safe=_URI_COMPONENT_SAFE)}/Action"
    )


def build_headers(credentials: AppSheetCredentials) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "ApplicationAccessKey": credentials.api_key.get_secret_value(),
    }


def normalize_response(response: Any) -> List[Any]:
    """Array responses are spread, anything else is a single element."""
    if isinstance(response, list):
        return list(response)
    return [response]


class AppSheetDispatcher:
    """
    Sends one AppSheet Action call per OperationRequest.

    No retries and no rate limiting. Transport errors (HttpApiError,
    NodeTimeoutError) propagate to the caller untouched.
    """

    def __init__(self, client: Optional[HttpClient] = None):
        self.client = client or HttpClient(timeout=get_settings().http_timeout_s)

    def dispatch(self, request: OperationRequest) -> List[Any]:
        body = build_action_body(request)
        url = build_action_url(request.region, request.credentials.app_id, request.table_name)

        logger.debug(
            f"AppSheet {body.action!r} on table {request.table_name!r}",
            extra=with_execution_context(item_index=request.item_index),
        )
        response = self.client.post(
            url,
            json=body.to_payload(),
            headers=build_headers(request.credentials),
        )
        response.raise_for_status()
        return normalize_response(response.json())


def execute_items(
    items: List[Dict[str, Any]],
    get_parameter: ParameterGetter,
    credentials: AppSheetCredentials,
    dispatcher: AppSheetDispatcher,
) -> List[NodeExecutionData]:
    """
    Run one AppSheet call per input item and collect the output items.

    Output order follows input order; each response element is paired
    with the item that produced it.
    """
    results: List[NodeExecutionData] = []
    if not items:
        return results

    common = read_common_properties(get_parameter)
    region = get_parameter("region", 0) or get_settings().default_region

    for i in range(len(items)):
        try:
            request = build_operation_request(get_parameter, i, credentials, common, region)
            results.extend(return_json_array(dispatcher.dispatch(request), item_index=i))
        except Exception as e:
            if isinstance(e, NodeOperationError) and e.item_index is None:
                e.item_index = i
            logger.error(
                f"AppSheet call failed for item {i}: {e}",
                extra=with_execution_context(item_index=i),
            )
            raise

    return results


__all__ = [
    "AppSheetDispatcher",
    "build_action_body",
    "build_action_url",
    "build_headers",
    "build_operation_request",
    "execute_items",
    "normalize_response",
    "parse_json_field",
    "read_common_properties",
    "read_credentials",
]
