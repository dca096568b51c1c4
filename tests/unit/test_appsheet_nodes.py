"""Tests for the AppSheet node classes."""
import pytest

from nodepacks.appsheet import AIAgentAppSheetNode, AppSheetNode, InvalidFieldJson, OperationUnsupported
from nodepacks.appsheet.description import CREDENTIAL_NAME
from src.node_sdk.basenode import NodeOperationError
from src.node_sdk.tool_schema import build_tool_schema


OPERATIONS = ["create", "read", "update", "delete", "invoke"]


class TestNodeDescriptions:
    """Declared metadata of both variants."""

    @pytest.mark.parametrize("node_class", [AppSheetNode, AIAgentAppSheetNode])
    def test_same_parameters_and_operations(self, node_class):
        params = {p["name"]: p for p in node_class.properties["parameters"]}

        assert [o["value"] for o in params["operation"]["options"]] == OPERATIONS
        assert [o["value"] for o in params["region"]["options"]] == ["www.appsheet.com", "eu.appsheet.com"]
        assert params["tableName"]["required"] is True
        assert params["locale"]["default"] == "en-US"
        assert params["location"]["default"] == "47.623098, -122.330184"
        assert params["timezone"]["default"] == "Pacific Standard Time"
        assert params["rows"]["displayOptions"] == {"show": {"operation": ["read"], "selector": [""]}}
        assert node_class.description["credentials"] == [{"name": CREDENTIAL_NAME, "required": True}]

    def test_variants_differ_only_in_metadata(self):
        assert AppSheetNode.type == "appSheet"
        assert AIAgentAppSheetNode.type == "aiAgentAppSheet"
        assert AppSheetNode.description["group"] == ["transform"]
        assert AIAgentAppSheetNode.description["group"] == ["aiTools"]
        assert AIAgentAppSheetNode.description["usableAsTool"] is True
        assert "usableAsTool" not in AppSheetNode.description
        assert AppSheetNode.execute is AIAgentAppSheetNode.execute


class TestNodeExecute:
    """execute() through a real execution context."""

    def test_read_by_selector(self, run_node):
        output, client = run_node({
            "operation": "read",
            "tableName": "People",
            "selector": "FILTER(People, [Age]>=21)",
        })
        payload = client.post.call_args.kwargs["json"]

        assert output == [[{"json": {"Rows": []}, "pairedItem": {"item": 0}}]]
        assert payload["Action"] == "Find"
        assert payload["Properties"]["Selector"] == "FILTER(People, [Age]>=21)"
        assert payload["Properties"]["Locale"] == "en-US"
        assert "Rows" not in payload

    def test_defaults_fill_unset_parameters(self, run_node):
        _, client = run_node({"tableName": "People", "recordData": '[{"Name": "Ada"}]'})

        url = client.post.call_args.args[0]
        payload = client.post.call_args.kwargs["json"]
        assert url == "https://www.appsheet.com/api/v2/apps/c9f1d2e3-app-id/tables/People/Action"
        assert payload["Action"] == "Add"
        assert payload["Rows"] == [{"Name": "Ada"}]

    def test_per_item_expressions(self, run_node, http_client, response_factory):
        http_client.post.side_effect = [response_factory({"id": 1}), response_factory({"id": 2})]

        output, client = run_node(
            {
                "operation": "update",
                "tableName": "={{ $json.table }}",
                "updateData": '=[{"id": {{ $json.id }}, "Status": "done"}]',
                "locale": "={{ $json.locale }}",
            },
            items=[
                {"json": {"table": "Orders", "id": 10, "locale": "en-GB"}},
                {"json": {"table": "Order Lines", "id": 11, "locale": "de-DE"}},
            ],
        )

        first, second = client.post.call_args_list
        assert first.args[0].endswith("/tables/Orders/Action")
        assert second.args[0].endswith("/tables/Order%20Lines/Action")
        assert first.kwargs["json"]["Rows"] == [{"id": 10, "Status": "done"}]
        assert second.kwargs["json"]["Rows"] == [{"id": 11, "Status": "done"}]
        # Locale is shared: read once from item 0
        assert second.kwargs["json"]["Properties"]["Locale"] == "en-GB"
        assert [item["pairedItem"]["item"] for item in output[0]] == [0, 1]

    def test_invalid_json_names_node_and_item(self, run_node):
        with pytest.raises(InvalidFieldJson) as exc_info:
            run_node({"operation": "create", "tableName": "T", "recordData": "{not valid"})

        assert exc_info.value.field == "recordData"
        assert exc_info.value.item_index == 0
        assert isinstance(exc_info.value.node, AppSheetNode)

    def test_bad_expression_names_node_and_item(self, run_node):
        with pytest.raises(NodeOperationError) as exc_info:
            run_node(
                {"operation": "read", "tableName": "{{ $json.a + 1 }}", "selector": "TRUE"},
                items=[{"json": {"a": 1}}, {"json": {"a": 2}}],
            )

        assert "tableName" in exc_info.value.message
        assert exc_info.value.item_index == 0
        assert isinstance(exc_info.value.node, AppSheetNode)

    def test_unsupported_operation(self, run_node):
        with pytest.raises(OperationUnsupported) as exc_info:
            run_node({"operation": "truncate", "tableName": "T"})

        assert str(exc_info.value) == 'Operation "truncate" not supported!'

    def test_missing_credentials(self, run_node):
        with pytest.raises(NodeOperationError) as exc_info:
            run_node({"operation": "create", "tableName": "T", "recordData": "[]"}, credentials={"apiKey": "k"})

        assert "appId" in exc_info.value.message

    def test_agent_variant_executes_identically(self, run_node):
        params = {
            "operation": "invoke",
            "tableName": "Counters",
            "actionName": "IncrementCountAction",
            "actionProperties": "",
            "invokeRows": "",
        }
        _, client = run_node(params, node_class=AIAgentAppSheetNode)

        assert client.post.call_args.kwargs["json"] == {
            "AppID": "c9f1d2e3-app-id",
            "TableName": "Counters",
            "Action": "IncrementCountAction",
            "Properties": {
                "Locale": "en-US",
                "Location": "47.623098, -122.330184",
                "Timezone": "Pacific Standard Time",
            },
        }


class TestAgentToolSchema:
    """Tool schema of the AI agent variant."""

    def test_operation_enum_and_open_fields(self):
        schema = build_tool_schema(AIAgentAppSheetNode, {})
        properties = schema["parameters"]["properties"]

        assert schema["name"] == "aiAgentAppSheet"
        assert properties["operation"]["enum"] == OPERATIONS
        assert "tableName" in schema["parameters"]["required"]
        assert properties["selector"]["description"].startswith("[read]")
        for hidden in ("region", "locale", "location", "timezone"):
            assert hidden not in properties

    def test_configured_values_are_hidden(self):
        schema = build_tool_schema(
            AIAgentAppSheetNode,
            {"operation": "read", "tableName": "People", "selector": ""},
        )
        properties = schema["parameters"]["properties"]

        assert properties["operation"]["const"] == "read"
        assert "tableName" not in properties
        assert "tableName" not in schema["parameters"]["required"]
        assert "selector" in properties

    def test_standard_node_uses_generic_schema(self):
        schema = build_tool_schema(AppSheetNode, {})

        assert list(schema["parameters"]["properties"]) == ["operation"]
