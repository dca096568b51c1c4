"""Pytest configuration and fixtures."""
import os
from unittest.mock import Mock

import pytest

# Set test environment variables
os.environ["APPSHEET_ENV"] = "test"
os.environ["APPSHEET_LOG_FORMAT"] = "text"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild settings from the environment for every test."""
    from src.nodepack_runtime.config import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def credentials_data():
    """Raw appSheetApi credential values as the host stores them."""
    return {"apiKey": "V2-test-access-key", "appId": "c9f1d2e3-app-id"}


@pytest.fixture
def credentials(credentials_data):
    from nodepacks.appsheet.models import AppSheetCredentials

    return AppSheetCredentials.model_validate(credentials_data)


def make_response(payload, status_code=200):
    """Mock HttpResponse returning payload from json()."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def response_factory():
    """Factory for mock HttpResponse objects."""
    return make_response


@pytest.fixture
def http_client():
    """Mock HttpClient; queue responses via http_client.post.side_effect."""
    from src.node_sdk.http import HttpClient

    client = Mock(spec=HttpClient)
    client.post.return_value = make_response({"Rows": []})
    return client


@pytest.fixture
def run_node(credentials_data, http_client):
    """
    Run an AppSheet node with the given parameters and input items.

    Returns (output, http_client).
    """
    from nodepacks.appsheet.actions import AppSheetDispatcher
    from nodepacks.appsheet.nodes import AppSheetNode
    from src.node_sdk.basenode import NodeExecutionContext

    def _run(parameters, items=None, node_class=AppSheetNode, credentials=None):
        node = node_class(dispatcher=AppSheetDispatcher(client=http_client))
        node.set_context(
            NodeExecutionContext(
                parameters=parameters,
                credentials={"appSheetApi": credentials or credentials_data},
                input_data=items if items is not None else [{"json": {}}],
                workflow_id="wf-test",
                node_name="AppSheet",
            )
        )
        return node.execute(), http_client

    return _run
