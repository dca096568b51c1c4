"""
AppSheet request models.

OperationRequest is what the node reads for one input item; ActionBody is
the JSON payload POSTed to the table's Action endpoint.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Operation(str, Enum):
    """Operations offered by the node."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    INVOKE = "invoke"


class Region(str, Enum):
    """AppSheet API host domains."""
    GLOBAL = "www.appsheet.com"
    EU = "eu.appsheet.com"


class AppSheetCredentials(BaseModel):
    """appSheetApi credential values. Passed through, never format-checked."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    api_key: SecretStr = Field(..., alias="apiKey")
    app_id: str = Field(..., alias="appId")


class CommonProperties(BaseModel):
    """Locale/location/timezone sent as Properties with every request."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    locale: str = Field("en-US", alias="Locale")
    location: str = Field("47.623098, -122.330184", alias="Location")
    timezone: str = Field("Pacific Standard Time", alias="Timezone")

    def to_properties(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class OperationRequest(BaseModel):
    """Everything needed to build one AppSheet call for one input item."""
    model_config = ConfigDict(frozen=True)

    operation: Operation
    table_name: str
    region: str
    credentials: AppSheetCredentials
    common: CommonProperties
    # Raw operation-specific field values keyed by parameter name
    fields: Dict[str, Any] = Field(default_factory=dict)
    item_index: int = 0


class ActionBody(BaseModel):
    """
    Wire payload for POST .../tables/{table}/Action.

    Rows is only emitted when it was explicitly set, so a read by selector
    or an invoke without rows sends no Rows key at all.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    app_id: str = Field(..., alias="AppID")
    table_name: str = Field(..., alias="TableName")
    action: str = Field(..., alias="Action")
    properties: Dict[str, Any] = Field(..., alias="Properties")
    rows: Any = Field(None, alias="Rows")

    @property
    def has_rows(self) -> bool:
        return "rows" in self.model_fields_set

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


__all__ = [
    "ActionBody",
    "AppSheetCredentials",
    "CommonProperties",
    "Operation",
    "OperationRequest",
    "Region",
]
