"""
AppSheet node errors.

Both are NodeOperationError subclasses so the host renders them with the
failing node and item index. Transport failures are not wrapped: they
surface as HttpApiError / NodeTimeoutError from the HTTP client.
"""

from __future__ import annotations

from typing import Optional

from src.node_sdk.basenode import NodeOperationError


class InvalidFieldJson(NodeOperationError):
    """A user-supplied JSON field could not be parsed."""

    def __init__(
        self,
        field: str,
        label: str,
        expected: str,
        item_index: Optional[int] = None,
    ) -> None:
        self.field = field
        self.expected = expected
        super().__init__(
            f"Invalid JSON format in {label}. It must be {expected}.",
            item_index=item_index,
        )


class OperationUnsupported(NodeOperationError):
    """Operation value outside the recognized set."""

    def __init__(self, operation: object, item_index: Optional[int] = None) -> None:
        self.operation = operation
        super().__init__(f'Operation "{operation}" not supported!', item_index=item_index)


__all__ = ["InvalidFieldJson", "OperationUnsupported"]
