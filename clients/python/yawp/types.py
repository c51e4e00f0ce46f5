"""Type definitions for the yawp client."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HttpMethod(str, Enum):
    """HTTP verbs the builder can dispatch."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


def to_json(value: Any) -> str:
    """Serialize a request payload compactly.

    Objects exposing ``to_dict()`` (resource instances) are serialized through it.
    """
    return json.dumps(value, separators=(",", ":"), default=_encode)


def _encode(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class QueryClause:
    """Accumulated where/order/sort/limit filter state."""

    where: Any = None
    order: Any = None
    sort: Any = None
    limit: int | None = None

    def is_empty(self) -> bool:
        """Check if no clause has been set."""
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, skipping unset clauses."""
        result: dict[str, Any] = {}
        if self.where is not None:
            result["where"] = self.where
        if self.order is not None:
            result["order"] = self.order
        if self.sort is not None:
            result["sort"] = self.sort
        if self.limit is not None:
            result["limit"] = self.limit
        return result

    def to_json(self) -> str:
        """Serialize for the ``q`` query parameter."""
        return to_json(self.to_dict())


@dataclass
class PendingRequest:
    """Request state accumulated by a builder until the next dispatch."""

    path: str
    method: HttpMethod = HttpMethod.GET
    query: dict[str, Any] = field(default_factory=dict)
    body: str | None = None

    def to_options(self, defaults: dict[str, Any] | None = None) -> dict[str, Any]:
        """Render the options mapping handed to the transport.

        Args:
            defaults: Default transport options merged into every request.

        Returns:
            Options with ``method`` and ``json`` always set, ``query`` and
            ``body`` only when present.
        """
        options: dict[str, Any] = dict(defaults or {})
        options["method"] = self.method.value
        options["json"] = True
        if self.query:
            options["query"] = dict(self.query)
        if self.body is not None:
            options["body"] = self.body
        return options
