"""Fluent request builder for yawp endpoints.

A builder is bound to a base path. Chain methods accumulate the pending
request (path, query parameters, query clause, body); terminal methods compose
the transport options, reset the builder back to its base path and return an
awaitable for the response. Composition happens when the terminal method is
called, not when its result is awaited, so a builder can start a new chain
right away. Running several chains on one builder at the same time is not
supported.

Example:
    >>> people = Yawp(transport)("/people")
    >>> adults = await people.where("age", ">=", 18).order([{"p": "name"}]).list()
    >>> ada = await people.fetch(1)
    >>> await people.post("reindex")
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from . import configuration
from .configuration import YawpSettings
from .exceptions import CardinalityError
from .resource import Resource
from .transport import Transport
from .types import HttpMethod, PendingRequest, QueryClause, to_json
from .utils import normalize, resolve_path, then

logger = logging.getLogger(__name__)

Callback = Callable[[Any], Any]


class RequestBuilder:
    """Accumulates one request against a resource path and dispatches it.

    Args:
        base: Base path, or an object addressed by its identifier.
        transport: Async callable ``(url, options) -> response``.
        settings: Base URL and default transport options. The process-wide
            settings are read at dispatch time when not given.
        model: Resource class responses are wrapped into. A Resource subclass
            bound to this builder is created when not given.

    Raises:
        MissingIdentifierError: If ``base`` is an object without identifier.
    """

    def __init__(
        self,
        base: Any = None,
        *,
        transport: Transport,
        settings: YawpSettings | None = None,
        model: type[Resource] | None = None,
    ):
        self.base_path = normalize(base)
        self.transport = transport
        self._settings = settings
        self.model: type[Resource] = model or type(
            _model_name(self.base_path), (Resource,), {"endpoint": self}
        )
        self.clear()

    def __repr__(self) -> str:
        return f"RequestBuilder({self.base_path!r})"

    @property
    def settings(self) -> YawpSettings:
        return self._settings if self._settings is not None else configuration.settings

    @property
    def pending(self) -> PendingRequest:
        """Request state accumulated so far."""
        return self._pending

    @property
    def clause(self) -> QueryClause:
        """Query clause accumulated so far."""
        return self._clause

    def rebind(self, model: type[Resource]) -> RequestBuilder:
        """Create a fresh builder on the same base path wrapping into ``model``."""
        return type(self)(
            self.base_path, transport=self.transport, settings=self._settings, model=model
        )

    def subclass(
        self,
        init: Callable[..., None] | None = None,
        name: str | None = None,
    ) -> type[Resource]:
        """Create a Resource subclass bound to a fresh builder on this base path.

        Args:
            init: Replaces the default constructor logic; called with the new
                instance followed by the constructor arguments.
            name: Class name (defaults to the current model name).

        Returns:
            The new class. Its instances reach the unspecialized operations
            through ``base_methods``.
        """
        namespace: dict[str, Any] = {}
        if init is not None:

            def __init__(instance: Resource, *args: Any, **kwargs: Any) -> None:
                init(instance, *args, **kwargs)

            namespace["__init__"] = __init__
        return type(name or self.model.__name__, (self.model,), namespace)

    # =========================================================================
    # Request state
    # =========================================================================

    def clear(self) -> None:
        """Reset pending state back to the base path."""
        self._pending = PendingRequest(path=self.base_path)
        self._clause = QueryClause()

    def at(self, path: str) -> RequestBuilder:
        """Point the pending request at an explicit path."""
        self._pending.path = path
        return self

    def instance_path(self, identifier: Any) -> str:
        """Resolve an identifier to a path.

        Identifiers starting with "/" are full resource paths, anything else
        is resolved under the base path.
        """
        return resolve_path(self.base_path, identifier)

    @contextmanager
    def _composing(self) -> Iterator[None]:
        """Reset pending state if composing a terminal call fails."""
        try:
            yield
        except Exception:
            self.clear()
            raise

    def prepare_request_options(self, method: HttpMethod) -> tuple[str, dict[str, Any]]:
        """Snapshot the pending request into ``(url, options)`` and reset."""
        pending = self._pending
        pending.method = method
        self.clear()

        settings = self.settings
        url = f"{settings.base_url}{pending.path}"
        options = pending.to_options(settings.default_fetch_options)
        logger.debug("Dispatching request", extra={"method": method.value, "url": url})
        return url, options

    def _dispatch(
        self,
        method: HttpMethod,
        transform: Callable[[Any], Any] | None = None,
        callback: Callback | None = None,
    ) -> Awaitable[Any]:
        url, options = self.prepare_request_options(method)
        return then(self.transport(url, options), transform, callback)

    def wrap_instance(self, data: Mapping[str, Any]) -> Resource:
        return self.model(data)

    def wrap_array(self, objects: Iterable[Mapping[str, Any]] | None) -> list[Resource]:
        """Wrap a JSON array, an empty body counts as no results."""
        if objects is None:
            return []
        return [self.wrap_instance(obj) for obj in objects]

    # =========================================================================
    # Query
    # =========================================================================

    def from_(self, parent: Any) -> RequestBuilder:
        """Nest the current path under a parent resource path or object."""
        self._pending.path = normalize(parent) + self._pending.path
        return self

    def where(self, data: Any, *more: Any) -> RequestBuilder:
        """Set the where clause.

        A single argument is used as given, several arguments are stored as
        one ordered list, e.g. ``where("age", ">", 18)``.
        """
        self._clause.where = [data, *more] if more else data
        return self

    def order(self, data: Any) -> RequestBuilder:
        self._clause.order = data
        return self

    def sort(self, data: Any) -> RequestBuilder:
        self._clause.sort = data
        return self

    def limit(self, count: int) -> RequestBuilder:
        self._clause.limit = count
        return self

    def transform(self, name: str) -> RequestBuilder:
        """Ask the server to apply a named transformer to the results."""
        return self.param("t", name)

    def params(self, params: Mapping[str, Any]) -> RequestBuilder:
        self._pending.query.update(params)
        return self

    def param(self, key: str, value: Any) -> RequestBuilder:
        self._pending.query[key] = value
        return self

    def json(self, obj: Any) -> RequestBuilder:
        """Set the JSON body sent with the next request."""
        with self._composing():
            self._pending.body = to_json(obj)
        return self

    def _setup_query(self) -> None:
        if not self._clause.is_empty():
            self.param("q", self._clause.to_json())

    def fetch(self, arg: Any = None) -> Awaitable[Resource]:
        """GET one object, optionally appending an identifier to the path.

        Args:
            arg: Identifier appended to the path, or a callback applied to the
                wrapped result.
        """
        callback = arg if callable(arg) else None
        with self._composing():
            if arg is not None and callback is None:
                self._pending.path += f"/{arg}"
            return self._dispatch(HttpMethod.GET, self.wrap_instance, callback)

    def list(self, callback: Callback | None = None) -> Awaitable[list[Resource]]:  # noqa: A003
        """GET the collection filtered by the query clause."""
        with self._composing():
            self._setup_query()
            return self._dispatch(HttpMethod.GET, self.wrap_array, callback)

    def first(self, callback: Callback | None = None) -> Awaitable[Resource | None]:
        """List with limit 1, resolving to the object or None."""
        self.limit(1)
        return then(self.list(), _first_or_none, callback)

    def only(self, callback: Callback | None = None) -> Awaitable[Resource]:
        """List, resolving to the sole result.

        Raises:
            CardinalityError: When awaited, if the list does not hold exactly
                one object.
        """
        return then(self.list(), _only, callback)

    # =========================================================================
    # Repository
    # =========================================================================

    def create(self, obj: Any) -> Awaitable[Any]:
        with self._composing():
            self.json(obj)
            return self._dispatch(HttpMethod.POST)

    def update(self, obj: Any) -> Awaitable[Any]:
        with self._composing():
            self.json(obj)
            return self._dispatch(HttpMethod.PUT)

    def patch(self, obj: Any) -> Awaitable[Any]:
        with self._composing():
            self.json(obj)
            return self._dispatch(HttpMethod.PATCH)

    def destroy(self) -> Awaitable[Any]:
        with self._composing():
            return self._dispatch(HttpMethod.DELETE)

    # =========================================================================
    # Actions
    # =========================================================================

    def action(self, verb: HttpMethod | str, path: str) -> Awaitable[Any]:
        """Dispatch ``verb`` to ``<current path>/<path>``.

        The segment is appended to the pending path; since every dispatch
        resets the builder, consecutive actions do not compose.
        """
        with self._composing():
            method = verb if isinstance(verb, HttpMethod) else HttpMethod(verb.upper())
            self._pending.path += f"/{path}"
            return self._dispatch(method)

    def get(self, action: str) -> Awaitable[Any]:
        return self.action(HttpMethod.GET, action)

    def put(self, action: str) -> Awaitable[Any]:
        return self.action(HttpMethod.PUT, action)

    def post(self, action: str) -> Awaitable[Any]:
        return self.action(HttpMethod.POST, action)

    def patch_action(self, action: str) -> Awaitable[Any]:
        return self.action(HttpMethod.PATCH, action)

    def delete_action(self, action: str) -> Awaitable[Any]:
        return self.action(HttpMethod.DELETE, action)


def _model_name(path: str) -> str:
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    name = "".join(part.capitalize() for part in segment.replace("-", "_").split("_"))
    return name if name.isidentifier() else "Resource"


def _first_or_none(objects: list[Resource]) -> Resource | None:
    return objects[0] if objects else None


def _only(objects: list[Resource]) -> Resource:
    if len(objects) != 1:
        raise CardinalityError(len(objects))
    return objects[0]
