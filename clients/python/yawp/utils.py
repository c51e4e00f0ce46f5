"""Identifier, path and awaitable helpers shared by builders and resources."""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .exceptions import MissingIdentifierError


def identifier_of(obj: Any) -> Any:
    """Return the ``id`` of a mapping or object, or None when it has none."""
    if isinstance(obj, Mapping):
        value = obj.get("id")
    else:
        value = getattr(obj, "id", None)
    if value is None or value == "":
        return None
    return value


def has_id(obj: Any) -> bool:
    return identifier_of(obj) is not None


def extract_id(obj: Any) -> Any:
    """Return the identifier of ``obj``.

    Raises:
        MissingIdentifierError: If ``obj`` carries no identifier.
    """
    value = identifier_of(obj)
    if value is None:
        raise MissingIdentifierError()
    return value


def normalize(arg: Any) -> str:
    """Turn a base argument into a URL path.

    Literals (strings and numbers) are used as given, any other object is
    addressed by its identifier. A leading slash is added when missing.

    Examples:
        >>> normalize("/people")
        '/people'
        >>> normalize({"id": "/people/1"})
        '/people/1'
        >>> normalize(None)
        ''
    """
    if arg is None or arg == "":
        return ""
    if not isinstance(arg, (str, int, float)):
        arg = extract_id(arg)
    path = str(arg)
    return path if path.startswith("/") else f"/{path}"


def resolve_path(base_path: str, identifier: Any) -> str:
    """Resolve an identifier against a base path.

    Identifiers starting with "/" are full resource paths and are used as
    given, anything else is appended to ``base_path``.

    Examples:
        >>> resolve_path("/items", 7)
        '/items/7'
        >>> resolve_path("/items", "/people/1")
        '/people/1'
        >>> resolve_path("", 7)
        '/7'
    """
    path = str(identifier)
    if path.startswith("/"):
        return path
    return f"{base_path}/{path}"


async def apply_callback(result: Any, callback: Callable[[Any], Any] | None) -> Any:
    """Pass ``result`` through an optional plain or async callback."""
    if callback is None:
        return result
    value = callback(result)
    if inspect.isawaitable(value):
        value = await value
    return value


async def then(
    awaitable: Awaitable[Any],
    transform: Callable[[Any], Any] | None = None,
    callback: Callable[[Any], Any] | None = None,
) -> Any:
    """Await ``awaitable``, then apply ``transform`` and ``callback`` in order."""
    result = await awaitable
    if transform is not None:
        result = transform(result)
    return await apply_callback(result, callback)
