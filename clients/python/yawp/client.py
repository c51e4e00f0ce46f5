"""yawp client entry point."""

from collections.abc import Awaitable
from typing import Any

from .builder import RequestBuilder
from .configuration import YawpSettings
from .resource import Resource
from .transport import HttpxTransport, Transport
from .utils import extract_id, resolve_path


class Yawp:
    """Entry point producing request builders over an injected transport.

    Args:
        transport: Async callable ``(url, options) -> response``.
        settings: Base URL prefix and default transport options. When not
            given, the process-wide settings changed by ``yawp.config`` are
            read on every dispatch.

    Example:
        >>> api = Yawp(transport)
        >>> people = api("/people")
        >>> first = await people.where({"active": True}).order("name").first()
        >>> await api.destroy(first)
    """

    def __init__(self, transport: Transport, settings: YawpSettings | None = None):
        self.transport = transport
        self.settings = settings

    @classmethod
    def connect(
        cls,
        base_url: str = "http://localhost:8080",
        *,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        settings: YawpSettings | None = None,
    ) -> "Yawp":
        """Create a client sending requests through an ``HttpxTransport``.

        Args:
            base_url: Server origin (e.g., "http://localhost:8080").
            timeout: Request timeout in seconds.
            headers: Headers sent with every request.
            settings: Explicit settings instead of the process-wide ones.
        """
        return cls(HttpxTransport(base_url, timeout=timeout, headers=headers), settings)

    async def close(self) -> None:
        """Close the transport if it holds resources."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "Yawp":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __call__(self, base: Any = None) -> RequestBuilder:
        """Create a builder bound to ``base``.

        Args:
            base: Path such as "/people", or an object addressed by its
                identifier.

        Raises:
            MissingIdentifierError: If ``base`` is an object without identifier.
        """
        return RequestBuilder(base, transport=self.transport, settings=self.settings)

    for_resource = __call__

    def resource(self, base: Any) -> type[Resource]:
        """Create a Resource class bound to a fresh builder on ``base``.

        Example:
            >>> class Person(api.resource("/people")):
            ...     pass
            >>> people = await Person.endpoint.list()
        """
        return self(base).model

    # =========================================================================
    # Object-addressed repository operations
    # =========================================================================

    def update(self, obj: Any) -> Awaitable[Any]:
        """PUT ``obj`` to the path of its identifier.

        Identifiers resolve against the root the same way ``Resource`` resolves
        them against its endpoint: "/people/1" is used as given, ``7`` goes
        to "/7".
        """
        return self(_object_path(obj)).update(obj)

    def patch(self, obj: Any) -> Awaitable[Any]:
        """PATCH ``obj`` to the path of its identifier."""
        return self(_object_path(obj)).patch(obj)

    def destroy(self, obj: Any) -> Awaitable[Any]:
        """DELETE the path of the identifier of ``obj``."""
        return self(_object_path(obj)).destroy()


def _object_path(obj: Any) -> str:
    return resolve_path("", extract_id(obj))
