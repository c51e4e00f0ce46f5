"""Resource instances wrapping JSON objects returned by an endpoint."""

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from .exceptions import YawpError
from .utils import extract_id, has_id, identifier_of, then

if TYPE_CHECKING:
    from .builder import RequestBuilder

Callback = Callable[[Any], Any]


class Resource:
    """A plain data object built from a JSON response.

    Fields become attributes. Classes produced by an endpoint are bound to it
    through ``endpoint``, which the instance methods use to reach the server.
    Subclassing a bound class binds a fresh builder on the same base path to
    the subclass, so results of ``Subclass.endpoint.list()`` are wrapped into
    the subclass.

    Example:
        >>> class Person(api.resource("/people")):
        ...     async def save(self, callback=None):
        ...         self.name = self.name.strip()
        ...         return await self.base_methods.save(callback)
        >>> person = Person(name=" Ada ")
        >>> await person.save()
        >>> person.id
        '/people/1'
    """

    endpoint: ClassVar["RequestBuilder | None"] = None

    def __init__(self, data: Mapping[str, Any] | None = None, **props: Any):
        if data:
            self.__dict__.update(data)
        if props:
            self.__dict__.update(props)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "endpoint" in cls.__dict__:
            return
        parent = getattr(cls, "endpoint", None)
        if parent is not None:
            cls.endpoint = parent.rebind(cls)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Resource):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for request bodies."""
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}

    @property
    def base_methods(self) -> "BaseMethods":
        """Original Resource operations bound to this instance."""
        return BaseMethods(self)

    # =========================================================================
    # Repository
    # =========================================================================

    def save(self, callback: Callback | None = None) -> Awaitable[Any]:
        """Update the instance if it has an identifier, create it otherwise.

        On create the server-assigned ``id`` is copied onto the instance.
        """
        endpoint = self._endpoint()
        if has_id(self):
            request = endpoint.at(endpoint.instance_path(self.id)).update(self)
        else:
            request = self._create(endpoint.create(self))
        return apply_callback_after(request, callback)

    async def _create(self, request: Awaitable[Any]) -> Any:
        created = await request
        identifier = identifier_of(created)
        if identifier is not None:
            self.id = identifier
        return created

    def destroy(self, callback: Callback | None = None) -> Awaitable[Any]:
        """Delete this instance on the server."""
        return apply_callback_after(self._at_instance().destroy(), callback)

    # =========================================================================
    # Actions
    # =========================================================================

    def get(self, action: str) -> Awaitable[Any]:
        return self._at_instance().get(action)

    def put(self, action: str) -> Awaitable[Any]:
        return self._at_instance().put(action)

    def post(self, action: str) -> Awaitable[Any]:
        return self._at_instance().post(action)

    def patch_action(self, action: str) -> Awaitable[Any]:
        return self._at_instance().patch_action(action)

    def delete_action(self, action: str) -> Awaitable[Any]:
        return self._at_instance().delete_action(action)

    def _endpoint(self) -> "RequestBuilder":
        endpoint = type(self).endpoint
        if endpoint is None:
            raise YawpError(f"{type(self).__name__} is not bound to an endpoint")
        return endpoint

    def _at_instance(self) -> "RequestBuilder":
        endpoint = self._endpoint()
        return endpoint.at(endpoint.instance_path(extract_id(self)))


def apply_callback_after(request: Awaitable[Any], callback: Callback | None) -> Awaitable[Any]:
    if callback is None:
        return request
    return then(request, callback=callback)


class BaseMethods:
    """Explicit delegate to the unspecialized Resource operations.

    Subclasses overriding ``save`` or ``destroy`` reach the original
    implementation through ``self.base_methods``.
    """

    def __init__(self, instance: Resource):
        self._instance = instance

    def to_dict(self) -> dict[str, Any]:
        return Resource.to_dict(self._instance)

    def save(self, callback: Callback | None = None) -> Awaitable[Any]:
        return Resource.save(self._instance, callback)

    def destroy(self, callback: Callback | None = None) -> Awaitable[Any]:
        return Resource.destroy(self._instance, callback)

    def get(self, action: str) -> Awaitable[Any]:
        return Resource.get(self._instance, action)

    def put(self, action: str) -> Awaitable[Any]:
        return Resource.put(self._instance, action)

    def post(self, action: str) -> Awaitable[Any]:
        return Resource.post(self._instance, action)

    def patch_action(self, action: str) -> Awaitable[Any]:
        return Resource.patch_action(self._instance, action)

    def delete_action(self, action: str) -> Awaitable[Any]:
        return Resource.delete_action(self._instance, action)
