"""yawp Python Client.

A fluent client for yawp-style REST endpoints: chained calls accumulate a
request, terminal calls dispatch it and wrap the JSON response.

Usage:
    from yawp import Yawp, config

    config(lambda c: c.base_url("/api"))

    async with Yawp.connect("http://localhost:8080") as api:
        people = api("/people")

        # Query
        adults = await people.where("age", ">=", 18).order("name").list()
        ada = await people.fetch(1)

        # Create, then update through the instance
        person = people.model(name="Grace")
        await person.save()
        person.name = "Grace Hopper"
        await person.save()

        # Custom actions
        await person.post("activate")
        await person.destroy()
"""

from .builder import RequestBuilder
from .client import Yawp
from .configuration import YawpSettings, config, settings
from .exceptions import CardinalityError, MissingIdentifierError, YawpError
from .resource import BaseMethods, Resource
from .transport import HttpxTransport, Transport
from .types import HttpMethod, PendingRequest, QueryClause

__version__ = "0.1.0"
__all__ = [
    "Yawp",
    "RequestBuilder",
    "Resource",
    "BaseMethods",
    "HttpxTransport",
    "Transport",
    "YawpSettings",
    "config",
    "settings",
    "YawpError",
    "MissingIdentifierError",
    "CardinalityError",
    "HttpMethod",
    "PendingRequest",
    "QueryClause",
]
