"""Process-wide configuration for yawp endpoints.

Settings are meant to be written once at startup, before the first request is
issued. Nothing guards against concurrent writers.

Usage:
    import yawp

    yawp.config(lambda c: (
        c.base_url("https://example.com/api"),
        c.default_fetch_options({"headers": {"X-Tenant": "acme"}}),
    ))
"""

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

DEFAULT_BASE_URL = "/api"


@dataclass
class YawpSettings:
    """Base URL prefix and default transport options read at every dispatch."""

    base_url: str = DEFAULT_BASE_URL
    default_fetch_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "YawpSettings":
        """Create settings from the YAWP_BASE_URL env var."""
        return cls(base_url=os.environ.get("YAWP_BASE_URL", DEFAULT_BASE_URL))


class Configurator:
    """Setter surface handed to the ``config`` callback."""

    def __init__(self, target: YawpSettings):
        self._target = target

    def base_url(self, url: str) -> None:
        self._target.base_url = url

    def default_fetch_options(self, options: dict[str, Any]) -> None:
        self._target.default_fetch_options = dict(options)


settings = YawpSettings()


def config(callback: Callable[[Configurator], Any], target: YawpSettings | None = None) -> None:
    """Configure settings through a callback.

    Args:
        callback: Receives a Configurator exposing ``base_url`` and
            ``default_fetch_options`` setters.
        target: Settings to change (the process-wide settings if not given).
    """
    callback(Configurator(target if target is not None else settings))
