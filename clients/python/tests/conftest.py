"""Shared fixtures for yawp client tests."""

from typing import Any

import pytest

from yawp import Yawp, YawpSettings


class RecordingTransport:
    """Fake transport recording every call and replaying queued responses."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._responses: list[Any] = []

    def respond(self, *responses: Any) -> None:
        self._responses.extend(responses)

    async def __call__(self, url: str, options: dict[str, Any]) -> Any:
        self.calls.append((url, options))
        if self._responses:
            return self._responses.pop(0)
        return None

    @property
    def last_url(self) -> str:
        return self.calls[-1][0]

    @property
    def last_options(self) -> dict[str, Any]:
        return self.calls[-1][1]


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def settings():
    return YawpSettings(base_url="/api")


@pytest.fixture
def api(transport, settings):
    return Yawp(transport, settings)
