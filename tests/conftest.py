"""Shared fixtures: a controllable in-memory transport and a sample entity."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pytest

from entity_actions.entity import Record
from entity_actions.naming import IdentityKeys


@dataclass
class SentRequest:
    """One call made to FakeTransport.ajax()."""

    url: str
    method: str
    options: Mapping[str, Any]
    future: asyncio.Future[Any]

    @property
    def data(self) -> Mapping[str, Any]:
        return self.options["data"]


class FakeTransport:
    """Transport whose responses are settled by the test.

    Each ajax() call returns a fresh future; resolve it with
    transport.last.future.set_result(...) or set_exception(...).
    """

    def __init__(self) -> None:
        self.requests: list[SentRequest] = []

    def ajax(self, url: str, method: str, options: Mapping[str, Any]) -> asyncio.Future[Any]:
        future = asyncio.get_running_loop().create_future()
        self.requests.append(SentRequest(url, method, options, future))
        return future

    @property
    def last(self) -> SentRequest:
        return self.requests[-1]


class TrackingRecord(Record):
    """Record that remembers every set() call."""

    model_name = "post"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.writes: list[tuple[str, Any]] = []

    def set(self, key: str, value: Any) -> None:
        self.writes.append((key, value))
        super().set(key, value)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def naming() -> IdentityKeys:
    return IdentityKeys()


@pytest.fixture
def post() -> TrackingRecord:
    return TrackingRecord({"id": 7, "liked": False, "reason": "spam", "title": "Hello"})
