from __future__ import annotations

from typing import Any

import pytest

from linkedart.models.log_messages import LogMessages
from linkedart.services.fetcher import FetchError

PREFERRED_TERM = "http://vocab.getty.edu/aat/300404670"


class FakeResponse:
    def __init__(self, body: Any = None, status: int = 200) -> None:
        self._body = body
        self.status = status
        self.reason = "OK" if status < 400 else "Error"
        self.url = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeFetcher:
    """Serves canned documents per URL and records every call."""

    def __init__(self, documents: dict[str, Any] | None = None) -> None:
        self.documents = dict(documents or {})
        self.calls: list[tuple[str, dict[str, str]]] = []

    def __call__(self, url: str, headers: dict[str, str] | None = None) -> FakeResponse:
        self.calls.append((url, dict(headers or {})))
        doc = self.documents.get(url)
        if doc is None:
            return FakeResponse(status=404)
        if isinstance(doc, FakeResponse):
            return doc
        if isinstance(doc, FetchError):
            raise doc
        return FakeResponse(doc)

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    def count(self, url: str) -> int:
        return self.urls().count(url)


def term(label: str, uri: str = "", alternative: str | None = None) -> dict[str, Any]:
    """A vocabulary entity whose preferred name is `label`."""
    name: dict[str, Any] = {
        "type": "Name",
        "content": label,
        "classified_as": [{"id": PREFERRED_TERM, "type": "Type"}],
    }
    if alternative:
        name["alternative"] = [{"type": "Name", "content": alternative}]
    return {"id": uri, "type": "Type", "identified_by": [name]}


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def log_messages() -> LogMessages:
    return LogMessages()
