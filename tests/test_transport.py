import importlib
import types

import pytest

from topicbridge import transport
from topicbridge.errors import TransportUnavailable


@pytest.fixture
def fresh(monkeypatch):
    monkeypatch.setattr(transport, "_info", None)


def test_ready_reports_versions_once(fresh, monkeypatch):
    calls = []
    real_import = importlib.import_module

    def counting_import(name):
        calls.append(name)
        return real_import(name)

    monkeypatch.setattr(transport, "importlib", types.SimpleNamespace(import_module=counting_import))

    first = transport.ensure_ready()
    second = transport.ensure_ready()

    assert first is second
    assert calls == ["confluent_kafka"]
    assert first.client_version
    assert first.library_version
    assert "-" in first.platform


def test_missing_client_raises(fresh, monkeypatch):
    def broken(name):
        raise ImportError("no librdkafka")

    monkeypatch.setattr(transport, "importlib", types.SimpleNamespace(import_module=broken))

    with pytest.raises(TransportUnavailable, match="no librdkafka"):
        transport.ensure_ready()
