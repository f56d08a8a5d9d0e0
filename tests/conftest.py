import os
from collections import defaultdict
from typing import Any, Dict, Generator, List

import httpx
import pytest
from fastapi.testclient import TestClient

# Pas de Redis en tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from backend.app import app as fastapi_app
from backend.config import GatewaySettings
from backend.invoices.gateway_client import GatewayClient, get_gateway_client

GATEWAY_BASE_URL = "https://gateway.test/api"
QR_TEXT = "Scan or open https://pay.gopay.test/verify/bill?billNumber=AbC123 to pay"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture(autouse=True)
def _clear_dependency_overrides(app):
    yield
    app.dependency_overrides.clear()

# --- Faux Supabase: upsert fusionné en mémoire ---
class _FakeResult:
    def __init__(self, data):
        self.data = data

class _FakeQuery:
    def __init__(self, rows: Dict[str, Dict[str, Any]]):
        self._rows = rows
        self._op = None
        self._limit = None

    def upsert(self, row: Dict[str, Any], on_conflict: str = "id", **kwargs):
        self._op = ("upsert", row, on_conflict)
        return self

    def select(self, *args, **kwargs):
        self._op = ("select",)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    def execute(self):
        if self._op and self._op[0] == "upsert":
            _, row, key_column = self._op
            key = row[key_column]
            merged = {**self._rows.get(key, {}), **row}
            self._rows[key] = merged
            return _FakeResult([dict(merged)])
        rows = list(self._rows.values())
        return _FakeResult(rows[: self._limit] if self._limit is not None else rows)

class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self.tables[name])

@pytest.fixture(autouse=True)
def store(monkeypatch) -> FakeSupabase:
    """Remplace le client Supabase service-role pour tous les tests (aucun accès réseau)."""
    fake = FakeSupabase()
    monkeypatch.setattr("backend.infra.supabase_client.get_service_supabase", lambda: fake)
    return fake

# --- Fausse passerelle GoPay (httpx.MockTransport) ---
class MockGateway:
    """Réponses configurables par endpoint; enregistre les requêtes reçues."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.upload: Any = (200, {"status": "success", "data": {"billNumber": "GP-1001"}})
        self.info: Any = (200, {"data": {"billNumber": "GP-1001", "qr": QR_TEXT}})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/simple/upload"):
            reply = self.upload
        elif request.url.path.endswith("/bill/info"):
            reply = self.info
        else:
            reply = (404, {"message": "not found"})
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def paths(self) -> List[str]:
        return [r.url.path for r in self.requests]

@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(
        base_url=GATEWAY_BASE_URL,
        username="relay-user",
        password="relay-secret",
        entity_activity_id="ENT-42",
        timeout=5.0,
        qr_delay=0.0,
    )

@pytest.fixture
def mock_gateway() -> MockGateway:
    return MockGateway()

@pytest.fixture
def gateway_client(gateway_settings, mock_gateway) -> GatewayClient:
    return GatewayClient(gateway_settings, transport=httpx.MockTransport(mock_gateway.handler))

@pytest.fixture
def gateway(app, gateway_client, mock_gateway) -> MockGateway:
    """Branche le client GoPay mocké sur l'app (dependency override)."""
    app.dependency_overrides[get_gateway_client] = lambda: gateway_client
    return mock_gateway
