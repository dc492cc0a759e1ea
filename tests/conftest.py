"""
Pytest fixtures for PropLedger tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing propledger modules.
os.environ.setdefault("PROPLEDGER_ENV", "development")
os.environ.setdefault("PROPLEDGER_LOG_LEVEL", "WARNING")

from propledger.engine import PropLedgerEngine
from propledger.observability import metrics
from propledger.store import PropertyCodeSequence, Stores


def property_payload(**overrides):
    """A valid create payload; override any field."""
    payload = {
        "tipo_propriedade": "Apartamento",
        "endereco_completo": "Rua das Flores, 123",
        "cep": "01234-567",
        "bairro": "Centro",
        "cidade": "São Paulo",
        "estado": "SP",
        "area_total": 72.5,
        "quartos": 2,
        "banheiros": 1,
        "vagas_garagem": 1,
        "valor_aluguel": 2500.0,
        "valor_condominio": 450.0,
        "valor_iptu": 120.0,
        "descricao": "Apartamento reformado",
        "usuario_cadastro": "maria",
    }
    payload.update(overrides)
    return payload


def update_payload(prop, **overrides):
    """An update payload carrying the property's current values."""
    fields = (
        "tipo_propriedade",
        "endereco_completo",
        "cep",
        "bairro",
        "cidade",
        "estado",
        "area_total",
        "quartos",
        "banheiros",
        "vagas_garagem",
        "valor_aluguel",
        "valor_condominio",
        "valor_iptu",
        "descricao",
        "status",
    )
    payload = {name: prop[name] for name in fields}
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty metrics registry."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def stores():
    """Fresh in-memory stores per test."""
    return Stores(codes=PropertyCodeSequence(lock_timeout_seconds=0.5))


@pytest.fixture
def engine(stores):
    """Engine bound to the per-test stores."""
    return PropLedgerEngine(stores)


@pytest.fixture
async def client(stores):
    """Async test client with overridden dependencies."""
    from propledger.api.deps import get_stores
    from propledger.main import app

    def override_get_stores():
        return stores

    app.dependency_overrides[get_stores] = override_get_stores

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
