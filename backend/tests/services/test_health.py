"""Health checks — liveness always up, readiness reflects its dependencies."""

import app.infrastructure.database as db_module


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "backoffice-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy", "login_throttle": "healthy"}


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["checks"]["database"] == "unavailable"


async def test_health_needs_no_token(client):
    assert (await client.get("/api/v1/health/ready")).status_code != 401
