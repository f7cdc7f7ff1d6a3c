from __future__ import annotations

import sys
from pathlib import Path

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.api import oauth  # noqa: E402
from app.main import app  # noqa: E402
from app.models.oauth_client import RegisteredClient  # noqa: E402
from tests.factories import CountingGrantRepo, make_client  # noqa: E402


@pytest.fixture(autouse=True)
def reset_oauth_state() -> None:
    """Clear the module-level grant and client repos between tests."""
    oauth.grant_repo._by_token_hash.clear()
    oauth.client_repo._by_client_id.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def grants() -> CountingGrantRepo:
    return CountingGrantRepo()


@pytest.fixture
def public_client() -> RegisteredClient:
    return make_client()
