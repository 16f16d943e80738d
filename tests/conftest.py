"""
Configuração do pytest para a API do Nexo.
As variáveis de ambiente precisam existir antes de qualquer import do pacote.
"""
import os
import tempfile

_test_data_dir = tempfile.mkdtemp(prefix="nexo_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_test_data_dir}/test.db"
os.environ["SESSION_JWT_SECRET"] = "test-session-secret-0123456789abcdef0123456789"
os.environ["ADMIN_USER_IDS"] = "admin_1, admin_2"
os.environ["APP_ENV"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient

from nexo.controllers.api_key_controller import ApiKeyController
from nexo.database import AsyncSessionLocal, close_db, init_db
from nexo.main import app
from nexo.services.session_service import create_session_token


@pytest.fixture(autouse=True)
async def fresh_db():
    """Banco limpo a cada teste; conexões descartadas para não cruzar event loops."""
    await init_db(reset=True)
    await close_db()
    yield
    await close_db()


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def session_headers():
    def _headers(user_id: str, org_id: str | None = None) -> dict:
        return {"Authorization": f"Bearer {create_session_token(user_id, org_id=org_id)}"}
    return _headers


@pytest.fixture
def make_key(db):
    """Emite uma key direto pelo controller e devolve os headers prontos."""
    async def _make(user_id="user_a", scopes=None, org_id=None, name="test key", expires_at=None):
        record, plain = await ApiKeyController.issue(
            db, user_id=user_id, name=name, org_id=org_id, scopes=scopes, expires_at=expires_at
        )
        return record, {"X-API-Key": plain}
    return _make
