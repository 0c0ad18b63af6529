import asyncio
import os
import tempfile
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
import uuid

import pytest

# Settings are read at import time, so point them at scratch locations first.
_TMP = tempfile.mkdtemp(prefix="partner_admin_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["AUTH_SECRET"] = "test-secret-with-enough-length-1234"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin123"

from fastapi.testclient import TestClient  # noqa: E402

from core.errors import DuplicateKeyError, NotFoundError  # noqa: E402
from core.uploads import upload_gateway  # noqa: E402
from db.database import drop_db_and_tables  # noqa: E402
from main import app  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 200


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def anon_client():
    with TestClient(app) as c:
        yield c
    asyncio.run(drop_db_and_tables())


@pytest.fixture
def client(anon_client):
    res = anon_client.post(
        "/api/auth/login",
        data={"username": os.environ["ADMIN_EMAIL"], "password": os.environ["ADMIN_PASSWORD"]},
    )
    assert res.status_code == 204, res.text
    return anon_client


@pytest.fixture
def upload(client):
    """Upload a small PNG and return its address."""
    def _upload(name: str = "logo.png") -> str:
        res = client.post("/api/upload", files={"file": (name, PNG_BYTES, "image/png")})
        assert res.status_code == 201, res.text
        return res.json()["address"]
    return _upload


def upload_exists(address: str) -> bool:
    return os.path.exists(upload_gateway.path_for(address))


class FakeStore:
    """In-memory entity store recording every write."""

    def __init__(self, unique_name: bool = False):
        self.rows: Dict[Any, SimpleNamespace] = {}
        self.unique_name = unique_name
        self.inserts: List[Dict[str, Any]] = []
        self.updates: List[tuple] = []
        self.deletes: List[Any] = []

    async def find_by_id(self, entity_id) -> Optional[SimpleNamespace]:
        return self.rows.get(entity_id)

    async def list_all(self) -> List[SimpleNamespace]:
        return list(self.rows.values())

    def _check_name(self, name, exclude_id=None):
        if not self.unique_name or name is None:
            return
        for row in self.rows.values():
            if row.id != exclude_id and row.name.lower() == name.lower():
                raise DuplicateKeyError("Category", "name", name)

    async def insert(self, values: Dict[str, Any]) -> SimpleNamespace:
        self._check_name(values.get("name"))
        row = SimpleNamespace(id=uuid.uuid4(), **values)
        self.rows[row.id] = row
        self.inserts.append(dict(values))
        return row

    async def update(self, entity_id, patch: Dict[str, Any]) -> SimpleNamespace:
        row = self.rows.get(entity_id)
        if row is None:
            raise NotFoundError("Entity", entity_id)
        self._check_name(patch.get("name"), exclude_id=entity_id)
        for key, value in patch.items():
            setattr(row, key, value)
        self.updates.append((entity_id, dict(patch)))
        return row

    async def delete(self, entity_id) -> None:
        if self.rows.pop(entity_id, None) is None:
            raise NotFoundError("Entity", entity_id)
        self.deletes.append(entity_id)


class RecordingUploads:
    def __init__(self):
        self.removed: List[str] = []

    async def remove(self, address: Optional[str]) -> None:
        self.removed.append(address)
