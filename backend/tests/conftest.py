import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("ALLOWED_ORIGINS", "http://localhost:5173")

import pytest
from fastapi.testclient import TestClient

from auth import get_current_user_id
from constants import DOCUMENT_TABLES, NUMBER_COLUMNS
from errors import DuplicateNumber, SequenceUnavailable
from repositories import branding_repository, customers_repository, documents_repository
from services import numbering_service
from services.document_numbers import DocumentNumberAllocator

USER_ID = "user-a"
OTHER_USER_ID = "user-b"
CUSTOMER_ID = "cust-1"

_NUMBER_COLUMN_BY_TABLE = {
    table: NUMBER_COLUMNS[kind] for kind, table in DOCUMENT_TABLES.items()
}


class InMemorySequenceStore:
    """Lock-protected counters standing in for the document_sequences table."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[tuple, int] = {}
        self.offline = False
        self.increments = 0

    def increment(self, tenant_id: str, prefix: str) -> int:
        if self.offline:
            raise SequenceUnavailable("sequence store offline")
        with self._lock:
            key = (tenant_id, prefix)
            self._values[key] = self._values.get(key, 0) + 1
            self.increments += 1
            return self._values[key]

    def peek(self, tenant_id: str, prefix: str) -> int:
        with self._lock:
            return self._values.get((tenant_id, prefix), 0) + 1

    def advance(self, tenant_id: str, prefix: str, floor: int) -> int:
        if self.offline:
            raise SequenceUnavailable("sequence store offline")
        with self._lock:
            key = (tenant_id, prefix)
            self._values[key] = max(self._values.get(key, 0), floor)
            return self._values[key]


class InMemoryDatabase:
    """Replaces the Supabase-backed repository functions."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            table: [] for table in DOCUMENT_TABLES.values()
        }
        self.customers: Dict[tuple, Dict[str, Any]] = {}
        self.branding: Dict[str, Dict[str, Any]] = {}

    def _find(self, table: str, document_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        for row in self.tables[table]:
            if row["id"] == document_id and row["user_id"] == user_id:
                return row
        return None

    def _check_unique(self, table: str, record: Dict[str, Any], skip_id: str = "") -> None:
        column = _NUMBER_COLUMN_BY_TABLE[table]
        for row in self.tables[table]:
            if row["id"] == skip_id:
                continue
            if row["user_id"] == record.get("user_id") and row.get(column) == record.get(column):
                raise DuplicateNumber(f"duplicate key value violates unique constraint on {column}")

    def fetch_documents(self, table: str, user_id: str) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.tables[table] if row["user_id"] == user_id]

    def fetch_document(self, table: str, document_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        row = self._find(table, document_id, user_id)
        return dict(row) if row else None

    def insert_document(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        self._check_unique(table, record)
        now = datetime.now(timezone.utc).isoformat()
        row = {**record, "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
        self.tables[table].append(row)
        return dict(row)

    def update_document(
        self, table: str, document_id: str, user_id: str, record: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        row = self._find(table, document_id, user_id)
        if row is None:
            return None
        self._check_unique(table, {**row, **record}, skip_id=document_id)
        row.update(record)
        return dict(row)

    def delete_document(self, table: str, document_id: str, user_id: str) -> bool:
        row = self._find(table, document_id, user_id)
        if row is None:
            return False
        self.tables[table].remove(row)
        return True

    def fetch_customer(self, user_id: str, customer_id: str) -> Optional[Dict[str, Any]]:
        return self.customers.get((user_id, customer_id))

    def fetch_branding_settings(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.branding.get(user_id)


@pytest.fixture
def sequence_store(monkeypatch) -> InMemorySequenceStore:
    store = InMemorySequenceStore()
    monkeypatch.setattr(numbering_service, "allocator", DocumentNumberAllocator(store))
    return store


@pytest.fixture
def database(monkeypatch) -> InMemoryDatabase:
    db = InMemoryDatabase()
    for name in (
        "fetch_documents",
        "fetch_document",
        "insert_document",
        "update_document",
        "delete_document",
    ):
        monkeypatch.setattr(documents_repository, name, getattr(db, name))
    monkeypatch.setattr(customers_repository, "fetch_customer", db.fetch_customer)
    monkeypatch.setattr(
        branding_repository, "fetch_branding_settings", db.fetch_branding_settings
    )
    db.customers[(USER_ID, CUSTOMER_ID)] = {
        "id": CUSTOMER_ID,
        "name": "Acme Ltd",
        "currency": "EUR",
    }
    return db


@pytest.fixture
def client(database, sequence_store):
    from main import app

    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
