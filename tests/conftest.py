import os
import time
import uuid
from types import SimpleNamespace

import pytest

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")

from jose import jwt
from postgrest.exceptions import APIError
from fastapi.testclient import TestClient

from mealplanner.core.config import get_settings
from mealplanner.core.security import get_auth_client, get_db
from mealplanner.main import app


class FakeQuery:
    """Just enough of the postgrest builder for the repositories."""

    def __init__(self, store, table):
        self.store = store
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def _matches(self, row):
        return all(str(row.get(c)) == str(v) for c, v in self.filters)

    def execute(self):
        self.store.calls.append((self.table, self.op))
        if (self.table, self.op) in self.store.failures:
            raise APIError({"message": "permission denied for table " + self.table, "code": "42501", "hint": None, "details": None})
        rows = self.store.tables.setdefault(self.table, [])
        if self.op == "select":
            data = [dict(r) for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
            if self.row_limit is not None:
                data = data[: self.row_limit]
        elif self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            data = []
            for item in payload:
                row = dict(item)
                row.setdefault("id", self.store.next_id())
                rows.append(row)
                data.append(dict(row))
        elif self.op == "update":
            data = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    data.append(dict(row))
        else:
            data = [dict(r) for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
        return SimpleNamespace(data=data)


class FakeAuth:
    def __init__(self, store):
        self.store = store
        self.signed_out = []
        self.admin = SimpleNamespace(sign_out=self.signed_out.append)

    def sign_in_with_password(self, credentials):
        user = self.store.users.get(credentials["email"])
        if not user or user["password"] != credentials["password"]:
            return SimpleNamespace(user=None, session=None)
        return SimpleNamespace(
            user=SimpleNamespace(id=user["id"], email=credentials["email"]),
            session=SimpleNamespace(access_token=make_token(user["id"], credentials["email"])),
        )


class FakeSupabase:
    def __init__(self):
        self.tables = {"meals": [], "user_roles": [], "weekly_plans": []}
        self.users = {}
        self.calls = []
        self.failures = set()
        self._ids = 0
        self.auth = FakeAuth(self)

    def next_id(self):
        self._ids += 1
        return f"id-{self._ids}"

    def table(self, name):
        return FakeQuery(self, name)

    def writes(self, table):
        return [op for t, op in self.calls if t == table and op != "select"]

    def add_meal(self, name, category, **extra):
        row = {
            "id": extra.pop("id", self.next_id()),
            "name": name,
            "category": category,
            "calories": 300,
            "portion": "1 plate",
            "prep_time": None,
            "image_url": None,
            "ingredients": [{"name": "rice", "quantity": "1 cup"}],
        }
        row.update(extra)
        self.tables["meals"].append(row)
        return row["id"]


def make_token(user_id, email=None, expires_in=3600):
    settings = get_settings()
    now = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def store():
    return FakeSupabase()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_db] = lambda: store
    app.dependency_overrides[get_auth_client] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(store):
    store.tables["user_roles"].append({"user_id": "admin-1", "role": "admin"})
    return {"Authorization": f"Bearer {make_token('admin-1', 'mom@family.org')}"}


@pytest.fixture
def viewer_headers(store):
    return {"Authorization": f"Bearer {make_token('viewer-1', 'kid@family.org')}"}


@pytest.fixture
def token_for():
    return make_token
