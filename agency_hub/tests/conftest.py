"""Shared fixtures for Agency Hub tests.

Provides:
- fake_db: patches supabase_client with an in-memory fake
- fake_mailer / fake_openai: stand-ins for Resend and OpenAI
- client: sync TestClient wired to the FastAPI app
- sample data factories for clients, reports, brands
"""

import os
import random
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

# Set env vars before any agency_hub imports
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "fake-key")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("OPENAI_API_KEY", "")
os.environ.setdefault("RESEND_API_KEY", "")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

ADMIN_HEADERS = {"Authorization": "Bearer test-admin-secret"}
USER_ID = "user-1"
USER_HEADERS = {"X-User-Id": USER_ID}


# ---------------------------------------------------------------------------
# In-memory fake Supabase
# ---------------------------------------------------------------------------

class FakeQueryResult:
    def __init__(self, data=None):
        self.data = data or []


class FakeQueryBuilder:
    """Mimics the supabase-py query builder chain."""

    def __init__(self, db, table_name):
        self._db = db
        self._table = table_name
        self._filters = []
        self._order_col = None
        self._order_desc = False
        self._limit_val = None
        self._update_data = None
        self._delete_mode = False
        self._insert_data = None

    def select(self, columns="*"):
        return self

    def insert(self, data):
        self._insert_data = data
        return self

    def update(self, data):
        self._update_data = data
        return self

    def delete(self):
        self._delete_mode = True
        return self

    def eq(self, col, val):
        self._filters.append((col, val))
        return self

    def order(self, col, desc=False):
        self._order_col = col
        self._order_desc = desc
        return self

    def limit(self, n):
        self._limit_val = n
        return self

    def _match(self, row):
        return all(row.get(col) == val for col, val in self._filters)

    def _new_row(self, data):
        row = dict(data)
        if "id" not in row:
            row["id"] = self._db.next_id(self._table)
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return row

    def execute(self):
        table = self._db.store[self._table]

        if self._insert_data is not None:
            row = self._new_row(self._insert_data)
            table.append(row)
            return FakeQueryResult(data=[row])

        if self._update_data is not None:
            updated = []
            for row in table:
                if self._match(row):
                    row.update(self._update_data)
                    updated.append(row)
            return FakeQueryResult(data=updated)

        if self._delete_mode:
            removed = [r for r in table if self._match(r)]
            table[:] = [r for r in table if not self._match(r)]
            return FakeQueryResult(data=removed)

        # SELECT
        rows = [r for r in table if self._match(r)]
        if self._order_col:
            rows.sort(key=lambda r: r.get(self._order_col) or "", reverse=self._order_desc)
        if self._limit_val is not None:
            rows = rows[:self._limit_val]
        return FakeQueryResult(data=rows)


class FakeDB:
    """In-memory store keyed by table name, with serial ids per table."""

    def __init__(self):
        self.store = defaultdict(list)
        self._ids = defaultdict(int)

    def next_id(self, table):
        self._ids[table] += 1
        return self._ids[table]

    def add(self, table, row):
        """Seed a row, assigning the next serial id if it has none."""
        if "id" not in row:
            row["id"] = self.next_id(table)
        self.store[table].append(row)
        return row

    def table(self, name):
        return FakeQueryBuilder(self, name)


@pytest.fixture
def fake_db():
    """Provides a clean in-memory DB and patches supabase_client._table."""
    db = FakeDB()

    with patch("agency_hub.supabase_client._table", side_effect=db.table):
        with patch("agency_hub.supabase_client.get_client", return_value=MagicMock()):
            yield db


# ---------------------------------------------------------------------------
# External service fakes
# ---------------------------------------------------------------------------

class FakeMailer:
    """Records sends; raises for addresses listed in ``fail_for``."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to_email, subject, html):
        if to_email in self.fail_for:
            raise RuntimeError(f"mailbox unavailable: {to_email}")
        self.sent.append({"to": to_email, "subject": subject, "html": html})
        return f"re_{len(self.sent)}"


def make_completion(content):
    """Shape of an OpenAI chat completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
def fake_openai():
    """MagicMock OpenAI client; tests set chat.completions.create behaviour."""
    return MagicMock()


@pytest.fixture
def report_service(fake_mailer):
    from agency_hub.services.metrics import RandomMetricsSource
    from agency_hub.services.reports import ReportService

    return ReportService(RandomMetricsSource(random.Random(7)), fake_mailer,
                         dashboard_url="https://example.com/dashboard")


@pytest.fixture
def client(fake_db, report_service, fake_openai):
    """Sync test client for the FastAPI app with mocked DB and services."""
    from fastapi.testclient import TestClient

    from agency_hub.app import create_app
    from agency_hub.services.chatbot import ChatResponder

    @asynccontextmanager
    async def noop_lifespan(app):
        yield

    app = create_app(
        report_service=report_service,
        chat_responder=ChatResponder(fake_openai, model="gpt-4o"),
        openai_client=fake_openai,
    )
    app.router.lifespan_context = noop_lifespan

    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

def make_client(**overrides):
    defaults = {
        "business_name": "Adelaide Plumbing Co",
        "contact_email": "owner@adelaideplumbing.com.au",
        "contact_phone": "08 8000 0000",
        "address": "1 King William St, Adelaide SA 5000",
        "gmb_listing_id": None,
        "website_url": "https://adelaideplumbing.com.au",
        "services": ["seo", "ppc"],
        "status": "active",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_report(**overrides):
    defaults = {
        "client_id": 1,
        "service_type": "seo",
        "report_month": "2024-11",
        "data": {"metrics": {}, "summary": {}, "recommendations": []},
        "email_sent": False,
        "email_sent_at": None,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_brand(**overrides):
    defaults = {
        "user_id": USER_ID,
        "brand_name": "Reseller Digital",
        "brand_color": "#0055ff",
        "is_active": True,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults


def make_white_label_client(**overrides):
    defaults = {
        "brand_id": 1,
        "client_name": "Sam Customer",
        "client_email": "sam@customer.example",
        "status": "active",
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    defaults.update(overrides)
    return defaults
