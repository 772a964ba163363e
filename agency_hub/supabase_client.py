"""Supabase connection and query helpers for all agency tables."""

import threading
from datetime import datetime, timezone

from supabase import Client, create_client

from agency_hub.config import SUPABASE_SERVICE_KEY, SUPABASE_URL

_client: Client | None = None
_client_lock = threading.Lock()


def get_client() -> Client:
    """Return the Supabase client singleton (thread-safe)."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
                    raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
                _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _client


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------

def _table(name: str):
    """Return a table query builder."""
    return get_client().table(name)


def insert(table: str, data: dict) -> dict:
    """Insert a row and return it."""
    result = _table(table).insert(data).execute()
    return result.data[0] if result.data else {}


def update(table: str, data: dict, match: dict) -> dict:
    """Update rows matching conditions. Returns the first updated row."""
    q = _table(table).update(data)
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data[0] if result.data else {}


def delete(table: str, match: dict) -> list:
    """Delete rows matching conditions."""
    q = _table(table).delete()
    for k, v in match.items():
        q = q.eq(k, v)
    result = q.execute()
    return result.data


def select(table: str, columns: str = "*", match: dict | None = None,
           order: str | None = None, order_desc: bool = False,
           limit: int | None = None) -> list[dict]:
    """Select rows with optional filtering, ordering and limit."""
    q = _table(table).select(columns)
    if match:
        for k, v in match.items():
            q = q.eq(k, v)
    if order:
        q = q.order(order, desc=order_desc)
    if limit:
        q = q.limit(limit)
    result = q.execute()
    return result.data or []


def select_one(table: str, columns: str = "*", match: dict | None = None) -> dict | None:
    """Select a single row."""
    rows = select(table, columns, match, limit=1)
    return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def get_user(user_id: str) -> dict | None:
    """Get a user by id (the auth provider's subject)."""
    return select_one("users", match={"id": user_id})


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

def create_client_record(data: dict) -> dict:
    """Create a service client."""
    return insert("clients", data)


def get_client_by_id(client_id: int) -> dict | None:
    """Get a single client by id."""
    return select_one("clients", match={"id": client_id})


def get_clients() -> list[dict]:
    """Get all clients, newest first."""
    return select("clients", order="created_at", order_desc=True)


def update_client(client_id: int, data: dict) -> dict:
    """Update a client by id."""
    data = {**data, "updated_at": _now()}
    return update("clients", data, {"id": client_id})


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

def create_report(data: dict) -> dict:
    """Persist a generated service report."""
    row = {"email_sent": False, "email_sent_at": None, **data}
    return insert("reports", row)


def get_reports_by_client(client_id: int) -> list[dict]:
    """Get all reports for a client, newest first."""
    return select("reports", match={"client_id": client_id},
                  order="created_at", order_desc=True)


def get_reports_by_month(month: str) -> list[dict]:
    """Get every report for a YYYY-MM month, newest first."""
    return select("reports", match={"report_month": month},
                  order="created_at", order_desc=True)


def update_report(report_id: int, data: dict) -> dict:
    """Update a report by id."""
    return update("reports", data, {"id": report_id})


# ---------------------------------------------------------------------------
# Inquiries
# ---------------------------------------------------------------------------

def create_inquiry(data: dict) -> dict:
    """Store a contact-form inquiry."""
    return insert("inquiries", {"status": "new", **data})


def get_inquiries() -> list[dict]:
    """Get all inquiries, newest first."""
    return select("inquiries", order="created_at", order_desc=True)


def update_inquiry(inquiry_id: int, data: dict) -> dict:
    """Update an inquiry by id."""
    return update("inquiries", data, {"id": inquiry_id})


# ---------------------------------------------------------------------------
# Chat conversations
# ---------------------------------------------------------------------------

def create_chat_conversation(session_id: str, messages: list[dict]) -> dict:
    """Start a conversation transcript for a chat session."""
    return insert("chat_conversations", {"session_id": session_id, "messages": messages})


def get_chat_conversation(session_id: str) -> dict | None:
    """Get the conversation for a chat session."""
    return select_one("chat_conversations", match={"session_id": session_id})


def update_chat_conversation(conversation_id: int, messages: list[dict]) -> dict:
    """Replace the transcript of a conversation."""
    return update("chat_conversations",
                  {"messages": messages, "updated_at": _now()},
                  {"id": conversation_id})


# ---------------------------------------------------------------------------
# AI generations
# ---------------------------------------------------------------------------

def create_ai_generation(data: dict) -> dict:
    """Record an AI content generation."""
    return insert("ai_generations", data)


def get_user_ai_generations(user_id: str) -> list[dict]:
    """Get a user's generations, newest first."""
    return select("ai_generations", match={"user_id": user_id},
                  order="created_at", order_desc=True)


# ---------------------------------------------------------------------------
# White-label brands
# ---------------------------------------------------------------------------

def create_white_label_brand(data: dict) -> dict:
    return insert("white_label_brands", data)


def get_user_white_label_brands(user_id: str) -> list[dict]:
    return select("white_label_brands", match={"user_id": user_id},
                  order="created_at", order_desc=True)


def get_white_label_brand(brand_id: int) -> dict | None:
    return select_one("white_label_brands", match={"id": brand_id})


def update_white_label_brand(brand_id: int, data: dict) -> dict:
    data = {**data, "updated_at": _now()}
    return update("white_label_brands", data, {"id": brand_id})


def delete_white_label_brand(brand_id: int) -> None:
    delete("white_label_brands", {"id": brand_id})


# ---------------------------------------------------------------------------
# White-label clients
# ---------------------------------------------------------------------------

def create_white_label_client(data: dict) -> dict:
    return insert("white_label_clients", data)


def get_brand_white_label_clients(brand_id: int) -> list[dict]:
    return select("white_label_clients", match={"brand_id": brand_id},
                  order="created_at", order_desc=True)


def get_white_label_client(client_id: int) -> dict | None:
    return select_one("white_label_clients", match={"id": client_id})


def update_white_label_client(client_id: int, data: dict) -> dict:
    data = {**data, "updated_at": _now()}
    return update("white_label_clients", data, {"id": client_id})


def delete_white_label_client(client_id: int) -> None:
    delete("white_label_clients", {"id": client_id})


# ---------------------------------------------------------------------------
# White-label reports
# ---------------------------------------------------------------------------

def create_white_label_report(data: dict) -> dict:
    return insert("white_label_reports", data)


def get_brand_white_label_reports(brand_id: int) -> list[dict]:
    return select("white_label_reports", match={"brand_id": brand_id},
                  order="created_at", order_desc=True)


def get_client_white_label_reports(client_id: int) -> list[dict]:
    return select("white_label_reports", match={"client_id": client_id},
                  order="created_at", order_desc=True)


def get_white_label_report(report_id: int) -> dict | None:
    return select_one("white_label_reports", match={"id": report_id})


def update_white_label_report(report_id: int, data: dict) -> dict:
    data = {**data, "updated_at": _now()}
    return update("white_label_reports", data, {"id": report_id})


def delete_white_label_report(report_id: int) -> None:
    delete("white_label_reports", {"id": report_id})


# ---------------------------------------------------------------------------
# Audit Log
# ---------------------------------------------------------------------------

def log_action(action: str, entity_type: str = "", entity_id: str = "", details: str = "") -> dict:
    """Log an operator or automation action."""
    return insert("audit_log", {
        "action": action,
        "entity_type": entity_type,
        "entity_id": entity_id,
        "details": details,
    })


def get_audit_log(limit: int = 50) -> list[dict]:
    """Get recent audit log entries."""
    return select("audit_log", order="created_at", order_desc=True, limit=limit)
