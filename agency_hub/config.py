"""Agency Hub configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Jinja2 templates (report emails)
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
EMAIL_TEMPLATES_DIR = TEMPLATES_DIR / "emails"

# Supabase
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY", "")

# OpenAI (chatbot, sentiment, content generation)
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")

# Resend (report email delivery)
RESEND_API_KEY = os.environ.get("RESEND_API_KEY", "")
REPORT_FROM_EMAIL = os.environ.get("REPORT_FROM_EMAIL", "stefan.neale@topwebdirectories.com.au")
REPORT_FROM_NAME = os.environ.get("REPORT_FROM_NAME", "Top Web Directories")

# Customer dashboard linked from report emails
DASHBOARD_URL = os.environ.get("DASHBOARD_URL", "https://topwebdirectories.com.au/dashboard")

# Agency identity (email signature, chatbot prompt)
AGENCY_NAME = os.environ.get("AGENCY_NAME", "Top Web Directories")
AGENCY_PHONE = os.environ.get("AGENCY_PHONE", "08 7480 2495")
AGENCY_WHATSAPP = os.environ.get("AGENCY_WHATSAPP", "0402585330")
AGENCY_EMAIL = os.environ.get("AGENCY_EMAIL", "stefan.neale@topwebdirectories.com.au")
AGENCY_ADDRESS = os.environ.get("AGENCY_ADDRESS", "217 Flinders St, Adelaide SA 5000")

# Admin secret (Bearer token for /api/admin and operator endpoints)
ADMIN_SECRET = os.environ.get("ADMIN_SECRET", "")

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "5000"))

# Monthly report schedule (runs for the previous calendar month)
SCHEDULER_ENABLED = os.environ.get("SCHEDULER_ENABLED", "true").lower() in ("1", "true", "yes")
REPORT_CRON_DAY = int(os.environ.get("REPORT_CRON_DAY", "1"))
REPORT_CRON_HOUR = int(os.environ.get("REPORT_CRON_HOUR", "9"))
