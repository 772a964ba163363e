"""Monthly report pipeline — generation, delivery, scheduled entry point.

Generation fans out over active clients and writes one ``reports`` row per
subscribed service. Delivery groups a month's reports by client, emails one
HTML digest per client and marks those reports sent once the email is out.

Known behaviour kept on purpose:
- Reports are selected by month only, so re-running delivery re-sends
  reports already marked ``email_sent``.
- (client, service_type, month) is not unique; generating twice creates
  duplicate rows.
"""

import logging
import re
from datetime import date, datetime, timezone

from jinja2 import Environment, FileSystemLoader, select_autoescape

from agency_hub import supabase_client as db
from agency_hub.config import (
    AGENCY_ADDRESS, AGENCY_EMAIL, AGENCY_NAME, AGENCY_PHONE, DASHBOARD_URL,
    EMAIL_TEMPLATES_DIR, REPORT_FROM_EMAIL, REPORT_FROM_NAME, RESEND_API_KEY,
)
from agency_hub.services.gmb import GMBReporter
from agency_hub.services.mailer import ResendMailer
from agency_hub.services.metrics import MetricsSource, RandomMetricsSource

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

_email_env = Environment(
    loader=FileSystemLoader(str(EMAIL_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


class ReportDeliveryError(RuntimeError):
    """One or more client emails failed during a delivery run."""

    def __init__(self, month: str, failed_client_ids: list, summary: dict):
        self.month = month
        self.failed_client_ids = failed_client_ids
        self.summary = summary
        super().__init__(
            f"Report delivery for {month} failed for clients: "
            f"{', '.join(str(c) for c in failed_client_ids)}"
        )


# ---------------------------------------------------------------------------
# Month helpers
# ---------------------------------------------------------------------------

def is_valid_month(month: str) -> bool:
    """True for canonical YYYY-MM strings."""
    return bool(month) and bool(_MONTH_RE.match(month))


def previous_month(today: date | None = None) -> str:
    """The calendar month before ``today`` as YYYY-MM."""
    today = today or date.today()
    first = today.replace(day=1)
    if first.month == 1:
        return f"{first.year - 1}-12"
    return f"{first.year}-{first.month - 1:02d}"


def month_label(month: str) -> str:
    """'2024-12' -> 'December 2024'."""
    return datetime.strptime(f"{month}-01", "%Y-%m-%d").strftime("%B %Y")


# ---------------------------------------------------------------------------
# Report service
# ---------------------------------------------------------------------------

class ReportService:
    """Generates, renders and delivers monthly client reports.

    Args:
        metrics: source of report figures.
        mailer: object with ``send(to_email, subject, html) -> str``.
        gmb: reporter for Google Business listing reports; defaults to a
            ``GMBReporter`` over the same metrics source.
        dashboard_url: customer dashboard linked from every email.
    """

    def __init__(self, metrics: MetricsSource, mailer, gmb: GMBReporter | None = None,
                 dashboard_url: str = DASHBOARD_URL):
        self.metrics = metrics
        self.mailer = mailer
        self.gmb = gmb or GMBReporter(metrics)
        self.dashboard_url = dashboard_url

    # -- orchestration ------------------------------------------------------

    def generate_all_reports(self, month: str) -> dict:
        """Generate reports for every active client. Aborts on first error."""
        try:
            clients = db.get_clients()
            processed = 0
            created = 0
            for client in clients:
                if client.get("status") != "active":
                    continue
                reports = self.generate_client_reports(client["id"], month)
                processed += 1
                created += len(reports)
        except Exception:
            logger.exception("Error generating all reports for %s", month)
            raise

        db.log_action("reports_generated", "report_month", month,
                      f"{created} reports for {processed} active clients")
        logger.info("Generated %d reports for %d clients (%s)", created, processed, month)
        return {"month": month, "clients": processed, "reports": created}

    def generate_client_reports(self, client_id: int, month: str) -> list[dict]:
        """Generate one report per subscribed service. No-op for unknown client."""
        try:
            client = db.get_client_by_id(client_id)
            if not client:
                return []

            services = client.get("services") or []
            created = []

            if "gmb" in services and client.get("gmb_listing_id"):
                report = self.gmb.generate_monthly_report(client_id, month)
                if report:
                    created.append(report)

            generators = (
                ("seo", self.generate_seo_report),
                ("ppc", self.generate_ppc_report),
                ("social", self.generate_social_media_report),
                ("chatbot", self.generate_chatbot_report),
            )
            for service_type, generate in generators:
                if service_type in services:
                    report = generate(client_id, month)
                    if report:
                        created.append(report)

            return created
        except Exception as e:
            logger.error("Error generating reports for client %s: %s", client_id, e)
            raise

    # -- per-service generators --------------------------------------------

    def generate_seo_report(self, client_id: int, month: str) -> dict | None:
        return self._generate(client_id, "seo", month)

    def generate_ppc_report(self, client_id: int, month: str) -> dict | None:
        return self._generate(client_id, "ppc", month)

    def generate_social_media_report(self, client_id: int, month: str) -> dict | None:
        return self._generate(client_id, "social", month)

    def generate_chatbot_report(self, client_id: int, month: str) -> dict | None:
        return self._generate(client_id, "chatbot", month)

    def _generate(self, client_id: int, service_type: str, month: str) -> dict | None:
        """Build the payload for one service and persist it as a report row."""
        client = db.get_client_by_id(client_id)
        if not client:
            return None

        payload = self.metrics.fetch(client, service_type, month)
        data = {
            "clientId": client_id,
            "businessName": client.get("business_name", ""),
            "reportMonth": month,
            **payload,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }

        return db.create_report({
            "client_id": client_id,
            "service_type": service_type,
            "report_month": month,
            "data": data,
        })

    # -- delivery -----------------------------------------------------------

    def send_monthly_reports(self, month: str) -> dict:
        """Email every client its reports for ``month``.

        A failed send does not stop the run; the failing clients are
        reported through ``ReportDeliveryError`` once all clients have been
        attempted.
        """
        try:
            reports = db.get_reports_by_month(month)
        except Exception:
            logger.exception("Error fetching reports for %s", month)
            raise

        by_client: dict[int, list[dict]] = {}
        for report in reports:
            if report.get("client_id") is None:
                continue
            by_client.setdefault(report["client_id"], []).append(report)

        summary = {"month": month, "clients": 0, "emails_sent": 0, "reports_marked": 0}
        failed = []

        for client_id, client_reports in by_client.items():
            client = db.get_client_by_id(client_id)
            if not client or not client.get("contact_email"):
                logger.info("Skipping client %s: no contact email", client_id)
                continue

            summary["clients"] += 1
            try:
                self.send_client_report_email(client, client_reports, month)
            except Exception:
                failed.append(client_id)
                continue

            summary["emails_sent"] += 1
            summary["reports_marked"] += len(client_reports)

        if failed:
            db.log_action("reports_send_failed", "report_month", month,
                          f"Failed clients: {', '.join(str(c) for c in failed)}")
            raise ReportDeliveryError(month, failed, summary)

        db.log_action("reports_sent", "report_month", month,
                      f"{summary['emails_sent']} emails, {summary['reports_marked']} reports")
        return summary

    def send_client_report_email(self, client: dict, reports: list[dict], month: str) -> str:
        """Send one client's digest, then mark its reports sent.

        Nothing is marked if the send raises.
        """
        label = month_label(month)
        subject = f"{client['business_name']} - Monthly Digital Marketing Report ({label})"
        html = self.render_report_email(client, reports, month)

        try:
            resend_id = self.mailer.send(client["contact_email"], subject, html)
        except Exception as e:
            logger.error("Error sending email to %s: %s", client["contact_email"], e)
            raise

        now = datetime.now(timezone.utc).isoformat()
        for report in reports:
            db.update_report(report["id"], {"email_sent": True, "email_sent_at": now})

        db.log_action("report_email_sent", "client", str(client["id"]),
                      f"{len(reports)} reports for {month} to {client['contact_email']}")
        return resend_id

    def render_report_email(self, client: dict, reports: list[dict], month: str) -> str:
        """Render the monthly digest HTML for one client."""
        template = _email_env.get_template("monthly_report.html")
        return template.render(
            business_name=client.get("business_name", ""),
            month_name=month_label(month),
            reports=reports,
            dashboard_url=self.dashboard_url,
            agency_name=AGENCY_NAME,
            agency_phone=AGENCY_PHONE,
            agency_email=AGENCY_EMAIL,
            agency_address=AGENCY_ADDRESS,
        )


def build_report_service() -> ReportService:
    """Report service wired to the configured Resend account."""
    mailer = ResendMailer(RESEND_API_KEY, REPORT_FROM_EMAIL, REPORT_FROM_NAME)
    return ReportService(RandomMetricsSource(), mailer)


# ---------------------------------------------------------------------------
# Scheduled entry point
# ---------------------------------------------------------------------------

def schedule_monthly_reports(service: ReportService, today: date | None = None) -> dict:
    """Generate then send last month's reports. Never raises."""
    month = previous_month(today)
    try:
        logger.info("Generating reports for %s...", month)
        generated = service.generate_all_reports(month)

        logger.info("Sending monthly reports for %s...", month)
        sent = service.send_monthly_reports(month)
    except Exception as e:
        logger.error("Monthly report generation failed for %s: %s", month, e)
        return {"month": month, "status": "failed", "error": str(e)}

    logger.info("Monthly reports completed successfully for %s", month)
    return {"month": month, "status": "ok", "generated": generated, "sent": sent}
