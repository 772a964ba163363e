"""Google Business listing reports.

GMB figures belong to the listing, not the website, so they are produced by
their own reporter; ``ReportService`` only calls it for clients that have a
``gmb_listing_id``.
"""

import logging
from datetime import datetime, timezone

from agency_hub import supabase_client as db
from agency_hub.services.metrics import MetricsSource

logger = logging.getLogger(__name__)


class GMBReporter:
    def __init__(self, metrics: MetricsSource):
        self.metrics = metrics

    def generate_monthly_report(self, client_id: int, month: str) -> dict | None:
        """Create the month's GMB report for a client. None if client missing."""
        client = db.get_client_by_id(client_id)
        if not client:
            return None

        payload = self.metrics.fetch(client, "gmb", month)
        data = {
            "clientId": client_id,
            "businessName": client.get("business_name", ""),
            "listingId": client.get("gmb_listing_id"),
            "reportMonth": month,
            **payload,
            "generatedAt": datetime.now(timezone.utc).isoformat(),
        }

        report = db.create_report({
            "client_id": client_id,
            "service_type": "gmb",
            "report_month": month,
            "data": data,
        })
        logger.info("GMB report created for client %s (%s)", client_id, month)
        return report
