"""Admin routes — report runs, clients, inquiries, audit log."""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agency_hub import supabase_client as db
from agency_hub.auth import require_admin
from agency_hub.models import ClientIn, ClientUpdate
from agency_hub.services.reports import ReportDeliveryError, is_valid_month

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])

INQUIRY_STATUSES = ("new", "contacted", "converted", "closed")


async def _month_from(request: Request) -> str:
    body = await request.json()
    month = body.get("month") if isinstance(body, dict) else None
    if not isinstance(month, str) or not is_valid_month(month.strip()):
        raise HTTPException(status_code=400, detail="Month is required (YYYY-MM format)")
    return month.strip()


def _validation_response(e: ValidationError) -> JSONResponse:
    errors = [{"path": [str(p) for p in err["loc"]], "message": err["msg"]} for err in e.errors()]
    return JSONResponse(status_code=400, content={"message": "Invalid client data", "errors": errors})


# ---------------------------------------------------------------------------
# Monthly reports
# ---------------------------------------------------------------------------

@router.post("/generate-reports")
async def generate_reports(request: Request):
    month = await _month_from(request)
    service = request.app.state.report_service
    try:
        result = await asyncio.to_thread(service.generate_all_reports, month)
    except Exception:
        logger.exception("Error generating reports for %s", month)
        return JSONResponse(status_code=500, content={"message": "Failed to generate reports"})

    return {"success": True, "message": f"Reports generated for {month}", **result}


@router.post("/send-reports")
async def send_reports(request: Request):
    month = await _month_from(request)
    service = request.app.state.report_service
    try:
        result = await asyncio.to_thread(service.send_monthly_reports, month)
    except ReportDeliveryError as e:
        return JSONResponse(status_code=500, content={
            "message": "Failed to send reports",
            "failedClientIds": e.failed_client_ids,
            **e.summary,
        })
    except Exception:
        logger.exception("Error sending reports for %s", month)
        return JSONResponse(status_code=500, content={"message": "Failed to send reports"})

    return {"success": True, "message": f"Reports sent for {month}", **result}


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

@router.post("/clients")
async def create_client(request: Request):
    try:
        client_in = ClientIn.model_validate(await request.json())
    except ValidationError as e:
        return _validation_response(e)

    client = db.create_client_record(client_in.to_row())
    db.log_action("client_created", "client", str(client.get("id", "")), client_in.business_name)
    return client


@router.put("/clients/{client_id}")
async def update_client(request: Request, client_id: int):
    if not db.get_client_by_id(client_id):
        raise HTTPException(status_code=404, detail="Client not found")
    try:
        updates = ClientUpdate.model_validate(await request.json()).to_row(partial=True)
    except ValidationError as e:
        return _validation_response(e)

    return db.update_client(client_id, updates)


# ---------------------------------------------------------------------------
# Inquiries + audit log
# ---------------------------------------------------------------------------

@router.get("/inquiries")
async def list_inquiries():
    return db.get_inquiries()


@router.put("/inquiries/{inquiry_id}")
async def update_inquiry_status(request: Request, inquiry_id: int):
    body = await request.json()
    status = body.get("status", "")
    if status not in INQUIRY_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of {', '.join(INQUIRY_STATUSES)}")

    inquiry = db.update_inquiry(inquiry_id, {"status": status})
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    db.log_action("inquiry_status", "inquiry", str(inquiry_id), f"Moved to {status}")
    return inquiry


@router.get("/audit-log")
async def audit_log(limit: int = 50):
    return db.get_audit_log(limit=min(max(limit, 1), 200))
