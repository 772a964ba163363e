"""White-label routes — reseller brands, their clients and branded reports."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agency_hub import supabase_client as db
from agency_hub.auth import current_user_id
from agency_hub.models import (
    BRAND_REQUIRED, WHITE_LABEL_CLIENT_REQUIRED, WHITE_LABEL_REPORT_REQUIRED,
    BrandIn, WhiteLabelClientIn, WhiteLabelReportIn, missing_fields,
)

router = APIRouter(prefix="/api/white-label")


async def _parse(request: Request, model, required: tuple[str, ...] = ()) -> dict:
    """Validate the JSON body; returns only the fields that were sent."""
    try:
        row = model.model_validate(await request.json()).to_row(partial=True)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=[
            {"path": [str(p) for p in err["loc"]], "message": err["msg"]} for err in e.errors()
        ])
    missing = missing_fields(row, required)
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(missing)}")
    return row


def _owned_brand(brand_id: int, user_id: str) -> dict:
    brand = db.get_white_label_brand(brand_id)
    if not brand or brand.get("user_id") != user_id:
        raise HTTPException(status_code=404, detail="Brand not found")
    return brand


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------

@router.get("/brands")
async def list_brands(user_id: str = Depends(current_user_id)):
    return db.get_user_white_label_brands(user_id)


@router.post("/brands")
async def create_brand(request: Request, user_id: str = Depends(current_user_id)):
    row = await _parse(request, BrandIn, BRAND_REQUIRED)
    brand = db.create_white_label_brand({**row, "user_id": user_id})
    db.log_action("brand_created", "white_label_brand", str(brand.get("id", "")), row["brand_name"])
    return brand


@router.put("/brands/{brand_id}")
async def update_brand(request: Request, brand_id: int, user_id: str = Depends(current_user_id)):
    _owned_brand(brand_id, user_id)
    row = await _parse(request, BrandIn)
    return db.update_white_label_brand(brand_id, row)


@router.delete("/brands/{brand_id}")
async def delete_brand(brand_id: int, user_id: str = Depends(current_user_id)):
    _owned_brand(brand_id, user_id)
    db.delete_white_label_brand(brand_id)
    db.log_action("brand_deleted", "white_label_brand", str(brand_id))
    return {"success": True}


# ---------------------------------------------------------------------------
# Brand clients
# ---------------------------------------------------------------------------

@router.get("/brands/{brand_id}/clients")
async def list_brand_clients(brand_id: int, user_id: str = Depends(current_user_id)):
    _owned_brand(brand_id, user_id)
    return db.get_brand_white_label_clients(brand_id)


@router.post("/brands/{brand_id}/clients")
async def create_brand_client(request: Request, brand_id: int,
                              user_id: str = Depends(current_user_id)):
    _owned_brand(brand_id, user_id)
    row = await _parse(request, WhiteLabelClientIn, WHITE_LABEL_CLIENT_REQUIRED)
    return db.create_white_label_client({**row, "brand_id": brand_id})


@router.put("/clients/{client_id}")
async def update_brand_client(request: Request, client_id: int,
                              user_id: str = Depends(current_user_id)):
    client = db.get_white_label_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    _owned_brand(client["brand_id"], user_id)
    row = await _parse(request, WhiteLabelClientIn)
    return db.update_white_label_client(client_id, row)


@router.delete("/clients/{client_id}")
async def delete_brand_client(client_id: int, user_id: str = Depends(current_user_id)):
    client = db.get_white_label_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    _owned_brand(client["brand_id"], user_id)
    db.delete_white_label_client(client_id)
    return {"success": True}


# ---------------------------------------------------------------------------
# Branded reports
# ---------------------------------------------------------------------------

@router.get("/brands/{brand_id}/reports")
async def list_brand_reports(brand_id: int, user_id: str = Depends(current_user_id)):
    _owned_brand(brand_id, user_id)
    return db.get_brand_white_label_reports(brand_id)


@router.get("/clients/{client_id}/reports")
async def list_client_reports(client_id: int, user_id: str = Depends(current_user_id)):
    client = db.get_white_label_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    _owned_brand(client["brand_id"], user_id)
    return db.get_client_white_label_reports(client_id)


@router.post("/reports")
async def create_report(request: Request, user_id: str = Depends(current_user_id)):
    row = await _parse(request, WhiteLabelReportIn, WHITE_LABEL_REPORT_REQUIRED)
    _owned_brand(row["brand_id"], user_id)
    client = db.get_white_label_client(row["client_id"])
    if not client or client.get("brand_id") != row["brand_id"]:
        raise HTTPException(status_code=400, detail="Client does not belong to brand")
    return db.create_white_label_report(row)


@router.get("/reports/{report_id}")
async def get_report(report_id: int):
    """Public: shared with the reseller's end client by link."""
    report = db.get_white_label_report(report_id)
    if not report:
        return JSONResponse(status_code=404, content={"message": "Report not found"})
    return report


@router.put("/reports/{report_id}")
async def update_report(request: Request, report_id: int, user_id: str = Depends(current_user_id)):
    report = db.get_white_label_report(report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    _owned_brand(report["brand_id"], user_id)
    row = await _parse(request, WhiteLabelReportIn)
    row.pop("brand_id", None)
    row.pop("client_id", None)
    if row.get("is_delivered") and not report.get("delivered_at"):
        row["delivered_at"] = datetime.now(timezone.utc).isoformat()
    return db.update_white_label_report(report_id, row)


@router.delete("/reports/{report_id}")
async def delete_report(report_id: int, user_id: str = Depends(current_user_id)):
    report = db.get_white_label_report(report_id)
    if not report:
        raise HTTPException(status_code=404, detail="Report not found")
    _owned_brand(report["brand_id"], user_id)
    db.delete_white_label_report(report_id)
    return {"success": True}
