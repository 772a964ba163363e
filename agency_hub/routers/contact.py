"""Contact form route."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from agency_hub import supabase_client as db
from agency_hub.models import InquiryIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/contact")
async def submit_contact(request: Request):
    body = await request.json()
    try:
        inquiry_in = InquiryIn.model_validate(body)
    except ValidationError as e:
        errors = [
            {"path": [str(p) for p in err["loc"]], "message": err["msg"]}
            for err in e.errors()
        ]
        return JSONResponse(status_code=400, content={"message": "Invalid form data", "errors": errors})

    try:
        inquiry = db.create_inquiry(inquiry_in.to_row())
        db.log_action("inquiry_received", "inquiry", str(inquiry.get("id", "")),
                      f"{inquiry_in.first_name} {inquiry_in.last_name} ({inquiry_in.email})")
    except Exception:
        logger.exception("Contact form error")
        return JSONResponse(status_code=500, content={"message": "Failed to submit inquiry"})

    return {
        "success": True,
        "message": "Thank you for your inquiry! We will contact you shortly.",
        "inquiryId": inquiry.get("id"),
    }
