"""AI content routes — generate copy/images and list past generations."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from agency_hub import supabase_client as db
from agency_hub.auth import current_user_id
from agency_hub.services.content import DEFAULT_TEXT_MODEL, generate_content, generation_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai")


@router.post("/generate")
async def ai_generate(request: Request, user_id: str = Depends(current_user_id)):
    """Payload: { prompt, contentType?, tone?, model? }"""
    body = await request.json()
    prompt = (body.get("prompt") or "").strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    model = body.get("model") or None
    try:
        content = generate_content(
            request.app.state.openai_client,
            prompt,
            content_type=body.get("contentType"),
            tone=body.get("tone"),
            model=model,
        )
        generation = db.create_ai_generation({
            "id": uuid.uuid4().hex[:12],
            "user_id": user_id,
            "type": generation_type(model),
            "prompt": prompt,
            "result": content,
            "model": model or DEFAULT_TEXT_MODEL,
            "status": "completed",
        })
    except Exception:
        logger.exception("AI generation error for user %s", user_id)
        return JSONResponse(status_code=500, content={"message": "Failed to generate content"})

    return {"content": content, "generation": generation}


@router.get("/generations")
async def ai_generations(user_id: str = Depends(current_user_id)):
    return db.get_user_ai_generations(user_id)
