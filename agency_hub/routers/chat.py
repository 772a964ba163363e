"""Chat route — website chatbot replies + transcript persistence."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from agency_hub import supabase_client as db
from agency_hub.config import AGENCY_PHONE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_MAX_MESSAGE_LEN = 4000


@router.post("/chat")
async def chat(request: Request):
    """Reply to a visitor message.

    Payload: { message, sessionId, conversationHistory? }
    """
    body = await request.json()
    if not isinstance(body, dict):
        body = {}
    message = body.get("message")
    session_id = body.get("sessionId")
    history = body.get("conversationHistory") or []

    if not isinstance(message, str) or not isinstance(session_id, str):
        raise HTTPException(status_code=400, detail="Message and sessionId are required")
    message = message.strip()
    session_id = session_id.strip()
    if not message or not session_id:
        raise HTTPException(status_code=400, detail="Message and sessionId are required")
    if not isinstance(history, list):
        raise HTTPException(status_code=400, detail="conversationHistory must be a list")

    responder = request.app.state.chat_responder
    try:
        reply = responder.generate_response(message[:_MAX_MESSAGE_LEN], history)
        sentiment = responder.analyze_sentiment(message[:_MAX_MESSAGE_LEN])

        now = datetime.now(timezone.utc).isoformat()
        messages = [
            *history,
            {"role": "user", "content": message, "timestamp": now},
            {"role": "assistant", "content": reply, "timestamp": now},
        ]

        conversation = db.get_chat_conversation(session_id)
        if conversation:
            db.update_chat_conversation(conversation["id"], messages)
        else:
            db.create_chat_conversation(session_id, messages)
    except Exception:
        logger.exception("Chatbot error for session %s", session_id)
        return JSONResponse(status_code=500, content={
            "message": "I apologize, but I'm experiencing technical difficulties. "
                       f"Please contact us directly at {AGENCY_PHONE}.",
        })

    return {"response": reply, "sentiment": sentiment, "timestamp": now}
