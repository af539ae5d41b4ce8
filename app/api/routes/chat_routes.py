"""
Chat Routes

POST /chat - Role-scoped assistant (students: own data, admins: aggregates)
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from pymongo.database import Database

from app.db.mongodb import get_mongo_db
from app.core.auth import get_current_user, ROLE_ADMIN
from app.services.ai import AIProvider, AIProviderError, require_ai_provider
from app.services.chat_service import ChatService
from app.schemas.schemas import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("", response_model=ChatResponse)
async def handle_chat(
    data: ChatRequest,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_mongo_db),
    provider: AIProvider = Depends(require_ai_provider),
):
    if not data.message or not data.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")
    if user["role"] != ROLE_ADMIN and not user.get("rollNumber"):
        raise HTTPException(status_code=403, detail="Token is missing a roll number")

    try:
        response = await ChatService(db, provider).reply(user, data.message.strip())
    except AIProviderError as e:
        logger.error(f"Chat failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to process chat request.")
    return ChatResponse(response=response)
