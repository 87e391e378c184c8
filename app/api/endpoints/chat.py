from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request

from app.api.deps import get_chat_service
from app.api.disconnect import run_until_disconnected
from app.core.config import settings
from app.core.errors import GatewayError
from app.services.chat import ChatService

router = APIRouter()

MISSING_API_KEY_MESSAGE = "OpenAI API key is required either in the request or as an environment variable"


@router.post("/chat")
async def chat_endpoint(
    request: Request,
    body: Dict[str, Any] = Body(...),
    chat_service: ChatService = Depends(get_chat_service),
) -> Dict[str, Any]:
    """Proxy a chat-completion request to OpenAI"""
    # The caller's key must never be forwarded in the body
    api_key = body.pop("openaiApiKey", None) or settings.OPENAI_API_KEY
    if not api_key:
        raise GatewayError(MISSING_API_KEY_MESSAGE)

    return await run_until_disconnected(request, chat_service.send(body, api_key))
