"""Chatbot Route — stateless fashion assistant.

Invariants:
    - Always 200 for a valid message: LLM failures fall back to a canned reply
"""

from fastapi import APIRouter, Depends

from storefront.api.deps import get_chatbot
from storefront.schemas.chatbot import ChatRequest, ChatResponse
from storefront.services.chatbot import FashionChatbot

router = APIRouter(prefix="/api", tags=["chatbot"])


@router.post("/chatbot", response_model=ChatResponse)
async def chat(body: ChatRequest, chatbot: FashionChatbot = Depends(get_chatbot)):
    return ChatResponse(response=await chatbot.reply(body.message))
