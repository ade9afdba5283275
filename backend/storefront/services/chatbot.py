"""Fashion Chatbot — single-turn style assistant backed by Claude.

Invariants:
    - Stateless: every request is one user message, no history kept
    - Never fails the request: any LLM failure returns FALLBACK_REPLY
    - An empty model reply is replaced by EMPTY_REPLY

Design Decisions:
    - Short max_tokens: replies are meant to be 2-3 sentences
    - Fallback on failure (graceful degradation), logged with the error code
"""

import logging

from storefront.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a fashion expert AI assistant for NYUThrowingAFit, a bold NYC-based fashion brand. Your personality is confident, trendy, and street-smart. You help users with:

- Fashion advice and styling tips
- Outfit coordination and color matching
- Trend insights and street style
- Shopping recommendations
- Fashion history and cultural context
- Personal style development

Keep responses concise (2-3 sentences max), use a confident tone, and occasionally use fashion slang or NYC references. If asked about non-fashion topics, redirect back to style and fashion. Always be encouraging about personal expression through fashion."""

EMPTY_REPLY = (
    "I'm here to help you elevate your style game! "
    "Ask me about fashion trends, outfit ideas, or styling tips! 🔥"
)
FALLBACK_REPLY = (
    "Hey! I'm your fashion assistant. Ask me about the latest trends, how to style "
    "your fits, or what's hot in NYC street fashion right now! 💫"
)


class FashionChatbot:
    def __init__(self, client, model: str, max_tokens: int = 300):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def reply(self, message: str) -> str:
        try:
            response = await self.client.create_message(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": message}],
                context=ErrorContext(user_message=message[:200]),
            )
        except AnthropicAPIError as e:
            logger.error(
                f"Chatbot API error: {e.message}",
                extra={"error_code": e.code},
            )
            return FALLBACK_REPLY
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        ).strip()
        return text or EMPTY_REPLY
