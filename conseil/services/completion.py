"""
Completion gateway using Claude
"""

import logging
from typing import List, Optional

import anthropic
from anthropic import AsyncAnthropic

from conseil.config import settings
from conseil.services.errors import ProviderError
from conseil.services.prompts import Message

logger = logging.getLogger(__name__)


class CompletionGateway:
    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        max_tokens: int = None,
        temperature: float = None,
        timeout: float = None,
    ):
        api_key = settings.anthropic_api_key if api_key is None else api_key
        self.model = model or settings.claude_model
        self.max_tokens = max_tokens or settings.max_tokens
        self.temperature = settings.temperature if temperature is None else temperature

        self.client = None
        if api_key:
            self.client = AsyncAnthropic(
                api_key=api_key,
                timeout=timeout or settings.provider_timeout,
                max_retries=0,
            )

    async def complete(self, messages: List[Message], model: Optional[str] = None) -> str:
        """Send the messages in order and return the text of the first reply block"""
        if self.client is None:
            logger.error("Completion requested but no Anthropic API key is configured")
            raise ProviderError("missing Anthropic API key")

        system = "\n\n".join(m.content for m in messages if m.role == "system")
        conversation = [
            {"role": m.role, "content": m.content}
            for m in messages
            if m.role != "system"
        ]

        request = {
            "model": model or self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": conversation,
        }
        if system:
            request["system"] = system

        try:
            response = await self.client.messages.create(**request)
        except anthropic.AnthropicError as e:
            logger.error(f"Completion request failed: {e}")
            raise ProviderError(str(e)) from e

        text = ""
        if response.content:
            text = getattr(response.content[0], "text", "") or ""

        if not text.strip():
            logger.error(f"Empty completion from {request['model']}")
            raise ProviderError("empty completion")

        return text
