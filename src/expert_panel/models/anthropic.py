"""Anthropic Claude chat-completion backend."""

import time
from typing import Any

from anthropic import AsyncAnthropic

from expert_panel.models.base import ModelInterface

DEFAULT_MAX_TOKENS = 1000


class ClaudeModel(ModelInterface):
    """Claude model implementation."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-sonnet-20241022",
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        super().__init__(temperature=temperature, max_tokens=max_tokens)
        self.api_key = api_key
        self.model = model

        # Recent SDK releases reject a shared httpx client; keep their own pool
        self.client: Any = AsyncAnthropic(api_key=api_key)

    @property
    def name(self) -> str:
        return f"claude-{self.model}"

    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        """Generate response using Claude API."""
        start_time = time.time()

        kwargs: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens or DEFAULT_MAX_TOKENS,
            "system": role_prompt,
            "messages": [{"role": "user", "content": message}],
        }
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        response = await self.client.messages.create(**kwargs)

        duration_ms = int((time.time() - start_time) * 1000)

        self._record_usage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            duration_ms=duration_ms,
            model_name=self.model,
        )

        if not response.content:
            return None

        # Join text blocks; non-text blocks carry no answer content
        texts = [block.text for block in response.content if hasattr(block, "text")]
        return "".join(texts) if texts else None
