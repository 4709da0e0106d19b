"""Ollama chat-completion backend for local models."""

import time
from typing import Any

import ollama

from expert_panel.models.base import ModelInterface


class OllamaModel(ModelInterface):
    """Ollama model implementation."""

    def __init__(
        self,
        model_name: str = "llama3.1",
        host: str = "http://localhost:11434",
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(temperature=temperature, max_tokens=max_tokens)
        self.model_name = model_name
        self.host = host
        self.client: Any = ollama.AsyncClient(host=host)
        self._options = options

    @property
    def name(self) -> str:
        return f"ollama-{self.model_name}"

    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        """Generate response using Ollama API."""
        start_time = time.time()

        # Generic options underlay, explicit fields overlay
        options: dict[str, Any] = {}
        if self._options:
            options.update(self._options)
        if self.temperature is not None:
            options["temperature"] = self.temperature
        if self.max_tokens is not None:
            options["num_predict"] = self.max_tokens

        response = await self.client.chat(
            model=self.model_name,
            messages=[
                {"role": "system", "content": role_prompt},
                {"role": "user", "content": message},
            ],
            options=options if options else None,
        )

        content = response["message"]["content"]

        # Use real Ollama metrics when available, fall back to estimates
        input_tokens = response.get(
            "prompt_eval_count",
            self._estimate_tokens(role_prompt + message),
        )
        output_tokens = response.get(
            "eval_count",
            self._estimate_tokens(content or ""),
        )

        total_duration_ns = response.get("total_duration")
        if total_duration_ns is not None:
            duration_ms = int(total_duration_ns / 1_000_000)
        else:
            duration_ms = int((time.time() - start_time) * 1000)

        self._record_usage(
            input_tokens=input_tokens or 0,
            output_tokens=output_tokens or 0,
            duration_ms=duration_ms,
            model_name=self.model_name,
        )

        return str(content) if content else None
