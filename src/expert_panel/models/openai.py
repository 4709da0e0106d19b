"""OpenAI and Azure OpenAI chat-completion backends."""

import time
from typing import Any

from openai import AsyncAzureOpenAI, AsyncOpenAI

from expert_panel.models.base import HTTPConnectionPool, ModelInterface

DEFAULT_AZURE_API_VERSION = "2024-06-01"


class OpenAIModel(ModelInterface):
    """OpenAI chat completions model."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        *,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        super().__init__(temperature=temperature, max_tokens=max_tokens)
        self.model = model
        self.client: Any = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            http_client=HTTPConnectionPool.get_httpx_client(),
        )

    @property
    def name(self) -> str:
        return f"openai-{self.model}"

    def _request_kwargs(self, message: str, role_prompt: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": role_prompt},
                {"role": "user", "content": message},
            ],
        }
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        return kwargs

    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        """Generate response using the chat completions API."""
        start_time = time.time()

        response = await self.client.chat.completions.create(
            **self._request_kwargs(message, role_prompt)
        )

        duration_ms = int((time.time() - start_time) * 1000)

        if not response.choices:
            raise ValueError("Malformed response: no choices returned")
        content: str | None = response.choices[0].message.content

        usage = getattr(response, "usage", None)
        if usage is not None:
            input_tokens = usage.prompt_tokens
            output_tokens = usage.completion_tokens
        else:
            input_tokens = self._estimate_tokens(role_prompt + message)
            output_tokens = self._estimate_tokens(content or "")

        self._record_usage(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=duration_ms,
            model_name=self.model,
        )

        return content


class AzureOpenAIModel(OpenAIModel):
    """Azure OpenAI deployment.

    ``deployment`` is the Azure deployment name and is what gets sent as the
    model on each request.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        deployment: str = "gpt-4o",
        *,
        api_version: str = DEFAULT_AZURE_API_VERSION,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        ModelInterface.__init__(self, temperature=temperature, max_tokens=max_tokens)
        self.model = deployment
        self.endpoint = endpoint
        self.client = AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=api_version,
            http_client=HTTPConnectionPool.get_httpx_client(),
        )

    @property
    def name(self) -> str:
        return f"azure-{self.model}"
