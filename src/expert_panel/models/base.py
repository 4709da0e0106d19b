"""Base classes and shared infrastructure for chat-completion backends."""

import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

_DEFAULT_PERFORMANCE_CONFIG: dict[str, Any] = {
    "concurrency": {
        "connection_pool": {
            "max_connections": 100,
            "max_keepalive": 20,
            "keepalive_expiry": 30,
        }
    }
}


class HTTPConnectionPool:
    """Shares one pooled HTTP client between every concurrent expert call."""

    _httpx_client: Any = None  # httpx.AsyncClient
    _performance_config: dict[str, Any] | None = None

    @classmethod
    def configure(cls, performance_config: dict[str, Any]) -> None:
        """Set pool limits for the next client created.

        An open client is kept as is; call ``close`` first to apply new
        limits.
        """
        if cls._httpx_client is not None and not cls._httpx_client.is_closed:
            if performance_config != cls._performance_config:
                logger.warning(
                    "HTTP client already open; new pool limits apply after close"
                )
            return
        cls._performance_config = performance_config
        cls._httpx_client = None

    @classmethod
    def get_httpx_client(cls) -> Any:
        """Get or create a shared httpx client with connection pooling."""
        if cls._httpx_client is None or cls._httpx_client.is_closed:
            import httpx

            config = (
                cls._performance_config
                if cls._performance_config is not None
                else _DEFAULT_PERFORMANCE_CONFIG
            )
            pool_config = config.get("concurrency", {}).get("connection_pool", {})

            limits = httpx.Limits(
                max_connections=pool_config.get("max_connections", 100),
                max_keepalive_connections=pool_config.get("max_keepalive", 20),
                keepalive_expiry=pool_config.get("keepalive_expiry", 30.0),
            )

            # Read timeout is generous: completions can take a while
            timeout = httpx.Timeout(connect=10.0, read=120.0, write=10.0, pool=5.0)

            cls._httpx_client = httpx.AsyncClient(
                limits=limits,
                timeout=timeout,
                headers={"User-Agent": "expert-panel/1.0"},
            )

        return cls._httpx_client

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client."""
        if cls._httpx_client is not None and not cls._httpx_client.is_closed:
            await cls._httpx_client.aclose()
        cls._httpx_client = None


class ModelInterface(ABC):
    """Abstract interface for chat-completion backends.

    One call carries the expert's instructions as system-level guidance
    and the question as the user turn. Implementations return the
    generated text, ``None`` when the backend produced no content, and
    raise on any transport or service failure.
    """

    def __init__(
        self,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._last_usage: dict[str, Any] | None = None
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    @abstractmethod
    def name(self) -> str:
        """Model name identifier."""
        pass

    @abstractmethod
    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        """Generate a response from the model."""
        pass

    def get_last_usage(self) -> dict[str, Any] | None:
        """Get usage metrics from the last API call.

        Shared across concurrent calls, so under a panel run this reflects
        whichever call finished last.
        """
        return self._last_usage

    @staticmethod
    def _estimate_tokens(text: str) -> int:
        """Estimate token count from text length.

        Rough approximation: ~4 characters per token.
        """
        return len(text) // 4

    def _record_usage(
        self,
        input_tokens: int,
        output_tokens: int,
        duration_ms: int,
        model_name: str = "",
    ) -> None:
        """Record usage metrics for the last API call."""
        self._last_usage = {
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
            "duration_ms": duration_ms,
            "model": model_name or self.name,
        }
