"""Model factory for creating backend instances from configuration."""

import logging
import os
from collections.abc import Mapping
from typing import Any

from expert_panel.core.config.config_manager import ConfigurationManager
from expert_panel.exceptions import ConfigurationError
from expert_panel.models.anthropic import ClaudeModel
from expert_panel.models.base import HTTPConnectionPool, ModelInterface
from expert_panel.models.mock import MockModel
from expert_panel.models.ollama import OllamaModel
from expert_panel.models.openai import AzureOpenAIModel, OpenAIModel

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("azure-openai", "openai", "anthropic", "ollama", "mock")


def _require_env(env: Mapping[str, str], *names: str) -> str:
    """Return the first set variable among ``names`` or raise."""
    for name in names:
        value = env.get(name)
        if value:
            return value
    raise ConfigurationError(
        f"Missing credentials: set {' or '.join(names)} in the environment"
    )


class ModelFactory:
    """Factory for creating model instances based on configuration."""

    def __init__(
        self,
        config_manager: ConfigurationManager,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the model factory.

        Args:
            config_manager: Configuration manager instance
            environ: Environment to read credentials from (defaults to
                ``os.environ``)
        """
        self._config_manager = config_manager
        self._environ = environ if environ is not None else os.environ

    def load_model(
        self,
        provider: str | None = None,
        model_name: str | None = None,
    ) -> ModelInterface:
        """Build the configured backend.

        Explicit ``provider``/``model_name`` arguments override the
        ``backend`` config section.

        Raises:
            ConfigurationError: If the provider is unknown or its
                credentials are missing
        """
        backend = self._config_manager.load_backend_config()
        provider = provider or backend.get("provider")
        model_name = model_name or backend.get("model")
        generation: dict[str, Any] = {
            "temperature": backend.get("temperature"),
            "max_tokens": backend.get("max_tokens"),
        }

        if not provider:
            raise ConfigurationError("No backend provider configured")

        HTTPConnectionPool.configure(self._config_manager.load_performance_config())

        logger.info("Loading %s backend (model=%s)", provider, model_name)

        if provider == "mock":
            return MockModel(model_name or "mock")

        if provider == "azure-openai":
            endpoint = backend.get("endpoint") or _require_env(
                self._environ, "AZURE_OPENAI_ENDPOINT"
            )
            api_key = _require_env(
                self._environ, "AZURE_OPENAI_API_KEY", "OPENAI_API_KEY"
            )
            deployment = self._environ.get("AZURE_OPENAI_DEPLOYMENT") or model_name
            return AzureOpenAIModel(
                api_key=api_key,
                endpoint=endpoint,
                deployment=deployment or "gpt-4o",
                **generation,
            )

        if provider == "openai":
            api_key = _require_env(self._environ, "OPENAI_API_KEY")
            return OpenAIModel(
                api_key=api_key,
                model=model_name or "gpt-4o",
                base_url=backend.get("endpoint"),
                **generation,
            )

        if provider == "anthropic":
            api_key = _require_env(self._environ, "ANTHROPIC_API_KEY")
            return ClaudeModel(
                api_key=api_key,
                model=model_name or "claude-3-5-sonnet-20241022",
                **generation,
            )

        if provider == "ollama":
            host = (
                backend.get("endpoint")
                or self._environ.get("OLLAMA_HOST")
                or "http://localhost:11434"
            )
            return OllamaModel(
                model_name=model_name or "llama3.1",
                host=host,
                **generation,
            )

        raise ConfigurationError(
            f"Unknown provider '{provider}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
