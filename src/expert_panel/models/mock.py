"""Mock model for running panels without external services."""

import asyncio
from collections.abc import Mapping

from expert_panel.models.base import ModelInterface


class MockModel(ModelInterface):
    """Deterministic backend with per-persona responses, delays and failures.

    Behaviour is keyed by the role prompt, so each expert in a panel can be
    scripted independently. Unscripted prompts get a generic answer.
    """

    def __init__(
        self,
        model_name: str = "mock",
        *,
        responses: Mapping[str, str | None] | None = None,
        delays: Mapping[str, float] | None = None,
        failures: Mapping[str, Exception] | None = None,
        default_delay: float = 0.0,
    ) -> None:
        """Initialize mock model.

        Args:
            model_name: Name identifier for the mock model
            responses: Response text per role prompt; ``None`` simulates an
                empty completion
            delays: Seconds to sleep per role prompt before answering
            failures: Exception to raise per role prompt
            default_delay: Delay for role prompts without an explicit entry
        """
        super().__init__()
        self._model_name = model_name
        self._responses = dict(responses or {})
        self._delays = dict(delays or {})
        self._failures = dict(failures or {})
        self._default_delay = default_delay
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._model_name

    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        """Answer after the scripted delay, or raise the scripted failure."""
        self.calls.append((message, role_prompt))

        delay = self._delays.get(role_prompt, self._default_delay)
        if delay > 0:
            await asyncio.sleep(delay)

        if role_prompt in self._failures:
            raise self._failures[role_prompt]

        if role_prompt in self._responses:
            return self._responses[role_prompt]

        return (
            f"[{self._model_name}] Considering '{message[:100]}' "
            f"from the perspective: {role_prompt[:60]}"
        )
