"""Shared test fixtures and configuration."""

import asyncio
from collections.abc import Generator
from pathlib import Path

import pytest

from expert_panel.core.config.experts import ExpertDescriptor
from expert_panel.models.base import HTTPConnectionPool

_CREDENTIAL_ENV_VARS = (
    "OPENAI_API_KEY",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT",
    "ANTHROPIC_API_KEY",
    "OLLAMA_HOST",
    "EXPERT_PANEL_PROVIDER",
    "EXPERT_PANEL_MODEL",
)


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Keep tests away from real config files, credentials and HTTP clients."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in _CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    yield tmp_path

    if HTTPConnectionPool._httpx_client is not None:
        asyncio.run(HTTPConnectionPool.close())
    HTTPConnectionPool._performance_config = None


@pytest.fixture
def physics_expert() -> ExpertDescriptor:
    return ExpertDescriptor("Physics Expert", "physics-focused instructions")


@pytest.fixture
def chemistry_expert() -> ExpertDescriptor:
    return ExpertDescriptor("Chemistry Expert", "chemistry-focused instructions")
