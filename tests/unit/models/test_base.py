"""Tests for base model infrastructure."""

from unittest.mock import patch

import httpx
import pytest

from expert_panel.models.base import HTTPConnectionPool, ModelInterface


class _EchoModel(ModelInterface):
    @property
    def name(self) -> str:
        return "echo"

    async def generate_response(self, message: str, role_prompt: str) -> str | None:
        return message


class TestHTTPConnectionPool:
    """Test HTTP connection pool functionality."""

    @pytest.mark.asyncio
    async def test_get_httpx_client_reuses_existing(self) -> None:
        client1 = HTTPConnectionPool.get_httpx_client()
        client2 = HTTPConnectionPool.get_httpx_client()

        assert isinstance(client1, httpx.AsyncClient)
        assert client1 is client2

        await HTTPConnectionPool.close()

    @pytest.mark.asyncio
    async def test_close_resets_client(self) -> None:
        client = HTTPConnectionPool.get_httpx_client()

        await HTTPConnectionPool.close()

        assert client.is_closed
        assert HTTPConnectionPool._httpx_client is None

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self) -> None:
        await HTTPConnectionPool.close()

        assert HTTPConnectionPool._httpx_client is None

    @pytest.mark.asyncio
    async def test_configure_applies_to_next_client(self) -> None:
        HTTPConnectionPool.configure(
            {"concurrency": {"connection_pool": {"max_connections": 7}}}
        )

        with patch("httpx.Limits", wraps=httpx.Limits) as limits:
            HTTPConnectionPool.get_httpx_client()

        assert limits.call_args.kwargs["max_connections"] == 7
        await HTTPConnectionPool.close()

    @pytest.mark.asyncio
    async def test_configure_keeps_open_client(self) -> None:
        client = HTTPConnectionPool.get_httpx_client()

        HTTPConnectionPool.configure(
            {"concurrency": {"connection_pool": {"max_connections": 3}}}
        )

        assert HTTPConnectionPool.get_httpx_client() is client
        assert not client.is_closed
        assert HTTPConnectionPool._performance_config is None

        await HTTPConnectionPool.close()

    @pytest.mark.asyncio
    async def test_configure_after_close_applies_new_limits(self) -> None:
        HTTPConnectionPool.get_httpx_client()
        await HTTPConnectionPool.close()

        HTTPConnectionPool.configure(
            {"concurrency": {"connection_pool": {"max_connections": 3}}}
        )

        with patch("httpx.Limits", wraps=httpx.Limits) as limits:
            HTTPConnectionPool.get_httpx_client()

        assert limits.call_args.kwargs["max_connections"] == 3
        await HTTPConnectionPool.close()


class TestModelInterface:
    """Test the abstract model interface."""

    def test_model_interface_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            ModelInterface()  # type: ignore[abstract]

    def test_generation_parameters_default_to_none(self) -> None:
        model = _EchoModel()

        assert model.temperature is None
        assert model.max_tokens is None
        assert model.get_last_usage() is None

    def test_estimate_tokens(self) -> None:
        assert ModelInterface._estimate_tokens("a" * 40) == 10

    def test_record_usage(self) -> None:
        model = _EchoModel()

        model._record_usage(input_tokens=10, output_tokens=5, duration_ms=120)

        assert model.get_last_usage() == {
            "input_tokens": 10,
            "output_tokens": 5,
            "total_tokens": 15,
            "duration_ms": 120,
            "model": "echo",
        }
