"""
Unit Tests for configuration loading and the completion client
"""

import json
import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import (
    DEFAULT_MATERIAL_TYPE_CONFIG,
    MaterialEngineConfig,
    get_config_for_material_type,
)
from models.data_models import MaterialType
from providers.llm_provider import CompletionClient, CompletionError, LLMProvider, resolve_provider


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def client():
    completion = CompletionClient(provider="openai", model="test-model", api_key="sk-test")
    completion._client = MagicMock()
    completion._client.chat.completions.create = AsyncMock(return_value=_response('{"ok": true}'))
    return completion


class TestConfig:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "Groq")
        monkeypatch.setenv("MATERIAL_ENGINE_ACCEPTANCE_THRESHOLD", "0.75")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.delenv("MATERIAL_ENGINE_MODEL", raising=False)

        config = MaterialEngineConfig.from_env()

        assert config.llm_provider == "groq"
        assert config.llm_model is None
        assert config.acceptance_threshold == 0.75
        assert config.log_level == "DEBUG"
        assert config.analysis_temperature == 0.3

    def test_from_json(self, tmp_path):
        path = tmp_path / "material_engine.json"
        path.write_text(json.dumps({"llm_provider": "ollama", "generation_max_tokens": 1500}))

        config = MaterialEngineConfig.from_json(str(path))

        assert config.llm_provider == "ollama"
        assert config.generation_max_tokens == 1500
        assert config.acceptance_threshold == 0.6

    def test_material_type_settings(self):
        worksheet = get_config_for_material_type("worksheet")
        assert worksheet.required_fields == ["title", "instructions", "questions"]
        assert get_config_for_material_type(MaterialType.QUIZ).assessment_type == "Formativní hodnocení"
        assert get_config_for_material_type("plakát") is DEFAULT_MATERIAL_TYPE_CONFIG


class TestCompletionClient:

    def test_unknown_provider_falls_back_to_openai(self):
        assert resolve_provider("neznámý") == LLMProvider.OPENAI
        assert resolve_provider("DeepSeek") == LLMProvider.DEEPSEEK

    def test_default_model_per_provider(self):
        assert CompletionClient(provider="groq").model == "llama-3.3-70b-versatile"

    @pytest.mark.asyncio
    async def test_complete(self, client):
        reply = await client.complete(system="S", prompt="P", temperature=0.2, max_tokens=50)

        assert reply == '{"ok": true}'
        kwargs = client._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"] == [{"role": "system", "content": "S"}, {"role": "user", "content": "P"}]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_transport_failure(self, client):
        client._client.chat.completions.create.side_effect = TimeoutError("timed out")

        with pytest.raises(CompletionError):
            await client.complete(system="S", prompt="P")

    @pytest.mark.asyncio
    async def test_empty_reply(self, client):
        client._client.chat.completions.create.return_value = _response("")

        with pytest.raises(CompletionError):
            await client.complete(system="S", prompt="P")
