"""Tests for the schema inference engine (design2api/inference/engine.py)."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from design2api.inference.engine import (
    InferenceNotInitializedError,
    ModelConfig,
    SchemaInferenceEngine,
)
from design2api.inference.envelope import EnvelopeValidationError
from design2api.inference.llm_utils import strip_code_fences
from design2api.inference.prompt import SCHEMA_SYSTEM_PROMPT
from design2api.integrations.figma_types import DesignNode
from tests.conftest import STUB_ENVELOPE, chat_completion


def _engine_with_reply(content, config=None):
    """Engine whose OpenAI client returns one canned chat completion."""
    engine = SchemaInferenceEngine(api_key="sk-test", config=config)
    mock_openai = MagicMock()
    mock_openai.chat.completions.create = AsyncMock(return_value=chat_completion(content))
    return engine, mock_openai


@pytest.fixture
def login_children(login_frame):
    return DesignNode.model_validate(login_frame).children


# ---------------------------------------------------------------------------
# Initialization and configuration
# ---------------------------------------------------------------------------


class TestInitialization:

    @pytest.mark.asyncio
    async def test_requires_api_key(self, login_children):
        engine = SchemaInferenceEngine()
        assert engine.initialized is False
        with pytest.raises(InferenceNotInitializedError, match="not initialized"):
            await engine.generate_response_schema("LoginForm", login_children)

    def test_set_api_key_rejects_empty(self):
        engine = SchemaInferenceEngine()
        with pytest.raises(ValueError, match="API key is required"):
            engine.set_api_key("")

    def test_set_api_key_initializes(self):
        engine = SchemaInferenceEngine()
        engine.set_api_key("sk-later")
        assert engine.initialized is True

    def test_default_config(self):
        config = ModelConfig()
        assert config.model == "gpt-4o-mini-2024-07-18"
        assert 0 < config.temperature < 1
        assert config.max_retries == 2


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequest:

    @pytest.mark.asyncio
    async def test_sends_system_and_user_messages(self, login_children):
        engine, mock_openai = _engine_with_reply(json.dumps(STUB_ENVELOPE))
        with patch.object(engine, "_get_client", return_value=mock_openai):
            await engine.generate_response_schema("LoginForm", login_children)

        kwargs = mock_openai.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == engine.config.model
        assert kwargs["temperature"] == engine.config.temperature
        assert "response_format" not in kwargs
        messages = kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SCHEMA_SYSTEM_PROMPT
        assert 'Frame Name: "LoginForm"' in messages[1]["content"]

    @pytest.mark.asyncio
    async def test_force_json_object(self, login_children):
        engine, mock_openai = _engine_with_reply(
            json.dumps(STUB_ENVELOPE), config=ModelConfig(force_json_object=True)
        )
        with patch.object(engine, "_get_client", return_value=mock_openai):
            await engine.generate_response_schema("LoginForm", login_children)

        kwargs = mock_openai.chat.completions.create.await_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_does_not_retry_upstream_failure(self, login_children):
        engine = SchemaInferenceEngine(api_key="sk-test")
        mock_openai = MagicMock()
        mock_openai.chat.completions.create = AsyncMock(side_effect=ConnectionError("down"))
        with patch.object(engine, "_get_client", return_value=mock_openai):
            with pytest.raises(ConnectionError, match="down"):
                await engine.generate_response_schema("LoginForm", login_children)

        assert mock_openai.chat.completions.create.await_count == 1


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


class TestResponse:

    @pytest.mark.asyncio
    async def test_returns_stub_envelope_unchanged(self, login_children):
        engine, mock_openai = _engine_with_reply(json.dumps(STUB_ENVELOPE))
        with patch.object(engine, "_get_client", return_value=mock_openai):
            result = await engine.generate_response_schema("LoginForm", login_children)

        assert result.to_dict() == STUB_ENVELOPE
        assert result.status == 200
        assert result.metadata.pagination is None

    @pytest.mark.asyncio
    async def test_strips_code_fences(self, login_children):
        fenced = "```json\n" + json.dumps(STUB_ENVELOPE, indent=2) + "\n```"
        engine, mock_openai = _engine_with_reply(fenced)
        with patch.object(engine, "_get_client", return_value=mock_openai):
            result = await engine.generate_response_schema("LoginForm", login_children)

        assert result.to_dict() == STUB_ENVELOPE

    @pytest.mark.asyncio
    async def test_malformed_json_propagates(self, login_children):
        engine, mock_openai = _engine_with_reply('{"status": 200, "success": tru')
        with patch.object(engine, "_get_client", return_value=mock_openai):
            with pytest.raises(json.JSONDecodeError):
                await engine.generate_response_schema("LoginForm", login_children)

    @pytest.mark.asyncio
    async def test_missing_content_becomes_empty_object(self, login_children):
        # "{}" parses but is not an envelope
        engine, mock_openai = _engine_with_reply(None)
        with patch.object(engine, "_get_client", return_value=mock_openai):
            with pytest.raises(EnvelopeValidationError) as exc_info:
                await engine.generate_response_schema("LoginForm", login_children)

        missing = {err["loc"][0] for err in exc_info.value.errors}
        assert {"status", "success", "data", "metadata"} <= missing

    @pytest.mark.asyncio
    async def test_complete_returns_empty_object_text_without_choices(self):
        engine = SchemaInferenceEngine(api_key="sk-test")
        mock_openai = MagicMock()
        mock_openai.chat.completions.create = AsyncMock(
            return_value=MagicMock(choices=[])
        )
        with patch.object(engine, "_get_client", return_value=mock_openai):
            assert await engine.complete("prompt") == "{}"

    @pytest.mark.asyncio
    async def test_wrong_envelope_types_rejected(self, login_children):
        bad = dict(STUB_ENVELOPE, status="200")
        engine, mock_openai = _engine_with_reply(json.dumps(bad))
        with patch.object(engine, "_get_client", return_value=mock_openai):
            with pytest.raises(EnvelopeValidationError, match="status"):
                await engine.generate_response_schema("LoginForm", login_children)


class TestStripCodeFences:

    @pytest.mark.parametrize("raw", [
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        '```json{"a": 1}```',
        '  {"a": 1}  ',
    ])
    def test_variants(self, raw):
        assert strip_code_fences(raw) == '{"a": 1}'
