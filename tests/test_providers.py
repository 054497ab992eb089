"""
Tests for text providers and prompt construction.
"""
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import requests

from killphilosophy.core.enrichment.prompt import SECTION_REQUEST, build_prompt
from killphilosophy.core.enrichment.providers import (
    ChatCompletionsProvider, GeminiProvider, create_provider
)
from killphilosophy.core.exceptions import ProviderError

PROVIDERS = 'killphilosophy.core.enrichment.providers'


def streaming_response(*contents):
    lines = [
        f'data: {{"choices": [{{"delta": {{"content": "{c}"}}}}]}}\n'.encode('utf-8')
        for c in contents
    ]
    response = MagicMock()
    response.ok = True
    response.iter_content.return_value = iter(lines + [b"data: [DONE]\n"])
    return response


def error_response(status, body):
    response = MagicMock()
    response.ok = False
    response.status_code = status
    response.reason = "Unauthorized"
    response.json.return_value = body
    return response


@pytest.fixture
def provider():
    return ChatCompletionsProvider(
        api_key="test-key",
        endpoint="https://primary/v1",
        fallback_endpoints=["https://fallback-1/v1", "https://fallback-2/v1"],
        model="test-model",
        max_tokens=123
    )


@pytest.fixture
def sleep():
    with patch(f'{PROVIDERS}.time.sleep') as mock_sleep:
        yield mock_sleep


class TestBuildPrompt:

    def test_free_text_query(self):
        prompt = build_prompt("post-structuralist philosophers")
        assert prompt == "post-structuralist philosophers" + SECTION_REQUEST

    def test_single_academic(self):
        prompt = build_prompt("ignored", academic_name1="Michel Foucault")
        assert prompt.startswith("Provide detailed information about Michel Foucault")

    def test_two_academics(self):
        prompt = build_prompt(academic_name1="Michel Foucault", academic_name2="Jacques Derrida")
        assert prompt.startswith("Analyze the connections between Michel Foucault and Jacques Derrida.")

    def test_depth_modifiers(self):
        assert "comprehensive details" in build_prompt("x", depth="deep")
        assert "brief overview" in build_prompt("x", depth="basic")
        assert build_prompt("x", depth="medium") == "x" + SECTION_REQUEST

    def test_disabled_filters_append_exclusions(self):
        prompt = build_prompt("x", filters={"papers": False, "influences": False})
        assert "Exclude papers and publications." in prompt
        assert "Exclude information about academic influences." in prompt
        assert "Exclude events" not in prompt

    def test_sections_always_requested(self):
        assert "- Taxonomies:" in build_prompt("")


class TestChatCompletionsProvider:

    def test_missing_key_fails_without_request(self):
        with patch(f'{PROVIDERS}.requests.post') as post:
            with pytest.raises(ProviderError, match="No API key"):
                ChatCompletionsProvider(api_key="  ").generate("prompt")
            post.assert_not_called()

    def test_payload_and_headers(self, provider):
        with patch(f'{PROVIDERS}.requests.post', return_value=streaming_response("hi")) as post:
            provider.generate("Who was Derrida?")

        args, kwargs = post.call_args
        assert args[0] == "https://primary/v1"
        assert kwargs["headers"]["Authorization"] == "Bearer test-key"
        assert kwargs["json"] == {
            "messages": [{"role": "user", "content": "Who was Derrida?"}],
            "max_tokens": 123,
            "stream": True,
            "model": "test-model"
        }
        assert kwargs["stream"] is True

    def test_streams_chunks(self, provider):
        pieces = []
        with patch(f'{PROVIDERS}.requests.post', return_value=streaming_response("Name: ", "Derrida")):
            text = provider.generate("prompt", on_chunk=pieces.append)
        assert text == "Name: Derrida"
        assert pieces == ["Name: ", "Derrida"]

    def test_non_streaming_response(self, provider):
        response = MagicMock()
        response.ok = True
        response.json.return_value = {"choices": [{"message": {"content": "done"}}]}
        with patch(f'{PROVIDERS}.requests.post', return_value=response):
            assert provider.generate("prompt", stream=False) == "done"

    def test_falls_back_in_order(self, provider, sleep):
        responses = [
            requests.ConnectionError("primary down"),
            error_response(500, {"error": "overloaded"}),
            streaming_response("ok"),
        ]
        with patch(f'{PROVIDERS}.requests.post', side_effect=responses) as post:
            assert provider.generate("prompt") == "ok"

        assert [c.args[0] for c in post.call_args_list] == [
            "https://primary/v1", "https://fallback-1/v1", "https://fallback-2/v1"
        ]
        sleep.assert_not_called()

    def test_linear_backoff_between_rounds(self, provider, sleep):
        with patch(f'{PROVIDERS}.requests.post', side_effect=requests.ConnectionError("down")) as post:
            with pytest.raises(ProviderError, match="down"):
                provider.generate("prompt")

        assert post.call_count == 9
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0]

    def test_error_message_from_body(self, provider, sleep):
        with patch(f'{PROVIDERS}.requests.post', return_value=error_response(401, {"message": "Invalid key"})):
            with pytest.raises(ProviderError, match="API Error: Invalid key"):
                provider.generate("prompt")

    def test_error_without_details(self, provider, sleep):
        with patch(f'{PROVIDERS}.requests.post', return_value=error_response(503, {})):
            with pytest.raises(ProviderError, match="status 503"):
                provider.generate("prompt")

    def test_endpoints_deduplicated(self):
        provider = ChatCompletionsProvider(api_key="k", endpoint="https://a", fallback_endpoints=["https://a", "https://b"])
        assert provider.endpoints == ["https://a", "https://b"]


class TestGeminiProvider:

    @pytest.fixture
    def genai(self):
        with patch(f'{PROVIDERS}.genai') as mock_genai:
            yield mock_genai

    def test_collects_streamed_chunks(self, genai):
        model = genai.GenerativeModel.return_value
        model.generate_content.return_value = iter([
            SimpleNamespace(text="Name: "), SimpleNamespace(text="Hannah Arendt")
        ])
        pieces = []

        text = GeminiProvider(api_key="g-key").generate("prompt", on_chunk=pieces.append)

        assert text == "Name: Hannah Arendt"
        assert pieces == ["Name: ", "Hannah Arendt"]
        genai.configure.assert_called_once_with(api_key="g-key")

    def test_retries_on_rate_limit(self, genai, sleep):
        model = genai.GenerativeModel.return_value
        model.generate_content.side_effect = [
            Exception("429 Resource exhausted: quota"),
            iter([SimpleNamespace(text="ok")]),
        ]
        assert GeminiProvider(api_key="g-key").generate("prompt") == "ok"
        sleep.assert_called_once_with(1.0)

    def test_other_errors_raise(self, genai):
        genai.GenerativeModel.return_value.generate_content.side_effect = Exception("bad request")
        with pytest.raises(ProviderError, match="bad request"):
            GeminiProvider(api_key="g-key").generate("prompt")

    def test_missing_key(self, genai):
        with pytest.raises(ProviderError):
            GeminiProvider(api_key="").generate("prompt")


class TestCreateProvider:

    def test_default_is_chat_completions(self):
        assert isinstance(create_provider('jina'), ChatCompletionsProvider)

    def test_gemini_by_name(self):
        with patch(f'{PROVIDERS}.genai'):
            assert isinstance(create_provider('Gemini'), GeminiProvider)
