"""Tests for the chat-completions backend client."""

import json

import httpx
import pytest

from cymage.config import BackendConfig, ConfigError
from cymage.core.prompt_builder import SYSTEM_PROMPT
from cymage.services.generation import (
    GenerationError,
    make_generator,
    resolve_api_key,
    run_completion,
)


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestRunCompletion:
    """Tests for run_completion function."""

    def test_successful_request(self) -> None:
        """Request carries model, messages and parameters; fences are stripped."""
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=_completion("```typescript\ndescribe();\n```"))

        result = run_completion(
            "the prompt", BackendConfig(), "tok", transport=httpx.MockTransport(handler)
        )

        assert result == "describe();"
        request = captured[0]
        assert str(request.url) == "https://models.inference.ai.azure.com/chat/completions"
        assert request.headers["Authorization"] == "Bearer tok"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 2000
        assert body["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "the prompt"},
        ]

    def test_openai_endpoint_and_model(self) -> None:
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=_completion("it();"))

        backend = BackendConfig(provider="openai", model="gpt-4o-mini")
        run_completion("p", backend, "sk", transport=httpx.MockTransport(handler))

        assert str(captured[0].url) == "https://api.openai.com/v1/chat/completions"
        assert json.loads(captured[0].content)["model"] == "gpt-4o-mini"

    def test_error_status_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad token"))
        with pytest.raises(GenerationError, match="401"):
            run_completion("p", BackendConfig(), "tok", transport=transport)

    def test_missing_choices_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(GenerationError, match="Malformed"):
            run_completion("p", BackendConfig(), "tok", transport=transport)

    def test_non_json_body_raises(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(GenerationError, match="Malformed"):
            run_completion("p", BackendConfig(), "tok", transport=transport)

    def test_non_text_content_raises(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": None}}]})
        )
        with pytest.raises(GenerationError):
            run_completion("p", BackendConfig(), "tok", transport=transport)

    def test_connection_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GenerationError, match="failed"):
            run_completion("p", BackendConfig(), "tok", transport=httpx.MockTransport(handler))

    def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GenerationError, match="timed out after 120 seconds"):
            run_completion("p", BackendConfig(), "tok", transport=httpx.MockTransport(handler))

    def test_double_fenced_reply_is_unwrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_completion("```typescript\n```ts\ndescribe();\n```"))

        result = run_completion(
            "p", BackendConfig(), "tok", transport=httpx.MockTransport(handler)
        )

        assert result == "describe();"


class TestCredentials:
    """Tests for resolve_api_key and make_generator."""

    def test_github_token(self) -> None:
        assert resolve_api_key(BackendConfig(), {"GITHUB_TOKEN": "gh"}) == "gh"

    def test_openai_key(self) -> None:
        backend = BackendConfig(provider="openai")
        assert resolve_api_key(backend, {"OPENAI_API_KEY": "sk"}) == "sk"

    def test_missing_token(self) -> None:
        with pytest.raises(ConfigError, match="GITHUB_TOKEN"):
            resolve_api_key(BackendConfig(), {"OPENAI_API_KEY": "sk"})

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigError, match="Unknown provider"):
            resolve_api_key(BackendConfig(provider="azure"), {})

    def test_generator_uses_bound_key(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return httpx.Response(200, json=_completion("it('x');"))

        generate = make_generator(
            BackendConfig(), {"GITHUB_TOKEN": "gh"}, transport=httpx.MockTransport(handler)
        )
        assert generate("prompt") == "it('x');"
        assert seen == ["Bearer gh"]
