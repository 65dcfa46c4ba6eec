"""Chat-completions backend integration for cymage."""

import logging
import os
from collections.abc import Callable, Mapping

import httpx

from ..config import BackendConfig, ConfigError
from ..core.assembler import strip_code_fences
from ..core.prompt_builder import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

Generator = Callable[[str], str]


class GenerationError(Exception):
    """Generation backend call failed or returned an unusable payload."""

    pass


def resolve_api_key(backend: BackendConfig, env: Mapping[str, str] | None = None) -> str:
    """Get the bearer token for the selected provider from the environment.

    Raises:
        ConfigError: If the provider is unknown or its token variable is unset
    """
    provider = backend.get_provider()
    env = os.environ if env is None else env
    api_key = env.get(provider.token_env)
    if not api_key:
        raise ConfigError(
            f"{provider.token_env} environment variable not set "
            f"(required for provider '{backend.provider}')"
        )
    return api_key


def _extract_content(payload: object) -> str:
    """Pull choices[0].message.content out of a chat-completions response."""
    try:
        content = payload["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError(f"Malformed response payload: missing {e}") from e
    if not isinstance(content, str):
        raise GenerationError("Malformed response payload: content is not text")
    return content


def run_completion(
    prompt: str,
    backend: BackendConfig,
    api_key: str,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Send prompt to the configured backend and return the generated code.

    One attempt with the configured timeout; failures are not retried.

    Args:
        prompt: User prompt for this batch
        backend: Backend selection and request parameters
        api_key: Bearer token for the provider
        transport: Optional httpx transport (tests inject a mock)

    Returns:
        Generated text with markdown code fences removed

    Raises:
        GenerationError: On transport errors, non-success status or malformed payload
    """
    provider = backend.get_provider()
    request_data = {
        "model": backend.model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "temperature": backend.temperature,
        "max_tokens": backend.max_tokens,
    }

    logger.info("Using %s API (%s)...", provider.label or backend.provider, backend.model)
    try:
        with httpx.Client(timeout=backend.timeout, transport=transport) as client:
            response = client.post(
                provider.endpoint,
                json=request_data,
                headers={"Authorization": f"Bearer {api_key}"},
            )
    except httpx.TimeoutException as e:
        raise GenerationError(f"API request timed out after {backend.timeout} seconds") from e
    except httpx.HTTPError as e:
        raise GenerationError(f"API request failed: {e}") from e

    if not response.is_success:
        raise GenerationError(
            f"API Error: {response.status_code} {response.reason_phrase}\n{response.text}"
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise GenerationError(f"Malformed response payload: {e}") from e

    return strip_code_fences(_extract_content(payload))


def make_generator(
    backend: BackendConfig,
    env: Mapping[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Generator:
    """Bind backend settings and credentials into a prompt -> text callable.

    Raises:
        ConfigError: If credentials for the provider are missing
    """
    api_key = resolve_api_key(backend, env)

    def generate(prompt: str) -> str:
        return run_completion(prompt, backend, api_key, transport=transport)

    return generate
