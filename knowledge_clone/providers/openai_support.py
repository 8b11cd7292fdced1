"""Shared helpers for clients built on the OpenAI SDK."""

import httpx
import openai
from openai import AsyncOpenAI

from knowledge_clone.core import (
    AuthError,
    Credentials,
    KnowledgeCloneError,
    NetworkError,
    ServiceError,
)

OPENAI_BASE_URL = "https://api.openai.com/v1"


def build_openai_client(
    base_url: str | None = None,
    timeout: float = 60.0,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncOpenAI:
    """Create an SDK client without a bound key.

    The real key is attached per call via ``with_options`` so that a key
    changed in the settings takes effect on the next turn. SDK retries are
    disabled; retry policy belongs to the caller.
    """
    return AsyncOpenAI(
        api_key="unset",
        base_url=base_url or OPENAI_BASE_URL,
        timeout=timeout,
        max_retries=0,
        http_client=http_client,
    )


def with_credentials(client: AsyncOpenAI, credentials: Credentials) -> AsyncOpenAI:
    if not credentials.key.strip():
        raise AuthError("API key is empty", provider=credentials.provider.value)
    return client.with_options(api_key=credentials.key)


def translate_openai_error(error: Exception, provider: str) -> KnowledgeCloneError:
    """Map an SDK exception onto the pipeline's error taxonomy."""
    if isinstance(error, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return AuthError(f"Request rejected ({error.status_code}): {error.message}", provider=provider)
    if isinstance(error, openai.APIStatusError):
        return ServiceError(
            f"Request failed with status {error.status_code}: {error.message}",
            provider=provider,
            status_code=error.status_code,
        )
    if isinstance(error, openai.APIConnectionError):
        return NetworkError(f"Connection failed: {error}", provider=provider)
    return ServiceError(f"Unexpected response: {error}", provider=provider)
