"""Translate transport results into the pipeline's error taxonomy."""

from typing import Any

import httpx

from knowledge_clone.core.exceptions import AuthError, NetworkError, ServiceError

AUTH_STATUS_CODES = frozenset({401, 403})


def _error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
    return response.reason_phrase


def check_response(response: httpx.Response, provider: str) -> None:
    """Raise if ``response`` is not 2xx.

    Raises:
        AuthError: On 401/403
        ServiceError: On any other non-2xx status
    """
    if response.is_success:
        return

    detail = _error_detail(response)
    if response.status_code in AUTH_STATUS_CODES:
        raise AuthError(f"Request rejected ({response.status_code}): {detail}", provider=provider)
    raise ServiceError(
        f"Request failed with status {response.status_code}: {detail}",
        provider=provider,
        status_code=response.status_code,
    )


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    provider: str,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """POST ``payload`` and return the decoded JSON body.

    Raises:
        AuthError: On 401/403
        ServiceError: On other non-2xx statuses or an undecodable body
        NetworkError: On transport failure
    """
    try:
        response = await client.post(url, json=payload, headers=headers)
    except httpx.TransportError as e:
        raise NetworkError(f"Request to {url} failed: {e}", provider=provider) from e

    check_response(response, provider)

    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise ServiceError(
            f"Invalid JSON in response from {url}",
            provider=provider,
            status_code=response.status_code,
        ) from e
