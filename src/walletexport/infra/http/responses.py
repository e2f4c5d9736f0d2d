"""Map HTTP responses onto the provider error taxonomy."""

import httpx

from walletexport.exceptions import ProviderResponseError, TransientProviderError


def raise_for_provider_status(resp: httpx.Response, provider: str) -> None:
    """429 and 5xx are transient; any other non-2xx ends the branch."""
    status = resp.status_code
    if status == 429 or status >= 500:
        raise TransientProviderError(f"{provider} HTTP {status}")
    if status >= 400:
        raise ProviderResponseError(f"{provider} HTTP {status}: {resp.text[:200]}")


def json_body(resp: httpx.Response, provider: str):
    """Decoded JSON body, or ProviderResponseError when the body is not JSON."""
    try:
        return resp.json()
    except ValueError as exc:
        raise ProviderResponseError(f"{provider} returned a non-JSON body") from exc
