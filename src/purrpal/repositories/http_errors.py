"""Translation of httpx failures into provider errors."""

import httpx

from purrpal.errors import ProviderError

_STATUS_CATEGORIES = {
    400: "bad_request",
    401: "auth",
    403: "auth",
    404: "bad_request",
    429: "quota",
}


def provider_error_from_http(exc: httpx.HTTPError, provider: str) -> ProviderError:
    """Map an httpx exception to a ProviderError with a coarse category.

    Args:
        exc: The exception raised by httpx
        provider: Provider tag used in the error message

    Returns:
        ProviderError carrying the category and HTTP status (if any)
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        category = _STATUS_CATEGORIES.get(status_code, "upstream")
        return ProviderError(
            f"{provider} API returned HTTP {status_code}",
            category=category,
            status_code=status_code,
            details=str(exc),
        )

    return ProviderError(
        f"{provider} API request failed",
        category="connection",
        details=f"{type(exc).__name__}: {exc}",
    )
