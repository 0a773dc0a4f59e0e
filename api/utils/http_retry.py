# utils/http_retry.py
"""
HTTP GET/POST with retry for rate limits and transient errors.

Shared by the scripture text provider, the liturgical feed client and the
image generation provider.

Usage:
    from utils.http_retry import get_with_retry

    response = get_with_retry(
        url="https://api.scripture.api.bible/v1/bibles",
        headers={"api-key": key},
        timeout=15,
    )
    data = response.json()
"""

import logging
import time
import requests
from typing import Optional

logger = logging.getLogger(__name__)


def _backoff(attempt: int, retry_after: Optional[str] = None) -> int:
    if retry_after:
        try:
            return int(retry_after)
        except ValueError:
            pass
    return min(2 ** attempt * 2, 30)


def request_with_retry(
    method: str,
    url: str,
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
    json: Optional[dict] = None,
    timeout: int = 30,
    max_retries: int = 3,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """
    Issue a request with automatic retry for rate limits and transient server errors.

    Retry behavior:
    - 429 (rate limit): Respects Retry-After header, falls back to exponential backoff
    - 5xx (server error): Exponential backoff
    - Connection errors: Exponential backoff
    - 4xx (client error): No retry (caller's problem)
    - Timeout: No retry (raises immediately)

    Args:
        method: "GET" or "POST"
        url: Endpoint URL
        headers: HTTP headers
        params: Query string parameters
        json: Request payload
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts
        session: Optional requests.Session (connection reuse, test injection)

    Returns:
        requests.Response on success

    Raises:
        RuntimeError: On timeout, client errors, or exhausted retries
    """
    http = session or requests
    last_response = None

    for attempt in range(max_retries):
        try:
            response = http.request(
                method, url, headers=headers, params=params, json=json, timeout=timeout
            )

            # Rate limited, back off and retry
            if response.status_code == 429:
                wait = _backoff(attempt, response.headers.get("retry-after"))
                logger.info(
                    f"Rate limited by {url}, waiting {wait}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                last_response = response
                if attempt < max_retries - 1:
                    time.sleep(wait)
                continue

            # Server error, retry with backoff
            if response.status_code >= 500:
                wait = 2 ** attempt
                logger.warning(
                    f"Server error {response.status_code} from {url}, "
                    f"retrying in {wait}s (attempt {attempt + 1}/{max_retries})"
                )
                last_response = response
                if attempt < max_retries - 1:
                    time.sleep(wait)
                continue

            # Client error or success, return immediately
            response.raise_for_status()
            return response

        except requests.ConnectionError as e:
            if attempt < max_retries - 1:
                wait = 2 ** attempt
                logger.warning(
                    f"Connection error to {url}, retrying in {wait}s: {e}"
                )
                time.sleep(wait)
                continue
            raise RuntimeError(
                f"Connection to {url} failed after {max_retries} attempts: {e}"
            )

        except requests.Timeout:
            raise RuntimeError(f"Request to {url} timed out after {timeout}s")

        except requests.HTTPError as e:
            # Extract provider-specific error message if available
            try:
                error_data = e.response.json()
                error_msg = error_data.get("error", {}).get("message", str(e))
            except (ValueError, AttributeError):
                error_msg = str(e)
            raise RuntimeError(f"API error from {url}: {error_msg}")

        except requests.RequestException as e:
            # Broken bodies, bad redirects and other transport faults
            raise RuntimeError(f"Request to {url} failed: {e}")

    # Exhausted retries
    status = last_response.status_code if last_response is not None else "unknown"
    raise RuntimeError(
        f"Request to {url} failed after {max_retries} retries "
        f"(last status: {status})"
    )


def get_with_retry(url: str, headers: Optional[dict] = None, params: Optional[dict] = None,
                   timeout: int = 30, max_retries: int = 3,
                   session: Optional[requests.Session] = None) -> requests.Response:
    """GET with the retry policy of request_with_retry()."""
    return request_with_retry(
        "GET", url, headers=headers, params=params,
        timeout=timeout, max_retries=max_retries, session=session,
    )


def post_with_retry(url: str, json: dict, headers: dict, timeout: int = 120,
                    max_retries: int = 3,
                    session: Optional[requests.Session] = None) -> requests.Response:
    """POST with the retry policy of request_with_retry()."""
    return request_with_retry(
        "POST", url, headers=headers, json=json,
        timeout=timeout, max_retries=max_retries, session=session,
    )
