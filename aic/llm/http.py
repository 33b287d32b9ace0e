"""Minimal JSON-over-HTTP helpers shared by the urllib based adapters."""

import http.client
import json
import logging
import urllib.error
import urllib.request

from aic.llm.base import DEFAULT_TIMEOUT, ProviderError, ResponseReadError, TransportError

logger = logging.getLogger(__name__)


def send(provider: str, url: str, payload: dict | None = None, headers: dict | None = None,
         method: str = "POST", timeout: float = DEFAULT_TIMEOUT) -> tuple[int, str]:
    """Issue one request and return (status, body text).

    Non-2xx statuses are returned, not raised, so callers can inspect the body
    for compatibility retries. The response body is always closed.
    """
    data = json.dumps(payload).encode('utf-8') if payload is not None else None
    req = urllib.request.Request(url, data=data, headers=headers or {}, method=method)
    logger.debug("%s %s %s", provider, method, _redact(url))

    try:
        response = urllib.request.urlopen(req, timeout=timeout)
    except urllib.error.HTTPError as e:
        # HTTPError doubles as the response object for error statuses
        try:
            body = e.read()
        except (OSError, http.client.HTTPException) as read_err:
            raise ResponseReadError(f"read response body: {read_err}") from read_err
        finally:
            e.close()
        return e.code, body.decode('utf-8', errors='replace')
    except urllib.error.URLError as e:
        raise TransportError(f"{provider} request failed: {e.reason}") from e
    except TimeoutError as e:
        raise TransportError(f"{provider} request timed out after {timeout}s") from e
    except (OSError, http.client.HTTPException) as e:
        raise TransportError(f"{provider} request failed: {e}") from e

    with response:
        try:
            body = response.read()
        except (OSError, http.client.HTTPException) as e:
            raise ResponseReadError(f"read response body: {e}") from e
        status = response.status

    return status, body.decode('utf-8', errors='replace')


def is_success(status: int) -> bool:
    return 200 <= status <= 299


def decode(provider: str, body: str):
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ProviderError(f"{provider}: unmarshal response: {e}") from e


def embedded_error(data) -> str:
    """Return the provider-reported error message of a decoded body, if any."""
    if not isinstance(data, dict):
        return ""
    err = data.get("error")
    if isinstance(err, dict):
        return str(err.get("message") or "")
    if isinstance(err, str):
        return err
    return ""


def _redact(url: str) -> str:
    # Gemini passes its key as a query parameter
    if "key=" not in url:
        return url
    head, _, _ = url.partition("key=")
    return head + "key=***"
