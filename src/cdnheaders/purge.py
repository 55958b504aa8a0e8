"""Cloudflare cache purge client.

The only network-bound operation in the package. It runs out of band, when
an operator asks for it, never while serving a request. One authenticated
``POST /zones/{zone_id}/purge_cache`` is issued per call with either::

    {"purge_everything": true}
    {"files": ["https://example.com/a", ...]}

Failures are surfaced, never retried:

- transport errors and timeouts -> :class:`~cdnheaders.exceptions.ConnectionError_`
- HTTP 401 / 403 -> :class:`~cdnheaders.exceptions.AuthError`
- any other non-2xx or ``"success": false`` -> :class:`~cdnheaders.exceptions.PurgeError`

API error messages are carried verbatim in the exception's ``errors`` list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import httpx

from cdnheaders.exceptions import AuthError, ConnectionError_, InvalidUsageError, PurgeError
from cdnheaders.models import CloudflareConfig


@dataclass(frozen=True)
class PurgeResult:
    """A successful purge: what was purged and the API's request id, if any."""

    purge_everything: bool
    urls: list[str] = field(default_factory=list)
    purge_id: Optional[str] = None


class CloudflarePurgeClient:
    """Blocking client for the Cloudflare purge endpoint.

    Must be used as a context manager so the underlying
    :class:`httpx.Client` is opened and closed.

    Args:
        zone_id: Cloudflare zone identifier.
        api_token: API token with the *Cache Purge* permission.
        api_base: Base URL of the Cloudflare API.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests use
            :class:`httpx.MockTransport`).

    Example::

        with CloudflarePurgeClient(zone, token) as client:
            client.purge(urls=["https://example.com/products/1"])
    """

    def __init__(
        self,
        zone_id: Optional[str],
        api_token: Optional[str],
        api_base: str = "https://api.cloudflare.com/client/v4",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not zone_id or not api_token:
            raise InvalidUsageError("Cloudflare zone ID and API token are required.")
        self._zone_id = zone_id
        self._api_token = api_token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_config(
        cls,
        config: CloudflareConfig,
        zone_id: Optional[str] = None,
        api_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> CloudflarePurgeClient:
        """Build a client from *config*, letting explicit arguments win."""
        return cls(
            zone_id=zone_id or config.zone_id,
            api_token=api_token or config.api_token,
            api_base=config.api_base,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def zone_id(self) -> str:
        """The Cloudflare zone this client purges."""
        return self._zone_id

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> CloudflarePurgeClient:
        self._client = httpx.Client(
            base_url=self._api_base,
            timeout=self._timeout,
            headers={"Authorization": f"Bearer {self._api_token}"},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Purge
    # ------------------------------------------------------------------ #

    def purge(
        self,
        urls: Optional[Sequence[str]] = None,
        purge_everything: bool = False,
    ) -> PurgeResult:
        """Purge *urls*, or the whole zone when *purge_everything* is set.

        Raises:
            InvalidUsageError: If neither URLs nor *purge_everything* are given.
            ConnectionError_: On network errors or timeout.
            AuthError: If the API rejects the token.
            PurgeError: If the API reports any other failure.
        """
        if self._client is None:
            raise RuntimeError("CloudflarePurgeClient must be used as a context manager")

        url_list = [u for u in urls or () if u]
        if not purge_everything and not url_list:
            raise InvalidUsageError(
                "Specify URLs to purge or request a purge of everything."
            )

        payload: dict[str, Any] = (
            {"purge_everything": True} if purge_everything else {"files": url_list}
        )

        try:
            response = self._client.post(f"/zones/{self._zone_id}/purge_cache", json=payload)
        except httpx.TimeoutException as exc:
            raise ConnectionError_(f"Timed out talking to Cloudflare API: {exc}") from exc
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Error communicating with Cloudflare API: {exc}") from exc

        body = _json_body(response)
        errors = _error_messages(body)

        if response.status_code in (401, 403):
            raise AuthError(
                f"Cloudflare rejected the API token (HTTP {response.status_code}).",
                errors,
            )
        if not response.is_success or body.get("success") is False:
            raise PurgeError(
                f"Failed to clear cache (HTTP {response.status_code}).",
                errors,
            )

        result = body.get("result")
        purge_id = result.get("id") if isinstance(result, dict) else None
        return PurgeResult(
            purge_everything=purge_everything,
            urls=[] if purge_everything else url_list,
            purge_id=purge_id,
        )


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_messages(body: dict[str, Any]) -> list[str]:
    """Extract ``errors[].message`` entries, keeping unknown shapes visible."""
    messages: list[str] = []
    for item in body.get("errors") or []:
        if isinstance(item, dict):
            message = item.get("message") or "Unknown error"
            code = item.get("code")
            messages.append(f"{message} (code {code})" if code is not None else message)
        else:
            messages.append(str(item))
    return messages
