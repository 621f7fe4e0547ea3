"""Google Gemini API client base (REST-based, no SDK dependency)."""

import logging
from typing import Optional

import httpx

from logomotion.config import GEMINI_API_KEY, GEMINI_BASE_URL
from logomotion.errors import CredentialMissing, RemoteCallFailure

logger = logging.getLogger(__name__)


class GeminiClient:
    """Shared key handling and request plumbing for the Gemini generation calls.

    The API key is fixed at construction. It is only checked when a request is
    made, so a client can be built before the session gate has a key.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or GEMINI_API_KEY
        self.base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self._transport = transport

    def _require_api_key(self) -> str:
        """Raise CredentialMissing if no key is configured (called before actual API use)."""
        if not self.api_key:
            raise CredentialMissing("API key not found. Please select a key.")
        return self.api_key

    def _client(self, timeout: float, follow_redirects: bool = False) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
            follow_redirects=follow_redirects,
        )

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[dict] = None,
        timeout: float = 60.0,
    ) -> dict:
        """Call ``{base_url}/{path}`` and return the decoded JSON body.

        Every transport, HTTP status and decoding error is re-raised as
        RemoteCallFailure with the original exception chained.
        """
        api_key = self._require_api_key()
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            async with self._client(timeout) as client:
                response = await client.request(
                    method,
                    url,
                    params={"key": api_key},
                    json=payload,
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:500]
            logger.error(f"Gemini API error: {e.response.status_code} - {body}")
            raise RemoteCallFailure(
                f"Gemini API error: {e.response.status_code}",
                status_code=e.response.status_code,
                body=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise RemoteCallFailure(f"Gemini request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Gemini returned invalid JSON: {e}")
            raise RemoteCallFailure(f"Invalid JSON response: {e}") from e
