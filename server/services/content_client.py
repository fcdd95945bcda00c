"""HTTP client for the content generation backend.

The workflow executor only depends on the ``ContentCollaborators`` protocol;
``ContentAPIClient`` is the production implementation talking to the
content backend over HTTP:

    POST {base}/content/ideas     {"topic": ...}   -> {"ideas": [...]}
    POST {base}/content/draft     {"prompt": ...}  -> {"draft": "..."}
    GET  {base}/images/suggest?query=...           -> {"images": [...]}
"""

import time
from typing import Any, Dict, List, Optional, Protocol
import httpx

from core.logging import get_logger, log_api_call

logger = get_logger(__name__)


class ContentCollaborators(Protocol):
    """Services a workflow run calls out to."""

    async def generate_ideas(self, topic: str) -> List[str]:
        ...

    async def generate_draft(self, prompt: str) -> str:
        ...

    async def suggest_images(self, query: str) -> List[Dict[str, Any]]:
        ...


class ContentAPIError(Exception):
    """Content backend call failed or returned an unusable body."""

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None):
        self.endpoint = endpoint
        self.status_code = status_code
        prefix = f"[{endpoint}]" if status_code is None else f"[{endpoint} {status_code}]"
        super().__init__(f"{prefix} {message}")


class ContentAPIClient:
    """Async HTTP client for idea, draft and image suggestion endpoints."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        draft_timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize client with base URL and timeouts.

        Args:
            base_url: Base URL of the content API (e.g., http://localhost:5000/api)
            token: Optional bearer token sent with every request
            timeout: Default request timeout in seconds
            draft_timeout: Timeout for draft generation, which runs longer
            client: Shared httpx client; one is created lazily if omitted
        """
        self._base_url = base_url.rstrip('/')
        self._token = token
        self._timeout = timeout
        self._draft_timeout = draft_timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def close(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, key: str,
                       timeout: Optional[float] = None, **kwargs) -> Any:
        """Send a request and return ``body[key]``.

        Raises:
            ContentAPIError: On transport errors, non-2xx status, non-JSON
                bodies or a missing ``key``.
        """
        start_time = time.time()
        client = self._get_client()
        try:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers(),
                timeout=timeout or self._timeout,
                **kwargs
            )
        except httpx.HTTPError as e:
            log_api_call(logger, path, method, False, error=str(e))
            raise ContentAPIError(path, f"Request failed: {e}") from e

        if response.is_error:
            log_api_call(logger, path, method, False, status_code=response.status_code)
            detail = response.text[:200]
            raise ContentAPIError(path, detail or response.reason_phrase, response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ContentAPIError(path, "Response is not JSON", response.status_code) from e

        if not isinstance(body, dict) or key not in body:
            raise ContentAPIError(path, f"Response missing '{key}'", response.status_code)

        log_api_call(logger, path, method, True,
                     execution_time=round(time.time() - start_time, 4))
        return body[key]

    async def generate_ideas(self, topic: str) -> List[str]:
        """Generate content ideas for a topic."""
        ideas = await self._request("POST", "/content/ideas", "ideas", json={"topic": topic})
        if not isinstance(ideas, list):
            raise ContentAPIError("/content/ideas", "'ideas' is not a list")
        return [str(idea) for idea in ideas]

    async def generate_draft(self, prompt: str) -> str:
        """Generate a post draft from a prompt."""
        draft = await self._request(
            "POST", "/content/draft", "draft",
            timeout=self._draft_timeout, json={"prompt": prompt},
        )
        if not isinstance(draft, str):
            raise ContentAPIError("/content/draft", "'draft' is not a string")
        return draft

    async def suggest_images(self, query: str) -> List[Dict[str, Any]]:
        """Fetch image suggestions for a search query."""
        images = await self._request("GET", "/images/suggest", "images", params={"query": query})
        if not isinstance(images, list):
            raise ContentAPIError("/images/suggest", "'images' is not a list")
        return images
