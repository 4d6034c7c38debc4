"""Shopify Admin GraphQL client: the origin for llms.txt content.

Each request is bounded by an httpx timeout and retried with exponential
backoff on transport errors, 429 throttling and 5xx responses. All failures
surface as OriginQueryFailed / OriginDataMissing tagged with the resource
being fetched.
"""

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from llmstxt.core.config import get_settings
from llmstxt.core.exceptions import OriginDataMissing, OriginQueryFailed

logger = structlog.get_logger(__name__)


class RetryableStatusError(Exception):
    """Raised for HTTP statuses worth retrying (429, 5xx)."""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"HTTP {response.status_code}")


class ShopifyAdminClient:
    """Client for the Shopify Admin GraphQL API of a single shop."""

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        *,
        api_version: str | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        retry_wait: wait_base | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            shop_domain: myshopify.com domain of the shop
            access_token: Offline Admin API access token
            api_version: Admin API version (defaults to settings)
            timeout: Per-request timeout in seconds (defaults to settings)
            max_attempts: Attempts per request including the first (defaults to settings)
            retry_wait: tenacity wait strategy between attempts
            http_client: Shared httpx client; one is opened per request when omitted
        """
        settings = get_settings()
        self.shop_domain = shop_domain
        self.access_token = access_token
        self.api_version = api_version or settings.shopify_api_version
        self.timeout = timeout if timeout is not None else settings.origin_timeout_seconds
        self.max_attempts = max_attempts or settings.origin_max_attempts
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=8)
        self._client = http_client
        self._owns_client = False

    @property
    def endpoint(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    async def __aenter__(self) -> "ShopifyAdminClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def _send(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        response = await client.post(
            self.endpoint,
            json=payload,
            headers={
                "X-Shopify-Access-Token": self.access_token,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )
        if response.status_code == 429 or response.status_code >= 500:
            raise RetryableStatusError(response)
        return response

    async def _post(self, payload: dict, resource: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type((httpx.TransportError, RetryableStatusError)),
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            reraise=True,
            before_sleep=lambda rs: logger.warning(
                "shopify_request_retrying",
                shop=self.shop_domain,
                resource=resource,
                attempt=rs.attempt_number,
                error=str(rs.outcome.exception()),
            ),
        ):
            with attempt:
                if self._client is not None:
                    return await self._send(self._client, payload)
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    return await self._send(client, payload)
        raise AssertionError("unreachable")  # pragma: no cover

    async def graphql(self, query: str, variables: dict[str, Any] | None = None, *, resource: str) -> dict:
        """Run a GraphQL query and return its `data` object.

        Args:
            query: GraphQL document
            variables: Query variables
            resource: Resource label used in errors and logs

        Returns:
            The response's `data` dict

        Raises:
            OriginQueryFailed: transport/HTTP failure or GraphQL errors
            OriginDataMissing: response without a `data` object
        """
        payload = {"query": query, "variables": variables or {}}

        try:
            response = await self._post(payload, resource)
        except RetryableStatusError as e:
            raise OriginQueryFailed(resource, f"HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.HTTPError as e:
            raise OriginQueryFailed(resource, f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            raise OriginQueryFailed(resource, f"HTTP {response.status_code}: {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise OriginDataMissing(resource, "response body is not JSON") from e

        if not isinstance(body, dict):
            raise OriginDataMissing(resource, "response body is not a JSON object")

        if body.get("errors"):
            logger.error("shopify_graphql_errors", shop=self.shop_domain, resource=resource, errors=body["errors"])
            raise OriginQueryFailed(resource, str(body["errors"]))

        data = body.get("data")
        if not isinstance(data, dict):
            raise OriginDataMissing(resource, "no data received")

        return data
