import asyncio
import json
import re
from typing import Any, AsyncIterator, Dict, Optional, Tuple
from urllib.parse import urlencode

import aiohttp

from okta_policy_client import __version__
from okta_policy_client.config.settings import Settings
from okta_policy_client.utils.error_handling import OktaApiError, UnsupportedResponseError, build_api_error
from okta_policy_client.utils.logging import get_logger


class OktaAPIClient:
    """
    Thin async HTTP layer over the Okta REST API.

    Every call is a single request: failures are raised as OktaApiError and are
    never retried. GET collections are exposed through ``paginate`` which follows
    Okta's Link headers lazily.

    Usage:
        client = OktaAPIClient(settings)
        policy = await client.request("/api/v1/policies/00p1", method="GET")
        async for item in client.paginate("/api/v1/policies", params={"type": "PASSWORD"}):
            ...
    """

    def __init__(self, settings: Settings, timeout: Optional[int] = None, max_pages: Optional[int] = None):
        """
        Initialize the API client.

        Args:
            settings: Okta org URL, token and HTTP defaults
            timeout: HTTP request timeout in seconds (defaults to OKTA_REQUEST_TIMEOUT)
            max_pages: Maximum pages to follow per listing (defaults to OKTA_MAX_PAGES)
        """
        self.settings = settings
        self.timeout = timeout or settings.OKTA_REQUEST_TIMEOUT
        self.max_pages = max_pages or settings.OKTA_MAX_PAGES

        self.logger = get_logger(f"{__name__}.OktaAPIClient")

        self._setup_config()

    def _setup_config(self):
        """Setup base URL and SSWS headers from settings."""
        self.base_url = self.settings.org_url

        self.headers = {
            "Authorization": f"SSWS {self.settings.OKTA_API_TOKEN}",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": f"okta-policy-client/{__version__}",
        }

        self.logger.debug(
            f"Okta API client configured for {self.base_url} "
            f"(timeout: {self.timeout}s, max pages: {self.max_pages})"
        )

    def _build_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Build a full URL from an endpoint path, passing full URLs (pagination links) through."""
        if endpoint.startswith('http'):
            return endpoint

        if not endpoint.startswith('/'):
            endpoint = f'/{endpoint}'
        url = f"{self.base_url}{endpoint}"

        if params:
            query = {
                key: (str(value).lower() if isinstance(value, bool) else value)
                for key, value in params.items()
                if value is not None
            }
            if query:
                url += f"?{urlencode(query)}"
        return url

    async def request(self,
                      endpoint: str,
                      method: str = "GET",
                      params: Optional[Dict[str, Any]] = None,
                      body: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a single API request.

        Args:
            endpoint: API endpoint (e.g., "/api/v1/policies")
            method: HTTP method (GET, POST, PUT, DELETE)
            params: Query parameters
            body: JSON body for POST/PUT requests

        Returns:
            Decoded JSON body, or None when the response has no body

        Raises:
            OktaApiError: On any non-2xx response or transport failure
        """
        data, _ = await self._single_request(endpoint, method, params, body)
        return data

    async def paginate(self,
                       endpoint: str,
                       params: Optional[Dict[str, Any]] = None) -> AsyncIterator[Dict[str, Any]]:
        """
        Iterate over every item of a collection, one page at a time.

        Pages are fetched on demand; each call starts again from the first page.
        Iteration stops when there is no ``rel="next"`` link, a page comes back
        empty, or ``max_pages`` pages have been read.

        Raises:
            OktaApiError: If any page request fails
        """
        next_url: Optional[str] = self._build_url(endpoint, params)
        page_count = 0
        total_items = 0

        while next_url and page_count < self.max_pages:
            page_count += 1
            self.logger.debug(f"Fetching page {page_count} from: {next_url}")

            page_data, link_header = await self._single_request(next_url, "GET")

            if not page_data:
                self.logger.debug(f"Empty page {page_count} detected, stopping pagination")
                break

            items = page_data if isinstance(page_data, list) else [page_data]
            total_items += len(items)
            for item in items:
                yield item

            next_url = self._extract_next_url(link_header)

        if next_url and page_count >= self.max_pages:
            self.logger.warning(
                f"Stopped paginating {endpoint} after {page_count} pages (max_pages limit)"
            )
        self.logger.debug(f"Pagination complete for {endpoint}: {total_items} items across {page_count} pages")

    async def _single_request(self,
                              endpoint: str,
                              method: str,
                              params: Optional[Dict[str, Any]] = None,
                              body: Optional[Dict[str, Any]] = None) -> Tuple[Any, str]:
        """Make one HTTP call. Returns the decoded body and the joined Link headers."""
        url = self._build_url(endpoint, params)
        method = method.upper()
        self.logger.debug(f"API: {method} {url}")

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    json=body
                ) as response:
                    self._log_rate_limit(response)

                    payload = await self._read_body(response, endpoint, method)

                    if response.status >= 400:
                        error = build_api_error(
                            response.status,
                            payload,
                            endpoint=endpoint,
                            method=method,
                            retry_after=response.headers.get('Retry-After'),
                        )
                        error.log(self.logger)
                        raise error

                    # Okta sends one Link header per relation
                    link_headers = response.headers.getall('Link', [])
                    return payload, ', '.join(link_headers)

        except asyncio.TimeoutError as e:
            error = OktaApiError(
                f"Request timeout after {self.timeout} seconds",
                error_code="TIMEOUT",
                endpoint=endpoint,
                method=method,
                original_exception=e,
            )
            error.log(self.logger)
            raise error from e
        except aiohttp.ClientError as e:
            error = OktaApiError(
                f"Network error: {str(e)}",
                error_code="NETWORK_ERROR",
                endpoint=endpoint,
                method=method,
                original_exception=e,
            )
            error.log(self.logger)
            raise error from e

    async def _read_body(self, response: aiohttp.ClientResponse, endpoint: str, method: str) -> Any:
        """
        Decode a response body as JSON, falling back to text for non-JSON errors.

        A success response claiming JSON that does not parse raises
        UnsupportedResponseError; an error response keeps its raw text so the
        status still drives the error class.
        """
        if response.status == 204:
            return None

        text = await response.text()
        if not text:
            return None

        content_type = response.headers.get('Content-Type', '').lower()
        if 'json' in content_type:
            try:
                return json.loads(text)
            except ValueError as e:
                if response.status >= 400:
                    return text
                raise UnsupportedResponseError(
                    "Malformed JSON in Okta response",
                    status_code=response.status,
                    endpoint=endpoint,
                    method=method,
                    original_exception=e,
                ) from e
        return text

    def _log_rate_limit(self, response: aiohttp.ClientResponse) -> None:
        """Log Okta rate limit headers when they are getting low."""
        rate_limit_limit = response.headers.get('X-Rate-Limit-Limit')
        rate_limit_remaining = response.headers.get('X-Rate-Limit-Remaining')
        rate_limit_reset = response.headers.get('X-Rate-Limit-Reset')

        if not (rate_limit_limit and rate_limit_remaining):
            return

        try:
            remaining = int(rate_limit_remaining)
            limit = int(rate_limit_limit)
        except ValueError:
            return
        self.logger.debug(f"Rate limit status: {remaining}/{limit} requests remaining (reset: {rate_limit_reset})")

        if remaining <= (limit * 0.1):
            self.logger.warning(f"Rate limit critical: Only {remaining}/{limit} requests remaining until reset")

    def _extract_next_url(self, link_header: str) -> Optional[str]:
        """Extract next URL from Link header."""
        if not link_header or 'rel="next"' not in link_header:
            return None

        # Parse Link header: <URL>; rel="next"
        next_match = re.search(r'<([^>]+)>;\s*rel="next"', link_header)
        if not next_match:
            return None

        return next_match.group(1)
